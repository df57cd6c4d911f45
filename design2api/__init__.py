"""Design-to-API package.

Subpackages:
- integrations: Figma REST client and design node model
- inference: Node summarizer, prompt builder, schema inference engine,
  response envelope validator and the deterministic base-schema generator

Top-level modules carry configuration, logging, the TTL cache, settings
encryption and credential handling.
"""

__version__ = "0.1.0"
