"""Run the API server: python -m app"""

import uvicorn

from design2api.config import API_HOST, API_PORT


def main() -> None:
    uvicorn.run("app.main:app", host=API_HOST, port=API_PORT)


if __name__ == "__main__":
    main()
