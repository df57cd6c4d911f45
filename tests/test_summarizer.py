"""Tests for the node summarizer (design2api/inference/summarizer.py)."""

import pytest

from design2api.inference.summarizer import (
    summarize_components,
    summarize_frame,
    summarize_node,
)
from design2api.integrations.figma_types import DesignNode


@pytest.fixture
def login(login_frame):
    return DesignNode.model_validate(login_frame)


class TestSummarizeFrame:

    def test_leaf_frame_has_no_summaries(self):
        node = DesignNode(id="1", name="Empty", type="FRAME")
        assert summarize_frame(node) == []

    def test_empty_children_list(self):
        node = DesignNode(id="1", name="Empty", type="FRAME", children=[])
        assert summarize_frame(node) == []

    def test_one_summary_per_child_in_order(self, login):
        summaries = summarize_frame(login)
        assert len(summaries) == login.child_count
        assert [s.name for s in summaries] == ["Username", "Password", "SubmitButton"]

    def test_only_direct_children(self):
        node = DesignNode.model_validate({
            "id": "1", "name": "Outer", "type": "FRAME",
            "children": [{
                "id": "2", "name": "Group", "type": "GROUP",
                "children": [
                    {"id": "3", "name": "A", "type": "TEXT", "characters": "a"},
                    {"id": "4", "name": "B", "type": "TEXT", "characters": "b"},
                ],
            }],
        })
        summaries = summarize_frame(node)
        assert len(summaries) == 1
        assert summaries[0].children == 2
        assert summaries[0].text == ""


class TestSummarizeNode:

    def test_copies_name_kind_and_text(self, login):
        username = summarize_node(login.children[0])
        assert username.name == "Username"
        assert username.type == "TEXT"
        assert username.text == "Username"
        assert username.children == 0

    def test_properties_pass_through(self, login_frame, login):
        button = summarize_node(login.children[2])
        assert button.properties.fills == login_frame["children"][2]["fills"]
        assert button.properties.strokes == login_frame["children"][2]["strokes"]

    def test_scroll_behavior_carried(self):
        node = DesignNode.model_validate(
            {"id": "1", "name": "List", "type": "FRAME", "scrollBehavior": "FIXED"}
        )
        assert summarize_node(node).properties.scroll_behavior == "FIXED"

    def test_unknown_kind_kept_as_string(self):
        node = DesignNode.model_validate({"id": "1", "name": "Line", "type": "VECTOR"})
        assert summarize_node(node).type == "VECTOR"


class TestPromptDict:

    def test_absent_properties_omitted(self, login):
        password = summarize_components(login.children)[1]
        assert password.to_prompt_dict() == {
            "name": "Password",
            "type": "TEXT",
            "text": "Password",
            "children": 0,
            "properties": {},
        }

    def test_scroll_behavior_uses_camel_case(self):
        node = DesignNode.model_validate(
            {"id": "1", "name": "List", "type": "FRAME", "scrollBehavior": "SCROLLS"}
        )
        assert summarize_node(node).to_prompt_dict()["properties"] == {
            "scrollBehavior": "SCROLLS"
        }
