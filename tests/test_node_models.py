"""
Tests for node and edge models.
"""
import pytest
from pydantic import ValidationError

from conftest import make_node
from models.nodes import (
    ConditionalNode,
    DraftNode,
    Edge,
    GenericNode,
    IdeaNode,
    MediaNode,
    TriggerNode,
    node_data_dict,
    node_to_dict,
    parse_edges,
    parse_node,
)


class TestParseNode:

    def test_known_types_dispatch_on_type(self):
        assert isinstance(parse_node(make_node("t", "triggerNode")), TriggerNode)
        assert isinstance(parse_node(make_node("i", "ideaNode")), IdeaNode)
        assert isinstance(parse_node(make_node("c", "conditionalNode")), ConditionalNode)

    def test_camel_case_fields(self):
        node = parse_node(make_node("i", "ideaNode", topic="cats", selectedIdea="x", hasGenerated=True))

        assert node.data.selected_idea == "x"
        assert node.data.has_generated is True
        assert node_data_dict(node)["selectedIdea"] == "x"

    def test_missing_data_gets_defaults(self):
        node = parse_node({"id": "d", "type": "draftNode"})

        assert isinstance(node, DraftNode)
        assert node.data.prompt == ""
        assert node.data.draft is None

    def test_extra_fields_are_kept(self):
        raw = make_node("t", "triggerNode", label="Start")
        node = parse_node(raw)

        dumped = node_to_dict(node)
        assert dumped["position"] == {"x": 0, "y": 0}
        assert dumped["data"]["label"] == "Start"

    def test_media_images_are_validated(self):
        with pytest.raises(ValidationError):
            parse_node(make_node("m", "mediaNode", images=[{"urls": {}}]))

    def test_media_image_round_trip_keeps_unknown_keys(self):
        image = {"id": "1", "urls": {"small": "s", "regular": "r"}, "color": "#fff"}
        node = parse_node(make_node("m", "mediaNode", selectedImage=image))

        assert isinstance(node, MediaNode)
        assert node_data_dict(node)["selectedImage"]["color"] == "#fff"

    def test_invalid_condition_rejected(self):
        with pytest.raises(ValidationError):
            parse_node(make_node("c", "conditionalNode", condition="hasVideo"))

    def test_invalid_known_payload_degrades_when_not_strict(self):
        node = parse_node(make_node("c", "conditionalNode", condition="hasVideo"), strict=False)

        assert isinstance(node, GenericNode)
        assert node.type == "conditionalNode"
        assert node_data_dict(node) == {"condition": "hasVideo"}

    @pytest.mark.parametrize("node_type, field", [
        ("ideaNode", "topic"),
        ("draftNode", "prompt"),
        ("mediaNode", "query"),
    ])
    def test_null_text_inputs_become_empty(self, node_type, field):
        node = parse_node(make_node("n", node_type, **{field: None}))
        assert node_data_dict(node)[field] == ""

    def test_missing_condition_allowed(self):
        node = parse_node(make_node("c", "conditionalNode"))
        assert node.data.condition is None

    def test_unknown_type_becomes_generic(self):
        node = parse_node(make_node("h", "hashtagNode", tags=["#a"]))

        assert isinstance(node, GenericNode)
        assert node.type == "hashtagNode"
        assert node_data_dict(node) == {"tags": ["#a"]}

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            parse_node({"type": "triggerNode", "data": {}})

    def test_models_pass_through(self):
        node = parse_node(make_node("t", "triggerNode"))
        assert parse_node(node) is node


class TestEdges:

    def test_source_handle_alias(self):
        (edge,) = parse_edges([{"id": "e1", "source": "c", "target": "x", "sourceHandle": "true"}])

        assert edge.source_handle == "true"
        assert edge.target_handle is None

    def test_edge_without_handle(self):
        edge = Edge(source="a", target="b")
        assert edge.source_handle is None

    def test_none_edges(self):
        assert parse_edges(None) == []
