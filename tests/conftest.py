"""
Shared fixtures and graph builders for workflow tests.
"""
import pytest


def make_node(node_id, node_type, **data):
    """Build a node dict the way the React Flow client sends it."""
    return {"id": node_id, "type": node_type, "position": {"x": 0, "y": 0}, "data": data}


def make_edge(source, target, handle=None):
    """Build an edge dict; handle is the conditional branch sourceHandle."""
    edge = {"id": f"e-{source}-{target}", "source": source, "target": target}
    if handle is not None:
        edge["sourceHandle"] = handle
    return edge


SAMPLE_IMAGE = {
    "id": "img_1",
    "urls": {"small": "https://img.test/s.jpg", "regular": "https://img.test/r.jpg"},
    "alt_description": "a cat",
    "user": {"name": "Photographer", "links": {"html": "https://img.test/u"}},
}


class FakeCollaborators:
    """In-memory stand-in for the content backend that records every call."""

    def __init__(self, ideas=None, draft="draft text", images=None, fail_on=()):
        self.ideas = ideas if ideas is not None else ["idea1", "idea2"]
        self.draft = draft
        self.images = images if images is not None else [SAMPLE_IMAGE]
        self.fail_on = set(fail_on)
        self.calls = []

    def _record(self, name, arg):
        self.calls.append((name, arg))
        if name in self.fail_on:
            raise RuntimeError(f"{name} unavailable")

    async def generate_ideas(self, topic):
        self._record("generate_ideas", topic)
        return list(self.ideas)

    async def generate_draft(self, prompt):
        self._record("generate_draft", prompt)
        return self.draft

    async def suggest_images(self, query):
        self._record("suggest_images", query)
        return list(self.images)


@pytest.fixture
def collaborators():
    return FakeCollaborators()


@pytest.fixture
def linear_graph():
    """Trigger -> Idea(topic=cats, selectedIdea) -> Draft -> Platform(facebook)."""
    nodes = [
        make_node("trigger", "triggerNode", label="Start"),
        make_node("idea", "ideaNode", topic="cats", selectedIdea="Cats at work"),
        make_node("draft", "draftNode"),
        make_node("platform", "platformNode", platform="facebook"),
    ]
    edges = [
        make_edge("trigger", "idea"),
        make_edge("idea", "draft"),
        make_edge("draft", "platform"),
    ]
    return nodes, edges
