"""
Tests for the workflow HTTP routes.
"""
import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient

from conftest import FakeCollaborators, make_node, make_edge
from core.config import Settings
from core.container import container
from main import app
from services.workflow import WorkflowService


@pytest.fixture
def fake_collaborators():
    return FakeCollaborators()


@pytest.fixture
def client(fake_collaborators):
    service = WorkflowService(fake_collaborators, Settings())
    with container.workflow_service.override(providers.Object(service)):
        yield TestClient(app)


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"


class TestExecuteRoute:

    def test_execute_linear_graph(self, client, fake_collaborators, linear_graph):
        nodes, edges = linear_graph

        response = client.post("/api/workflow/execute", json={"nodes": nodes, "edges": edges})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["exec_path"] == ["trigger", "idea", "draft", "platform"]
        assert body["node_data"]["idea"]["ideas"] == ["idea1", "idea2"]
        assert fake_collaborators.calls == [
            ("generate_ideas", "cats"),
            ("generate_draft", "Cats at work"),
        ]

    def test_execute_without_trigger(self, client):
        response = client.post("/api/workflow/execute",
                               json={"nodes": [make_node("i", "ideaNode")], "edges": []})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["error_type"] == "NoStartNodeError"

    def test_strict_cycle_policy_from_request(self, client):
        nodes = [make_node("a", "triggerNode"), make_node("b", "platformNode")]
        edges = [make_edge("a", "b"), make_edge("b", "a")]

        response = client.post("/api/workflow/execute",
                               json={"nodes": nodes, "edges": edges, "cycle_policy": "strict"})

        assert response.json()["error_type"] == "CycleDetectedError"

    def test_unknown_cycle_policy_rejected(self, client):
        response = client.post("/api/workflow/execute",
                               json={"nodes": [], "edges": [], "cycle_policy": "sometimes"})
        assert response.status_code == 422

    def test_invalid_node_payload_is_422(self, client):
        nodes = [make_node("t", "triggerNode"), make_node("c", "conditionalNode", condition="hasVideo")]

        response = client.post("/api/workflow/execute", json={"nodes": nodes, "edges": []})

        assert response.status_code == 422
        assert isinstance(response.json()["detail"], list)


class TestGraphRoutes:

    def test_resolve_connections(self, client, linear_graph):
        nodes, edges = linear_graph

        response = client.post("/api/workflow/resolve-connections", json={"nodes": nodes, "edges": edges})

        assert response.status_code == 200
        resolved = {n["id"]: n for n in response.json()["nodes"]}
        assert resolved["draft"]["data"]["prompt"] == "Cats at work"
        assert resolved["draft"]["data"]["sourceNodes"][0]["id"] == "idea"

    def test_resolve_tolerates_invalid_known_payload(self, client):
        nodes = [
            make_node("i", "ideaNode", selectedIdea="X"),
            make_node("d", "draftNode", prompt=None),
            make_node("c", "conditionalNode", condition="contentLength"),
        ]
        edges = [make_edge("i", "d"), make_edge("d", "c")]

        response = client.post("/api/workflow/resolve-connections", json={"nodes": nodes, "edges": edges})

        assert response.status_code == 200
        resolved = {n["id"]: n for n in response.json()["nodes"]}
        assert resolved["d"]["data"]["prompt"] == "X"
        assert resolved["c"]["data"]["condition"] == "contentLength"

    def test_extract(self, client, linear_graph):
        nodes, _ = linear_graph

        response = client.post("/api/workflow/extract", json={"nodes": nodes})

        assert response.status_code == 200
        assert response.json()["data"]["idea"]["topic"] == "cats"
