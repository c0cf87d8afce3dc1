import json

from fastapi.testclient import TestClient

from tests.fakes import make_graph, make_note


def test_health(test_client: TestClient) -> None:
    response = test_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_status_endpoint(test_client: TestClient) -> None:
    """Test that status reports note count, selection and diagnostics."""
    response = test_client.get("/api/status")
    assert response.status_code == 200

    status = response.json()
    assert status["note_count"] == 6
    assert status["selected_note_id"] == 1
    assert status["summary"] == "Valid with 1 warning(s)"
    assert status["dirty"] is False


def test_load_graph(test_client: TestClient) -> None:
    """Test that uploading a document replaces the graph."""
    document = make_graph([make_note(7), make_note(8)], cluster_labels=[0, 1])
    response = test_client.post(
        "/api/graph", params={"file_name": "other.json"}, content=json.dumps(document)
    )
    assert response.status_code == 200

    status = response.json()
    assert status["file_name"] == "other.json"
    assert status["note_count"] == 2
    assert status["selected_note_id"] == 7
    assert status["summary"] == "Valid"


def test_load_graph_parse_error(test_client: TestClient) -> None:
    """Test that a malformed upload is rejected and the graph kept."""
    response = test_client.post("/api/graph", content="[1, 2]")
    assert response.status_code == 400
    assert "Root JSON must be an object." in response.text

    assert test_client.get("/api/status").json()["note_count"] == 6


def test_export_graph(test_client: TestClient) -> None:
    response = test_client.get("/api/graph/export")
    assert response.status_code == 200
    assert "smg-edited.json" in response.headers["content-disposition"]

    exported = response.json()
    assert exported["extra_top_level"] == "keep me"
    assert len(exported["notes"]) == 6


def test_export_refused_with_errors(test_client: TestClient) -> None:
    """Test that export answers 409 with the blocking errors."""
    document = make_graph([make_note(1), make_note(1)])
    test_client.post("/api/graph", content=json.dumps(document))

    response = test_client.get("/api/graph/export")
    assert response.status_code == 409
    assert response.json()["detail"] == ["Duplicate note_id: 1"]


def test_export_without_graph() -> None:
    from smgview.api import create_app
    from smgview.session import GraphSession

    client = TestClient(create_app(session=GraphSession()))

    response = client.get("/api/graph/export")
    assert response.status_code == 404


def test_list_notes(test_client: TestClient) -> None:
    response = test_client.get("/api/notes", params={"sort": "id_desc", "limit": 3})
    assert response.status_code == 200

    notes = response.json()
    assert [note["note_id"] for note in notes] == [6, 5, 4]
    assert notes[0]["snippet"] == "context 6"


def test_list_notes_query(test_client: TestClient) -> None:
    response = test_client.get("/api/notes", params={"query": "context 3"})
    assert [note["note_id"] for note in response.json()] == [3]


def test_list_notes_bad_sort(test_client: TestClient) -> None:
    response = test_client.get("/api/notes", params={"sort": "random"})
    assert response.status_code == 422


def test_note_endpoint_returns_note(test_client: TestClient) -> None:
    """Test that note endpoint returns correct note."""
    response = test_client.get("/api/notes/2")
    assert response.status_code == 200

    detail = response.json()
    assert detail["note_id"] == 2
    assert detail["related_links_text"] == "1:0.400, 3:0.200"
    assert detail["cluster"] == 0


def test_note_endpoint_not_found(test_client: TestClient) -> None:
    """Test that note endpoint handles missing notes."""
    response = test_client.get("/api/notes/42")
    assert response.status_code == 404
    assert "Note not found" in response.text


def test_edit_note(test_client: TestClient) -> None:
    """Test that editing drops unknown targets and marks the session dirty."""
    response = test_client.put(
        "/api/notes/1", json={"context": "edited", "related_links": "5:0.9, 5:0.3, 999:0.1"}
    )
    assert response.status_code == 200
    assert response.json()["warnings"] == ["Dropped missing related links for 1: 999"]

    detail = test_client.get("/api/notes/1").json()
    assert detail["context"] == "edited"
    assert detail["related_links_text"] == "5:0.900"
    assert test_client.get("/api/status").json()["dirty"] is True


def test_edit_unknown_note(test_client: TestClient) -> None:
    response = test_client.put("/api/notes/42", json={"context": "x"})
    assert response.status_code == 404


def test_delete_note(test_client: TestClient) -> None:
    response = test_client.delete("/api/notes/3")
    assert response.status_code == 200
    assert response.json()["changed"] is True

    assert test_client.get("/api/notes/3").status_code == 404
    assert test_client.get("/api/status").json()["note_count"] == 5


def test_delete_unknown_note_is_noop(test_client: TestClient) -> None:
    response = test_client.delete("/api/notes/42")
    assert response.status_code == 200
    assert response.json()["changed"] is False


def test_select_note(test_client: TestClient) -> None:
    response = test_client.post("/api/notes/5/select")
    assert response.status_code == 200
    assert response.json()["selected_note_id"] == 5

    assert test_client.post("/api/notes/42/select").status_code == 404


def test_neighborhood_view(test_client: TestClient) -> None:
    """Test that scenes come back with camelCase keys."""
    response = test_client.post(
        "/api/views",
        json={"mode": "neighborhood", "noteId": 4, "includeLongRange": False},
    )
    assert response.status_code == 200

    scene = response.json()
    assert scene["mode"] == "neighborhood"
    assert scene["nodes"] == [
        {"id": 4, "kind": "selected", "cluster": 1},
        {"id": 1, "kind": "inbound", "cluster": 0},
    ]
    assert scene["edges"] == [{"source": 1, "target": 4, "kind": "related_in", "score": 0.7}]
    assert scene["scoreValues"] == [0.7]
    assert scene["thresholdRaw"] == 0.0


def test_cluster_matrix_view(test_client: TestClient) -> None:
    response = test_client.post("/api/views", json={"mode": "cluster_matrix"})
    assert response.status_code == 200

    scene = response.json()
    assert scene["clusters"] == [0, 1, 2]
    assert {"clusterA", "clusterB", "maxScore", "meanScore", "hidden"} <= set(scene["cells"][0])


def test_invalid_view_request(test_client: TestClient) -> None:
    response = test_client.post("/api/views", json={"mode": "neighborhood", "depth": 9})
    assert response.status_code == 422
    assert isinstance(response.json()["detail"], list)


def test_load_graph_undecodable_body(test_client: TestClient) -> None:
    """Test that bytes that are not UTF-8 give a 400 and keep the graph."""
    response = test_client.post("/api/graph", content=b'{"notes": [], "x": "\xff"}')
    assert response.status_code == 400

    assert test_client.get("/api/status").json()["note_count"] == 6
