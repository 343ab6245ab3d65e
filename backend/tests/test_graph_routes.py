"""Tests for the editor graph endpoints."""

from conftest import read_document, write_document


async def test_get_graph(client):
    resp = await client.get("/api/graph/")
    assert resp.status_code == 200
    data = resp.json()
    assert [n["id"] for n in data["nodes"]] == ["start", "end"]
    assert data["edges"] == [
        {"id": "start-end", "source": "start", "target": "end", "label": "Bye"}
    ]
    assert data["nodes"][0]["data"] == {"speaker": "A", "text": "Hi", "label": "Hi"}


async def test_get_graph_without_start(client, dialogue_file):
    write_document(dialogue_file, {"intro": {"text": "Hi"}})
    resp = await client.get("/api/graph/")
    assert resp.status_code == 500
    assert "start" in resp.json()["detail"]


async def test_reload_picks_up_file_changes(client, dialogue_file):
    await client.get("/api/graph/")
    write_document(dialogue_file, {"start": {"text": "Rewritten"}})

    resp = await client.post("/api/graph/reload")
    assert resp.status_code == 200
    assert resp.json()["nodes"][0]["data"]["text"] == "Rewritten"
    assert resp.json()["edges"] == []


async def test_create_node_route(client, dialogue_file):
    resp = await client.post(
        "/api/graph/nodes",
        json={"source_id": "start", "text": "New line", "label": "Go"},
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    new_id = data["node_id"]
    assert data["edge_id"] == f"start-{new_id}"

    saved = read_document(dialogue_file)
    assert saved[new_id]["text"] == "New line"
    assert saved["start"]["choices"][-1] == {"speaker": "Player", "text": "Go", "next": new_id}


async def test_create_node_blank_text(client):
    resp = await client.post("/api/graph/nodes", json={"source_id": "start", "text": " "})
    assert resp.status_code == 400


async def test_create_node_unknown_source(client):
    resp = await client.post("/api/graph/nodes", json={"source_id": "ghost", "text": "Hi"})
    assert resp.status_code == 404
    assert "not found" in resp.json()["detail"].lower()


async def test_move_node_only_stays_in_memory(client, dialogue_file):
    resp = await client.patch("/api/graph/nodes/end", json={"position": {"x": 5, "y": 6}})
    assert resp.status_code == 200
    assert read_document(dialogue_file)["end"]["position"] == {"x": 400, "y": 0}

    resp = await client.post("/api/graph/save")
    assert resp.status_code == 200
    assert read_document(dialogue_file)["end"]["position"] == {"x": 5, "y": 6}


async def test_update_node_text(client, dialogue_file):
    resp = await client.patch("/api/graph/nodes/end", json={"text": "Farewell!"})
    assert resp.status_code == 200
    assert resp.json()["node_id"] == "end"
    assert read_document(dialogue_file)["end"]["text"] == "Farewell!"


async def test_update_unknown_node(client):
    resp = await client.patch("/api/graph/nodes/ghost", json={"text": "Boo"})
    assert resp.status_code == 404


async def test_delete_node_route(client, dialogue_file):
    resp = await client.delete("/api/graph/nodes/end")
    assert resp.status_code == 200
    saved = read_document(dialogue_file)
    assert "end" not in saved
    assert saved["start"]["choices"] == []

    graph = (await client.get("/api/graph/")).json()
    assert graph["edges"] == []


async def test_delete_start_route(client):
    resp = await client.delete("/api/graph/nodes/start")
    assert resp.status_code == 400


async def test_connect_and_save(client, dialogue_file):
    resp = await client.post(
        "/api/graph/edges", json={"source": "end", "target": "start", "label": "Again"}
    )
    assert resp.status_code == 201
    assert resp.json()["id"] == "end-start"

    resp = await client.post("/api/graph/save")
    assert resp.json()["success"] is True
    assert read_document(dialogue_file)["end"]["choices"] == [
        {"speaker": "Player", "text": "Again", "next": "start"}
    ]


async def test_connect_unknown_target(client):
    resp = await client.post("/api/graph/edges", json={"source": "start", "target": "ghost"})
    assert resp.status_code == 404


async def test_edit_edge_label_route(client, dialogue_file):
    resp = await client.patch("/api/graph/edges/start-end", json={"label": "Later"})
    assert resp.status_code == 200
    assert read_document(dialogue_file)["start"]["choices"][0]["text"] == "Later"


async def test_delete_edge_route(client, dialogue_file):
    resp = await client.delete("/api/graph/edges/start-end")
    assert resp.status_code == 200
    saved = read_document(dialogue_file)
    assert saved["start"]["choices"] == []
    assert saved["end"]["text"] == "Bye!"


async def test_delete_unknown_edge(client):
    resp = await client.delete("/api/graph/edges/start-ghost")
    assert resp.status_code == 404


async def test_failed_save_returns_500(client, store, tmp_path):
    await client.get("/api/graph/")
    store.path = tmp_path

    resp = await client.delete("/api/graph/edges/start-end")
    assert resp.status_code == 500
    data = resp.json()
    assert data["success"] is False
    assert data["error"]
