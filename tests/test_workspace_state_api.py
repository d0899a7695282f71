# File: tests/test_workspace_state_api.py | Version: 1.0 | Path: /tests/test_workspace_state_api.py
KEYS = {"locationId": "loc-1", "workspaceId": "w1"}


def test_openapi_has_state_routes(client):
    r = client.get("/openapi.json")
    assert r.status_code == 200, r.text
    paths = r.json().get("paths", {})
    for p in ("/workspace-state", "/workspace-roles"):
        assert {"get", "post"} <= set(paths.get(p, {})), p
    assert "/healthz" in paths and "/readyz" in paths


def test_health_probes(client):
    assert client.get("/healthz").json()["status"] == "ok"
    r = client.get("/readyz")
    assert r.status_code == 200
    assert r.json()["db"] == "ok"


def test_missing_keys_are_rejected(client):
    assert client.get("/workspace-state", params={"locationId": "loc-1"}).status_code == 400
    r = client.post("/workspace-state", json={"workspaceId": "w1", "state": {}})
    assert r.status_code == 400
    r = client.post("/workspace-state", json=KEYS)
    assert r.status_code == 400


def test_unknown_workspace_has_null_state(client):
    r = client.get("/workspace-state", params=KEYS)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["ok"] is True
    assert body["state"] is None
    assert body["updatedAt"] is None
    assert body["role"] is None


def test_save_replaces_whole_document(client):
    first = {"tasks": [{"id": "t1", "title": "One"}], "userColors": {"a@x.com": "teal"}}
    r = client.post("/workspace-state", json={**KEYS, "userEmail": "a@x.com", "state": first})
    assert r.status_code == 200, r.text
    assert r.json()["state"] == first
    assert r.json()["updatedAt"]

    second = {"tasks": []}
    client.post("/workspace-state", json={**KEYS, "state": second})
    body = client.get("/workspace-state", params=KEYS).json()
    assert body["state"] == second

    # keyed by the (location, workspace) pair
    other = client.get("/workspace-state", params={"locationId": "loc-2", "workspaceId": "w1"})
    assert other.json()["state"] is None


def test_roles_are_advisory_and_case_insensitive(client):
    r = client.post(
        "/workspace-roles",
        json={**KEYS, "userEmail": "Boss@X.com", "role": "Manager"},
    )
    assert r.status_code == 200, r.text
    assert r.json() == {"userEmail": "boss@x.com", "role": "manager"}

    body = client.get("/workspace-state", params={**KEYS, "userEmail": "BOSS@x.com"}).json()
    assert body["role"] == "manager"

    r = client.get("/workspace-roles", params={**KEYS, "userEmail": "nobody@x.com"})
    assert r.json()["role"] is None

    r = client.post("/workspace-roles", json={**KEYS, "userEmail": "x@x.com", "role": "owner"})
    assert r.status_code == 422
