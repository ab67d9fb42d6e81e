"""HTTP API tests: auth, design CRUD, preferences, catalog and editor helpers."""
import asyncio
import uuid

from seed import seed


def _design(**kw):
    body = {
        "name": "Study",
        "description": "Quiet corner",
        "room_width": 12,
        "room_length": 15,
        "room_height": 8,
        "wall_color": "#808080",
        "furniture": [{
            "id": str(uuid.uuid4()), "type": "desk", "name": "Desk",
            "width": 18, "height": 30, "depth": 10, "color": "#ec4899",
            "x": 50, "y": 30, "rotation": 0,
        }],
    }
    body.update(kw)
    return body


def test_health(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_protected_routes_need_login(client):
    client.cookies.clear()
    assert client.get("/api/designs").status_code == 401
    assert client.get("/api/user").status_code == 401
    assert client.get("/api/designs", headers={"Authorization": "Bearer bogus"}).status_code == 401


def test_register_login_logout(client):
    username = f"user_{uuid.uuid4().hex[:8]}"
    r = client.post("/api/register", json={"username": username, "password": "secret123"})
    assert r.status_code == 201
    assert r.json()["user"]["username"] == username

    r = client.post("/api/register", json={"username": username, "password": "secret123"})
    assert r.status_code == 400

    assert client.post("/api/login", json={"username": username, "password": "wrong!!"}).status_code == 401
    r = client.post("/api/login", json={"username": username, "password": "secret123"})
    assert r.status_code == 200
    headers = {"Authorization": f"Bearer {r.json()['token']}"}
    assert client.get("/api/user", headers=headers).json()["username"] == username

    client.post("/api/logout", headers=headers)
    assert client.get("/api/user", headers=headers).status_code == 401


def test_register_validation(client):
    r = client.post("/api/register", json={"username": "ab", "password": "123"})
    assert r.status_code == 400
    assert "errors" in r.json()


def test_design_crud(client, auth_headers):
    r = client.post("/api/designs", json=_design(), headers=auth_headers)
    assert r.status_code == 201, r.text
    design = r.json()
    assert design["furniture"][0]["type"] == "desk"
    design_id = design["id"]

    r = client.get(f"/api/designs/{design_id}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Study"

    r = client.patch(f"/api/designs/{design_id}", json={"name": "Office"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Office"
    assert r.json()["room_width"] == 12
    assert len(r.json()["furniture"]) == 1

    r = client.patch(f"/api/designs/{design_id}", json={"furniture": []}, headers=auth_headers)
    assert r.json()["furniture"] == []

    r = client.delete(f"/api/designs/{design_id}", headers=auth_headers)
    assert r.status_code == 200
    assert client.get(f"/api/designs/{design_id}", headers=auth_headers).status_code == 404


def test_design_validation(client, auth_headers):
    assert client.post("/api/designs", json=_design(name=""), headers=auth_headers).status_code == 400
    assert client.post("/api/designs", json=_design(room_width=0), headers=auth_headers).status_code == 400

    bad_item = _design()["furniture"][0] | {"x": 120}
    r = client.post("/api/designs", json=_design(furniture=[bad_item]), headers=auth_headers)
    assert r.status_code == 400

    assert client.get("/api/designs/abc", headers=auth_headers).status_code == 400


def test_designs_are_private(client, auth_headers):
    design_id = client.post("/api/designs", json=_design(), headers=auth_headers).json()["id"]

    other = f"user_{uuid.uuid4().hex[:8]}"
    token = client.post("/api/register", json={"username": other, "password": "secret123"}).json()["token"]
    other_headers = {"Authorization": f"Bearer {token}"}

    assert client.get(f"/api/designs/{design_id}", headers=other_headers).status_code == 403
    assert client.patch(f"/api/designs/{design_id}", json={"name": "x"}, headers=other_headers).status_code == 403
    assert client.delete(f"/api/designs/{design_id}", headers=other_headers).status_code == 403
    assert client.get("/api/designs", headers=other_headers).json() == []


def test_list_and_recent_order(client, auth_headers):
    ids = [client.post("/api/designs", json=_design(name=f"D{i}"), headers=auth_headers).json()["id"]
           for i in range(7)]
    client.patch(f"/api/designs/{ids[0]}", json={"description": "touched"}, headers=auth_headers)

    listed = client.get("/api/designs", headers=auth_headers).json()
    assert len(listed) == 7
    assert listed[0]["id"] == ids[0]

    recent = client.get("/api/designs/recent", headers=auth_headers).json()
    assert len(recent) == 5
    recent = client.get("/api/designs/recent?limit=2", headers=auth_headers).json()
    assert [d["id"] for d in recent] == [d["id"] for d in listed[:2]]


def test_layout_check_and_model_export(client, auth_headers):
    item = _design()["furniture"][0]
    twin = item | {"id": str(uuid.uuid4())}
    design_id = client.post("/api/designs", json=_design(furniture=[item, twin]),
                            headers=auth_headers).json()["id"]

    r = client.get(f"/api/designs/{design_id}/layout-check", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["overlaps"] == [[item["id"], twin["id"]]]
    assert r.json()["is_valid"] is False

    r = client.get(f"/api/designs/{design_id}/model", headers=auth_headers)
    assert r.status_code == 200
    assert r.headers["content-type"] == "model/gltf-binary"
    assert r.content[:4] == b"glTF"


def test_preferences_upsert(client, auth_headers):
    assert client.get("/api/user-preferences", headers=auth_headers).json() is None

    r = client.post("/api/user-preferences", json={"default_theme": "dark"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["default_theme"] == "dark"
    assert r.json()["default_room_width"] == "12"
    first_id = r.json()["id"]

    r = client.post("/api/user-preferences", json={"default_theme": "light", "enable_auto_save": True},
                    headers=auth_headers)
    assert r.json()["id"] == first_id
    assert r.json()["enable_auto_save"] is True

    r = client.post("/api/user-preferences", json={"default_theme": "neon"}, headers=auth_headers)
    assert r.status_code == 400


def test_update_own_account_only(client, auth_headers):
    me = client.get("/api/user", headers=auth_headers).json()
    r = client.patch(f"/api/users/{me['id']}", json={"full_name": "Jo Doe"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["full_name"] == "Jo Doe"

    assert client.patch(f"/api/users/{me['id'] + 1000}", json={"email": "x@y.z"},
                        headers=auth_headers).status_code == 403


def test_change_password(client, auth_headers):
    r = client.post("/api/user/password", json={"current_password": "nope", "new_password": "another1"},
                    headers=auth_headers)
    assert r.status_code == 400
    r = client.post("/api/user/password", json={"current_password": "secret123", "new_password": "another1"},
                    headers=auth_headers)
    assert r.status_code == 200


def test_catalog(client):
    assert len(client.get("/api/catalog").json()) == 10
    seating = client.get("/api/catalog?category=seating").json()
    assert {i["type"] for i in seating} == {"sofa", "chair", "dining_chair"}
    assert client.get("/api/catalog/categories").json() == ["seating", "tables", "storage", "bedroom"]

    presets = client.get("/api/catalog/bed/presets").json()
    assert presets["medium"] == {"width": 48, "height": 30, "depth": 48}
    assert client.get("/api/catalog/piano/presets").status_code == 404


def test_editor_helpers(client):
    room = {"width": 12, "length": 15, "height": 8}
    item = client.post("/api/editor/items", json={"type": "sofa"}).json()
    assert (item["x"], item["y"]) == (50, 50)
    assert client.post("/api/editor/items", json={"type": "piano"}).status_code == 400

    assert client.post("/api/editor/to-world", json={"room": room, "x": 0, "y": 100}).json() == {"x": -7.5, "z": 6.0}
    assert client.post("/api/editor/to-plan", json={"room": room, "x": 0, "z": 0}).json() == {"x": 50.0, "y": 50.0}

    moved = client.post("/api/editor/nudge", json={"room": room, "item": item, "key": "e"}).json()
    assert moved["rotation"] == 5
    assert client.post("/api/editor/nudge", json={"room": room, "item": item, "key": "x"}).status_code == 400

    dropped = client.post("/api/editor/drop", json={
        "item": item, "client_x": 390, "client_y": 10,
        "rect": {"left": 0, "top": 0, "width": 400, "height": 400},
    }).json()
    assert (dropped["x"], dropped["y"]) == (96, 2.5)

    big = item | {"width": 90, "height": 60, "depth": 60}
    r = client.post("/api/editor/pick", json={
        "room": room, "items": [big], "client_x": 205, "client_y": 155,
        "rect": {"left": 0, "top": 0, "width": 400, "height": 300},
    })
    assert r.json()["item_id"] == item["id"]


def test_seed_is_idempotent(client):
    first = asyncio.run(seed())
    second = asyncio.run(seed())
    assert first == second

    token = client.post("/api/login", json={"username": "admin", "password": "password"}).json()["token"]
    designs = client.get("/api/designs", headers={"Authorization": f"Bearer {token}"}).json()
    assert sorted(d["name"] for d in designs) == ["Home Office", "Living Room Setup"]


def test_patch_rejects_null_fields(client, auth_headers):
    design = client.post("/api/designs", json=_design(), headers=auth_headers).json()
    url = f"/api/designs/{design['id']}"

    for field in ("name", "room_width", "room_length", "room_height", "wall_color", "furniture"):
        r = client.patch(url, json={field: None}, headers=auth_headers)
        assert r.status_code == 400, field
        assert "errors" in r.json()

    stored = client.get(url, headers=auth_headers).json()
    assert stored["name"] == "Study"
    assert stored["room_width"] == 12
    assert len(stored["furniture"]) == 1

    r = client.patch(url, json={"description": None}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["description"] is None


def test_wall_color_must_be_hex(client, auth_headers):
    r = client.post("/api/designs", json=_design(wall_color="white"), headers=auth_headers)
    assert r.status_code == 400

    design_id = client.post("/api/designs", json=_design(), headers=auth_headers).json()["id"]
    r = client.patch(f"/api/designs/{design_id}", json={"wall_color": "#12345"}, headers=auth_headers)
    assert r.status_code == 400
    r = client.patch(f"/api/designs/{design_id}", json={"wall_color": "#A0b1C2"}, headers=auth_headers)
    assert r.status_code == 200
    assert client.get(f"/api/designs/{design_id}/layout-check", headers=auth_headers).status_code == 200
