"""Integration tests for the notification endpoints and the realtime socket."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

PASSWORD = "Secret123"


@pytest.fixture()
def client():
    """Return a test client bound to a clean application instance."""

    from ispmedia.infrastructure import database

    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.initialize_database()

    from main import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _create_admin() -> int:
    from ispmedia.application.use_cases.users import create_user
    from ispmedia.infrastructure.database import SessionLocal

    session = SessionLocal()
    try:
        admin = create_user(
            session,
            username="admin",
            email="admin@example.com",
            password=PASSWORD,
            is_admin=True,
        )
    finally:
        session.close()
    return admin.id


def _register(client: TestClient, username: str) -> int:
    response = client.post(
        "/users/",
        json={"username": username, "email": f"{username}@example.com", "password": PASSWORD},
    )
    assert response.status_code == 201
    return response.json()["id"]


def _auth(client: TestClient, login: str) -> dict[str, str]:
    response = client.post("/auth/token", data={"username": login, "password": PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def _file_share_body(user_id: int) -> dict:
    return {
        "user_id": user_id,
        "type": "file_share",
        "title": "Ficheiro Partilhado",
        "message": 'ana partilhou o ficheiro "aula.pdf" consigo',
        "data": {"file_name": "aula.pdf", "shared_by": "ana"},
    }


def test_created_notification_is_pushed_to_registered_socket(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "maria")
    hub = client.app.state.realtime

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "register_user", "user_id": user_id})
        assert websocket.receive_json() == {"type": "registered", "data": {"user_id": user_id}}

        response = client.post(
            "/notifications/", json=_file_share_body(user_id), headers=admin_headers
        )
        assert response.status_code == 201
        pushed = websocket.receive_json()

    created = response.json()["notification"]
    assert response.json()["message"] == "Notificação criada com sucesso"
    assert pushed["type"] == "notification"
    assert pushed["data"]["id"] == created["id"]
    assert pushed["data"]["type"] == "file_share"
    assert pushed["data"]["title"] == "Ficheiro Partilhado"
    assert pushed["data"]["data"] == {"file_name": "aula.pdf", "shared_by": "ana"}
    assert pushed["data"]["is_read"] is False

    assert hub.registry.lookup(user_id) is None


def test_websocket_ping_and_invalid_registration(client: TestClient):
    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "ping"})
        assert websocket.receive_json() == {"type": "pong"}

        websocket.send_json({"type": "register_user", "user_id": "abc"})
        reply = websocket.receive_json()
        assert reply["type"] == "error"

        websocket.send_json({"type": "register_user", "user_id": "12"})
        assert websocket.receive_json() == {"type": "registered", "data": {"user_id": 12}}


def test_offline_user_finds_notification_in_list(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "joao")

    response = client.post("/notifications/", json=_file_share_body(user_id), headers=admin_headers)
    assert response.status_code == 201

    user_headers = _auth(client, "joao")
    listing = client.get("/notifications/", headers=user_headers)
    assert listing.status_code == 200
    body = listing.json()
    assert body["unread_count"] == 1
    assert [n["title"] for n in body["notifications"]] == ["Ficheiro Partilhado"]


def test_read_delete_and_clear_flow(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "rita")
    ids = []
    for _ in range(3):
        response = client.post(
            "/notifications/", json=_file_share_body(user_id), headers=admin_headers
        )
        ids.append(response.json()["notification"]["id"])
    headers = _auth(client, "rita")

    detail = client.get(f"/notifications/{ids[0]}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["id"] == ids[0]

    assert client.put(f"/notifications/{ids[0]}/read", headers=headers).status_code == 200
    unread = client.get("/notifications/?unread_only=true", headers=headers).json()
    assert unread["unread_count"] == 2
    assert {n["id"] for n in unread["notifications"]} == set(ids[1:])

    assert client.delete(f"/notifications/{ids[1]}", headers=headers).status_code == 200
    assert client.get(f"/notifications/{ids[1]}", headers=headers).status_code == 404

    assert client.put("/notifications/read-all", headers=headers).status_code == 200
    cleared = client.delete("/notifications/clear-read", headers=headers)
    assert cleared.status_code == 200
    assert cleared.json()["deleted_count"] == 2
    assert client.get("/notifications/", headers=headers).json() == {
        "notifications": [],
        "unread_count": 0,
    }


def test_users_cannot_touch_other_users_notifications(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    owner_id = _register(client, "owner")
    _register(client, "intruder")
    created = client.post(
        "/notifications/", json=_file_share_body(owner_id), headers=admin_headers
    ).json()["notification"]
    headers = _auth(client, "intruder")

    assert client.get(f"/notifications/{created['id']}", headers=headers).status_code == 404
    assert client.put(f"/notifications/{created['id']}/read", headers=headers).status_code == 404
    assert client.delete(f"/notifications/{created['id']}", headers=headers).status_code == 404


def test_create_notification_requires_admin_and_valid_payload(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "comum")
    user_headers = _auth(client, "comum")

    forbidden = client.post("/notifications/", json=_file_share_body(user_id), headers=user_headers)
    assert forbidden.status_code == 403

    missing_user = client.post("/notifications/", json=_file_share_body(999), headers=admin_headers)
    assert missing_user.status_code == 404
    assert missing_user.json()["detail"] == "Utilizador não encontrado"

    bad_type = dict(_file_share_body(user_id), type="group_join")
    assert client.post("/notifications/", json=bad_type, headers=admin_headers).status_code == 422

    blank_title = dict(_file_share_body(user_id), title="   ")
    assert client.post("/notifications/", json=blank_title, headers=admin_headers).status_code == 422

    assert client.get("/notifications/").status_code == 401


def test_promotion_pushes_editor_notification(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "pedro")

    with client.websocket_connect("/ws") as websocket:
        websocket.send_json({"type": "register_user", "user_id": user_id})
        websocket.receive_json()

        response = client.put(f"/users/{user_id}/promote", headers=admin_headers)
        assert response.status_code == 200
        pushed = websocket.receive_json()

    assert pushed["data"]["type"] == "editor_promotion"
    assert pushed["data"]["data"] == {"promoted_by": "admin"}
    assert client.put(f"/users/{user_id}/promote", headers=admin_headers).status_code == 400
    assert client.put("/users/999/promote", headers=admin_headers).status_code == 404

    me = client.get("/users/me", headers=_auth(client, "pedro"))
    assert me.json()["is_editor"] is True


def test_editor_broadcasts_content_update(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    editor_id = _register(client, "editora")
    listener_id = _register(client, "ouvinte")
    client.put(f"/users/{editor_id}/promote", headers=admin_headers)
    editor_headers = _auth(client, "editora")

    response = client.post(
        "/notifications/content-update",
        json={
            "user_ids": [listener_id, 999],
            "title": "Novo álbum",
            "message": "Foi adicionado um novo álbum",
            "content_type": "album",
            "content_id": 5,
        },
        headers=editor_headers,
    )
    assert response.status_code == 200
    assert response.json()["recipients"] == 1

    listener = client.get("/notifications/", headers=_auth(client, "ouvinte")).json()
    assert listener["notifications"][0]["data"] == {"content_type": "album", "content_id": 5}

    to_editors = client.post(
        "/notifications/content-update",
        json={"title": "Revisão", "message": "Há conteúdos para rever"},
        headers=editor_headers,
    )
    assert to_editors.json()["recipients"] == 1

    plain = client.post(
        "/notifications/content-update",
        json={"title": "x", "message": "y"},
        headers=_auth(client, "ouvinte"),
    )
    assert plain.status_code == 403


def test_invalid_content_id_is_a_bad_request(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "lucia")

    for content_id in ([1], 1.5):
        response = client.post(
            "/notifications/",
            json={
                "user_id": user_id,
                "type": "content_update",
                "title": "Novo álbum",
                "message": "Foi adicionado um novo álbum",
                "data": {"content_id": content_id},
            },
            headers=admin_headers,
        )
        assert response.status_code == 400

    listing = client.get("/notifications/", headers=_auth(client, "lucia")).json()
    assert listing["notifications"] == []


def test_notification_data_is_returned_as_sent(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    user_id = _register(client, "sara")
    data = {"group_id": 3, "group_name": "Jazz", "invited_by": "ana", "discussion_id": 9}

    response = client.post(
        "/notifications/",
        json={
            "user_id": user_id,
            "type": "group_invitation",
            "title": "Convite para Grupo",
            "message": 'Foi convidado para o grupo "Jazz"',
            "data": data,
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["notification"]["data"] == data
    listing = client.get("/notifications/", headers=_auth(client, "sara")).json()
    assert listing["notifications"][0]["data"] == data


def test_editor_can_promote_another_user(client: TestClient):
    _create_admin()
    admin_headers = _auth(client, "admin")
    editor_id = _register(client, "editor")
    user_id = _register(client, "candidato")
    assert client.put(f"/users/{editor_id}/promote", headers=admin_headers).status_code == 200
    editor_headers = _auth(client, "editor")

    response = client.put(f"/users/{user_id}/promote", headers=editor_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Utilizador candidato promovido a editor com sucesso"
    promoted = client.get("/notifications/", headers=_auth(client, "candidato")).json()
    assert promoted["notifications"][0]["data"] == {"promoted_by": "editor"}


def test_regular_user_cannot_promote(client: TestClient):
    _register(client, "comum")
    target_id = _register(client, "alvo")

    response = client.put(f"/users/{target_id}/promote", headers=_auth(client, "comum"))

    assert response.status_code == 403


def test_bootstrap_admin_can_read_own_profile(client: TestClient):
    from scripts.create_initial_user import main as create_initial_user

    create_initial_user(["--password", PASSWORD])

    response = client.get("/users/me", headers=_auth(client, "admin"))

    assert response.status_code == 200
    assert response.json()["email"] == "admin@example.com"
    assert response.json()["is_admin"] is True
