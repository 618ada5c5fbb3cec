"""Producers persist notifications before pushing them to online users."""

import pytest

from ispmedia.application.use_cases.notifications import (
    create_notification,
    notify_content_update,
    notify_file_share,
    notify_group_invitation,
)
from ispmedia.application.use_cases.users import create_user, promote_to_editor
from ispmedia.domain.entities import GroupInvitationData, NotificationType
from ispmedia.infrastructure.repositories import NotificationRepository, UserRepository


def _user(session, username: str, **flags):
    return create_user(
        session,
        username=username,
        email=f"{username}@example.com",
        password="Secret123",
        **flags,
    )


def test_file_share_is_stored_and_pushed_to_online_user(db_session, hub, transport):
    user = _user(db_session, "maria")
    hub.on_user_register(user.id, "A")

    saved = notify_file_share(
        db_session, hub, user_id=user.id, file_name="aula.pdf", shared_by="ana"
    )

    assert saved.id is not None
    assert saved.title == "Ficheiro Partilhado"
    assert saved.message == 'ana partilhou o ficheiro "aula.pdf" consigo'
    [(connection, event, payload)] = transport.sent
    assert (connection, event) == ("A", "notification")
    assert payload["id"] == saved.id
    assert payload["data"] == {"file_name": "aula.pdf", "shared_by": "ana"}
    assert payload["is_read"] is False


def test_offline_user_only_gets_the_stored_row(db_session, hub, transport):
    user = _user(db_session, "joao")

    notify_group_invitation(
        db_session, hub, user_id=user.id, group_id=3, group_name="Kizomba", invited_by="rui"
    )

    assert transport.sent == []
    [stored] = NotificationRepository(db_session).list_for_user(user.id)
    assert stored.type is NotificationType.GROUP_INVITATION
    assert stored.data == GroupInvitationData(group_id=3, group_name="Kizomba", invited_by="rui")


def test_content_update_stores_one_row_per_recipient(db_session, hub, transport):
    users = [_user(db_session, name) for name in ("u1", "u2", "u3")]
    hub.on_user_register(users[0].id, "c1")
    hub.on_user_register(users[2].id, "c3")

    saved = notify_content_update(
        db_session,
        hub,
        user_ids=[user.id for user in users],
        title="Novo álbum",
        message="Foi adicionado um novo álbum",
        content_type="album",
        content_id=10,
    )

    assert len(saved) == 3
    assert sorted(target for target, _, _ in transport.sent) == ["c1", "c3"]
    for user in users:
        assert NotificationRepository(db_session).count_unread(user.id) == 1


def test_create_notification_rejects_unknown_user(db_session, hub):
    with pytest.raises(LookupError):
        create_notification(
            db_session,
            hub,
            user_id=999,
            notification_type="file_share",
            title="t",
            message="m",
        )


def test_create_notification_rejects_mismatched_data(db_session, hub):
    user = _user(db_session, "carla")

    with pytest.raises(ValueError):
        create_notification(
            db_session,
            hub,
            user_id=user.id,
            notification_type="group_invitation",
            title="Convite",
            message="m",
            data={"group_name": "sem id"},
        )


def test_promote_to_editor_updates_user_and_notifies(db_session, hub, transport):
    admin = _user(db_session, "admin", is_admin=True)
    user = _user(db_session, "pedro")
    hub.on_user_register(user.id, "P")

    promoted = promote_to_editor(db_session, hub, user_id=user.id, promoted_by=admin)

    assert promoted.is_editor is True
    assert UserRepository(db_session).get(user.id).is_editor is True
    [(_, _, payload)] = transport.sent
    assert payload["type"] == "editor_promotion"
    assert payload["data"] == {"promoted_by": "admin"}

    with pytest.raises(ValueError):
        promote_to_editor(db_session, hub, user_id=user.id, promoted_by=admin)


def test_promote_unknown_user_raises_lookup_error(db_session, hub):
    admin = _user(db_session, "root", is_admin=True)

    with pytest.raises(LookupError):
        promote_to_editor(db_session, hub, user_id=404, promoted_by=admin)


@pytest.mark.parametrize("email", ["admin@app.local", "admin@ispmedia.test", "not-an-email"])
def test_create_user_rejects_unusable_email(db_session, email):
    with pytest.raises(ValueError):
        create_user(db_session, username="admin", email=email, password="Secret123")

    assert UserRepository(db_session).get_by_login("admin") is None


def test_create_user_normalizes_email(db_session):
    user = create_user(
        db_session, username="rita", email="  Rita@Example.COM ", password="Secret123"
    )

    assert user.email == "rita@example.com"


def test_create_notification_keeps_unknown_data_keys(db_session, hub, transport):
    user = _user(db_session, "ines")
    hub.on_user_register(user.id, "A")
    raw = {"group_id": 3, "group_name": "Jazz", "invited_by": "ana", "discussion_id": 9}

    saved = create_notification(
        db_session,
        hub,
        user_id=user.id,
        notification_type="group_invitation",
        title="Convite para Grupo",
        message='Foi convidado para o grupo "Jazz"',
        data=raw,
    )

    [stored] = NotificationRepository(db_session).list_for_user(user.id)
    assert stored.data == saved.data
    assert transport.sends_to("A")[0]["data"] == raw
