"""Tests for the SQL-backed notification store and its change feed."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    NotificationDigest,
    notify_follow,
    notify_post_interaction,
    notify_withdrawal_decision,
)
from app.domain.entities import NotificationKind, SessionContext
from app.infrastructure.notifications import NotificationChangeFeed, SqlNotificationStore
from tests.factories import make_event


@pytest.fixture()
def store():
    from app.infrastructure import database

    database.initialize_database()
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)
    database.Base.metadata.create_all(bind=database.engine)
    yield SqlNotificationStore(database.SessionLocal, NotificationChangeFeed())
    database.Base.metadata.drop_all(bind=database.engine, checkfirst=True)


class Recorder:
    def __init__(self) -> None:
        self.inserted = []
        self.updated = []
        self.deleted = []

    def subscribe(self, store: SqlNotificationStore, user_id: str):
        return store.subscribe(
            user_id,
            self.inserted.append,
            self.updated.append,
            lambda event_id, user: self.deleted.append((event_id, user)),
        )


def test_insert_assigns_id_and_lists_newest_first(store):
    first = store.insert(make_event(None, minutes=0))
    second = store.insert(make_event(None, "comment", minutes=5))

    assert first.id and second.id and first.id != second.id
    listed = store.list("user-1")
    assert [event.id for event in listed] == [second.id, first.id]
    assert listed[0].created_at == second.created_at
    assert listed[0].is_read is False and listed[0].is_clicked is False


def test_list_honours_limit_and_user(store):
    for minute in range(4):
        store.insert(make_event(None, minutes=minute))
    store.insert(make_event(None, user_id="user-2"))

    assert len(store.list("user-1", limit=2)) == 2
    assert len(store.list("user-2")) == 1


def test_insert_is_published_to_the_recipient_only(store):
    mine, theirs = Recorder(), Recorder()
    mine.subscribe(store, "user-1")
    theirs.subscribe(store, "user-2")

    saved = store.insert(make_event(None))

    assert [event.id for event in mine.inserted] == [saved.id]
    assert theirs.inserted == []


def test_bulk_update_raises_flags_and_publishes_changes(store):
    recorder = Recorder()
    recorder.subscribe(store, "user-1")
    a = store.insert(make_event(None))
    b = store.insert(make_event(None, is_read=True))

    assert store.bulk_update([a.id, b.id], {"is_read": True}, user_id="user-1") == 1
    assert [event.id for event in recorder.updated] == [a.id]
    assert all(event.is_read for event in store.list("user-1"))
    assert all(not event.is_clicked for event in store.list("user-1"))

    assert store.bulk_update([a.id], {"is_read": True}, user_id="user-1") == 0


def test_bulk_update_only_touches_the_owner(store):
    saved = store.insert(make_event(None, user_id="user-2"))

    assert store.bulk_update([saved.id], {"is_clicked": True}, user_id="user-1") == 0
    assert store.list("user-2")[0].is_clicked is False


@pytest.mark.parametrize("patch", [{"title": True}, {"is_read": False}])
def test_bulk_update_rejects_other_patches(store, patch):
    saved = store.insert(make_event(None))

    with pytest.raises(ValueError):
        store.bulk_update([saved.id], patch, user_id="user-1")


def test_mark_all_read(store):
    store.insert(make_event(None))
    store.insert(make_event(None, "success", reference_id=None))
    store.insert(make_event(None, user_id="user-2"))

    assert store.mark_all_read("user-1") == 2
    assert store.list("user-2")[0].is_read is False


def test_delete_is_broadcast_with_owner(store):
    owner, bystander = Recorder(), Recorder()
    owner.subscribe(store, "user-1")
    bystander.subscribe(store, "user-2")
    saved = store.insert(make_event(None))

    assert store.delete(saved.id, user_id="user-2") is None
    assert store.delete(saved.id, user_id="user-1").id == saved.id

    assert owner.deleted == [(saved.id, "user-1")]
    assert bystander.deleted == [(saved.id, "user-1")]
    assert store.list("user-1") == []


def test_unsubscribe_stops_delivery(store):
    recorder = Recorder()
    unsubscribe = recorder.subscribe(store, "user-1")
    unsubscribe()
    unsubscribe()

    store.insert(make_event(None))

    assert recorder.inserted == []


def test_digest_follows_store_writes(store):
    other_digest = NotificationDigest(SessionContext("user-2"), store)
    other_digest.start()
    digest = NotificationDigest(SessionContext("user-1"), store)
    digest.start()

    saved = store.insert(make_event(None, actor_id="a"))
    store.insert(make_event(None, user_id="user-2"))
    assert [event.id for event in digest.events] == [saved.id]

    digest.mark_all_read_on_open()
    assert store.list("user-1")[0].is_read is True

    store.delete(saved.id, user_id="user-1")
    assert digest.events == ()
    assert len(other_digest.events) == 1


def test_producers_create_expected_notifications(store):
    follow = notify_follow(
        store, follower_id="fan", followed_id="user-1", follower_name="Fan"
    )
    like = notify_post_interaction(
        store,
        kind=NotificationKind.LIKE,
        actor_id="fan",
        actor_name="Fan",
        post_owner_id="user-1",
        post_id="post1",
    )
    payout = notify_withdrawal_decision(
        store,
        user_id="user-1",
        request_id="req-1",
        amount=1500,
        approved=False,
        admin_notes="missing bank details",
    )

    assert follow.type == "follow"
    assert follow.reference_id == follow.actor_id == "fan"
    assert like.type == "like" and like.reference_id == "post1"
    assert payout.type == "error"
    assert "฿1,500.00" in payout.message
    assert payout.message.endswith("missing bank details")
    assert len(store.list("user-1")) == 3


def test_producers_skip_self_notifications(store):
    assert notify_follow(store, follower_id="u", followed_id="u", follower_name="U") is None
    assert (
        notify_post_interaction(
            store,
            kind=NotificationKind.COMMENT,
            actor_id="u",
            actor_name="U",
            post_owner_id="u",
            post_id="p",
        )
        is None
    )
    assert store.list("u") == []


def test_follow_from_muted_user_is_not_recorded(store):
    recorder = Recorder()
    recorder.subscribe(store, "user-1")

    result = notify_follow(
        store, follower_id="fan", followed_id="user-1", follower_name="Fan", muted=True
    )

    assert result is None
    assert store.list("user-1") == []
    assert recorder.inserted == []


def test_mark_all_read_pushes_a_single_digest_change(store):
    for minute in range(50):
        store.insert(make_event(None, minutes=minute))
    snapshots: list[int] = []
    digest = NotificationDigest(
        SessionContext("user-1"),
        store,
        on_change=lambda d: snapshots.append(d.badge_count),
    )
    digest.start()
    snapshots.clear()

    assert len(digest.mark_all_read_on_open()) == 50

    assert snapshots == [0]
    assert all(event.is_read for event in store.list("user-1"))


def test_click_pushes_a_single_digest_change(store):
    ids = [store.insert(make_event(None, actor_id=f"a{i}", minutes=i)).id for i in range(3)]
    changes = []
    digest = NotificationDigest(SessionContext("user-1"), store, on_change=changes.append)
    digest.start()
    changes.clear()

    assert digest.mark_group_clicked(ids) == "/community?post=post1"

    assert len(changes) == 1


def test_follow_is_not_a_post_interaction(store):
    with pytest.raises(ValueError):
        notify_post_interaction(
            store,
            kind=NotificationKind.FOLLOW,
            actor_id="a",
            actor_name="A",
            post_owner_id="b",
            post_id="p",
        )
