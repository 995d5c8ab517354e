"""Tests for folding raw notifications into digest items."""

from __future__ import annotations

import pytest

from app.application.use_cases.notifications import (
    aggregate_notifications,
    badge_count,
    format_badge,
    is_foldable,
)
from tests.factories import make_event


def test_three_likes_with_two_actors_fold_into_one_item():
    events = [
        make_event("n3", actor_id="a", minutes=2),
        make_event("n2", actor_id="b", minutes=1),
        make_event("n1", actor_id="a", minutes=0),
    ]

    items = aggregate_notifications(events)

    assert len(items) == 1
    item = items[0]
    assert item.key == "like:post1"
    assert len(item.member_ids) == 3
    assert item.distinct_actor_count == 2
    assert item.has_unread is True
    assert item.display_title == "2 users liked your post"
    assert "2" in item.display_message


def test_group_members_are_ordered_newest_first_and_seed_from_latest():
    events = [
        make_event("old", actor_id="a", minutes=0),
        make_event("new", actor_id="a", minutes=5, title="latest like"),
    ]

    (item,) = aggregate_notifications(events)

    assert item.member_ids == ("new", "old")
    assert item.latest_created_at == events[1].created_at
    # Only one distinct actor, so the latest member's strings are kept.
    assert item.display_title == "latest like"


def test_null_actors_fall_back_to_member_count():
    events = [
        make_event("n1", minutes=0),
        make_event("n2", minutes=1),
    ]

    (item,) = aggregate_notifications(events)

    assert item.distinct_actor_count == 2
    assert item.display_title == "2 users liked your post"


def test_null_actor_does_not_count_as_distinct_when_others_are_set():
    events = [
        make_event("n1", actor_id="a", minutes=0),
        make_event("n2", actor_id=None, minutes=1, title="kept"),
    ]

    (item,) = aggregate_notifications(events)

    assert item.distinct_actor_count == 1
    assert item.display_title == "kept"


@pytest.mark.parametrize(
    ("kind", "expected_title"),
    [
        ("comment", "2 users commented on your post"),
        ("share", "2 users shared your post"),
        ("reply", "2 users replied to your comment"),
        ("mention", "2 users mentioned you"),
        ("follow", "2 new followers"),
    ],
)
def test_templates_for_each_aggregable_kind(kind, expected_title):
    events = [
        make_event("n1", kind, actor_id="a"),
        make_event("n2", kind, actor_id="b", minutes=1),
    ]

    (item,) = aggregate_notifications(events)

    assert item.key == f"{kind}:post1"
    assert item.display_title == expected_title


def test_success_events_with_same_reference_stay_separate():
    events = [
        make_event("s1", "success", reference_id="x", minutes=1),
        make_event("s2", "success", reference_id="x", minutes=0),
    ]

    items = aggregate_notifications(events)

    assert [item.key for item in items] == ["s1", "s2"]
    assert all(item.count == 1 for item in items)
    assert items[0].display_title == "title s1"


def test_aggregable_kind_without_reference_is_a_singleton():
    event = make_event("n1", "comment", reference_id=None)

    assert is_foldable(event) is False
    (item,) = aggregate_notifications([event])
    assert item.key == "n1"


def test_different_kinds_on_same_reference_are_not_merged():
    events = [
        make_event("l1", "like", minutes=1),
        make_event("c1", "comment", minutes=0),
    ]

    keys = [item.key for item in aggregate_notifications(events)]

    assert keys == ["like:post1", "comment:post1"]


def test_items_sorted_by_latest_activity():
    events = [
        make_event("t0", "info", reference_id=None, minutes=0),
        make_event("t1", "info", reference_id=None, minutes=1),
        make_event("t2", "info", reference_id=None, minutes=2),
    ]

    items = aggregate_notifications(events)

    assert items[0].member_ids == ("t2",)
    assert [item.key for item in items] == ["t2", "t1", "t0"]


def test_group_ordered_by_its_newest_member():
    events = [
        make_event("single", "warning", reference_id=None, minutes=5),
        make_event("like-new", minutes=10),
        make_event("like-old", minutes=0),
    ]

    keys = [item.key for item in aggregate_notifications(events)]

    assert keys == ["like:post1", "single"]


def test_ties_keep_input_order():
    events = [
        make_event("b", "info", reference_id=None),
        make_event("a", "info", reference_id=None),
        make_event("c", "info", reference_id=None),
    ]

    keys = [item.key for item in aggregate_notifications(events)]

    assert keys == ["b", "a", "c"]


def test_malformed_events_do_not_break_the_fold():
    events = [
        make_event("no-type", None, minutes=3),
        make_event("no-date", "like", created_at=None),
        make_event("ok", "like", minutes=1),
    ]

    items = aggregate_notifications(events)

    assert [item.key for item in items] == ["no-type", "like:post1", "no-date"]
    assert items[-1].latest_created_at is None


def test_unread_and_unseen_flags_are_independent():
    events = [
        make_event("n1", actor_id="a", is_read=True, is_clicked=False),
        make_event("n2", actor_id="b", is_read=True, is_clicked=True, minutes=1),
    ]

    (item,) = aggregate_notifications(events)

    assert item.has_unread is False
    assert item.has_unseen is True


def test_aggregation_is_deterministic():
    events = [
        make_event("n1", actor_id="a"),
        make_event("n2", "comment", actor_id="b", minutes=1),
        make_event("n3", "success", reference_id="x", minutes=1),
        make_event("n4", actor_id="c", minutes=2),
    ]

    assert aggregate_notifications(events) == aggregate_notifications(list(events))


def test_every_event_lands_in_exactly_one_item():
    events = [
        make_event("n1", actor_id="a"),
        make_event("n2", "comment", actor_id="b", minutes=1),
        make_event("n3", "success", reference_id="x", minutes=1),
        make_event("n4", actor_id="c", minutes=2),
        make_event("n5", "follow", reference_id="a", actor_id="a", minutes=3),
        make_event("n6", "comment", reference_id="post2", minutes=4),
    ]

    member_ids = [
        member for item in aggregate_notifications(events) for member in item.member_ids
    ]

    assert sorted(member_ids) == sorted(event.id for event in events)


def test_badge_counts_raw_unread_events_not_items():
    events = [make_event(f"n{i}", actor_id=f"actor-{i}", minutes=i) for i in range(5)]

    assert badge_count(events) == 5
    assert len(aggregate_notifications(events)) == 1


def test_badge_ignores_read_events():
    events = [
        make_event("n1", is_read=True),
        make_event("n2", "success", reference_id=None),
        make_event("n3", "comment", is_read=True, is_clicked=False),
    ]

    assert badge_count(events) == sum(not event.is_read for event in events) == 1


@pytest.mark.parametrize(
    ("count", "label"),
    [(0, ""), (1, "1"), (9, "9"), (10, "9+"), (120, "9+")],
)
def test_format_badge(count, label):
    assert format_badge(count) == label


def test_format_badge_with_custom_cap():
    assert format_badge(100, cap=99) == "99+"
