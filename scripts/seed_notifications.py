"""Utility script to seed demo notifications and print a session token."""

from __future__ import annotations

import argparse
import uuid

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.notifications import (
    notify_follow,
    notify_post_interaction,
    notify_withdrawal_decision,
)
from app.domain.entities import NotificationKind
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.notifications import SqlNotificationStore
from app.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the seed run."""

    parser = argparse.ArgumentParser(
        description="Seed notifications for a user of The Human Canvas.",
    )
    parser.add_argument(
        "--user-id",
        default=None,
        help="Recipient user id (a random UUID when omitted)",
    )
    parser.add_argument(
        "--post-id",
        default="demo-post",
        help="Post that receives the likes and comments (default: demo-post)",
    )
    parser.add_argument(
        "--likers",
        type=int,
        default=3,
        help="Number of distinct users liking the post (default: 3)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a representative mix of notifications for one user."""

    args = parse_args()
    user_id = args.user_id or str(uuid.uuid4())

    initialize_database()
    store = SqlNotificationStore(SessionLocal)

    try:
        for index in range(args.likers):
            notify_post_interaction(
                store,
                kind=NotificationKind.LIKE,
                actor_id=f"liker-{index}",
                actor_name=f"Artist {index + 1}",
                post_owner_id=user_id,
                post_id=args.post_id,
            )
        notify_post_interaction(
            store,
            kind=NotificationKind.COMMENT,
            actor_id="commenter-0",
            actor_name="Collector",
            post_owner_id=user_id,
            post_id=args.post_id,
        )
        notify_follow(
            store,
            follower_id="follower-0",
            followed_id=user_id,
            follower_name="New Fan",
        )
        notify_withdrawal_decision(
            store,
            user_id=user_id,
            request_id=str(uuid.uuid4()),
            amount=1500,
            approved=True,
        )
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not store the notifications: {exc}") from exc

    print(
        "Notifications seeded:\n"
        f"  User ID: {user_id}\n"
        f"  Token: {create_access_token({'sub': user_id})}"
    )


if __name__ == "__main__":
    main()
