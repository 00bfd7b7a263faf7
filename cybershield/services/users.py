"""Read-side helpers for the user directory and its statistics."""
from collections import Counter
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from cybershield.models.user import User
from cybershield.schemas.user import UserStats
from cybershield.services.persistence import read_or_fail
from cybershield.utils.time import month_key, months_ago, start_of_day, utcnow

USER_LIST_LIMIT = 50
STATS_MONTHS = 6


def list_active_users(db: Session, limit: int = USER_LIST_LIMIT) -> list[User]:
    stmt = (
        select(User)
        .where(User.is_active.is_(True))
        .order_by(User.created_at.desc(), User.id.desc())
        .limit(limit)
    )
    with read_or_fail(db, action="list_active_users"):
        return list(db.scalars(stmt).all())


def user_stats(db: Session, now: datetime | None = None) -> UserStats:
    """Active user totals, today's sign-ups and per-month sign-ups for the last six months."""

    now = now or utcnow()
    active = User.is_active.is_(True)

    with read_or_fail(db, action="user_stats"):
        total = db.scalar(select(func.count(User.id)).where(active)) or 0
        today = db.scalar(
            select(func.count(User.id)).where(active, User.created_at >= start_of_day(now))
        ) or 0
        created = db.scalars(
            select(User.created_at).where(active, User.created_at >= months_ago(now, STATS_MONTHS))
        ).all()
    monthly = Counter(month_key(value) for value in created)

    return UserStats(totalUsers=total, todayUsers=today, monthlyStats=dict(sorted(monthly.items())))
