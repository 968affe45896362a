from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import datetime, timedelta
from typing import Optional

from dutydesk.models.duty import (
    ActivityRange,
    ActivitySummary,
    DutySession,
    LeaderboardEntry,
)
from dutydesk.repositories.document_store import now_ms
from dutydesk.services.duty_service import DutyService


DAY_MS = 24 * 60 * 60 * 1000


def session_duration(session: DutySession) -> timedelta:
    if session.clock_out is None:
        return timedelta(0)
    return timedelta(milliseconds=session.clock_out - session.clock_in)


def total_duration(sessions: Iterable[DutySession]) -> timedelta:
    return sum((session_duration(s) for s in sessions), timedelta(0))


def top_n(sessions: Iterable[DutySession], n: int) -> list[LeaderboardEntry]:
    """Rank users by summed duty time.

    Ties keep the order in which users first appear in ``sessions``.
    """
    totals: dict[str, timedelta] = {}
    counts: dict[str, int] = {}
    for session in sessions:
        totals[session.user_id] = totals.get(session.user_id, timedelta(0)) + session_duration(session)
        counts[session.user_id] = counts.get(session.user_id, 0) + 1

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)[: max(n, 0)]
    return [
        LeaderboardEntry(
            rank=index,
            user_id=user_id,
            total=total,
            session_count=counts[user_id],
            total_display=format_duration(total),
        )
        for index, (user_id, total) in enumerate(ranked, start=1)
    ]


def range_start(activity_range: ActivityRange, now: Optional[int] = None) -> int:
    """Epoch-ms lower bound for ``activity_range`` as seen at ``now``.

    ``today`` starts at midnight in the server's local time zone; ``week`` and
    ``month`` are rolling 7- and 30-day windows.
    """
    now = now_ms() if now is None else now
    if activity_range == ActivityRange.TODAY:
        midnight = datetime.fromtimestamp(now / 1000).replace(hour=0, minute=0, second=0, microsecond=0)
        return int(midnight.timestamp() * 1000)
    if activity_range == ActivityRange.WEEK:
        return now - 7 * DAY_MS
    if activity_range == ActivityRange.MONTH:
        return now - 30 * DAY_MS
    return 0


def format_duration(duration: timedelta) -> str:
    total_seconds = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    return " ".join(parts) or "0m"


class ActivityService:
    """Read-only reporting over completed duty sessions.

    In-progress sessions are never estimated; they count once clocked out.
    """

    def __init__(
        self,
        duty_service: DutyService,
        leaderboard_size: int = 10,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.duty_service = duty_service
        self.leaderboard_size = leaderboard_size
        self.clock = clock

    def sessions_for_user_in_range(self, user_id: str, from_ms: int) -> list[DutySession]:
        return [s for s in self._completed_since(from_ms) if s.user_id == user_id]

    def sessions_in_range(self, from_ms: int, assignment: Optional[str] = None) -> list[DutySession]:
        sessions = self._completed_since(from_ms)
        if assignment:
            sessions = [s for s in sessions if assignment in s.assignments]
        return sessions

    def user_activity(self, user_id: str, activity_range: ActivityRange) -> ActivitySummary:
        sessions = self.sessions_for_user_in_range(user_id, range_start(activity_range, self.clock()))
        total = total_duration(sessions)
        return ActivitySummary(
            user_id=user_id,
            range=activity_range,
            total=total,
            completed_sessions=len(sessions),
            total_display=format_duration(total),
        )

    def leaderboard(
        self,
        activity_range: ActivityRange,
        assignment: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[LeaderboardEntry]:
        sessions = self.sessions_in_range(range_start(activity_range, self.clock()), assignment)
        return top_n(sessions, self.leaderboard_size if limit is None else limit)

    def _completed_since(self, from_ms: int) -> list[DutySession]:
        return [
            s
            for s in self.duty_service.closed_sessions()
            if s.clock_out >= from_ms and s.clock_out >= s.clock_in
        ]
