"""Client-side note reminders.

Reminder records live in the local store under ``note_reminders`` and are
merged over the notes mirrored under ``notes``. A background asyncio task
polls them and fires each due reminder at most once.
"""
from __future__ import annotations

import asyncio
import contextlib
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from stickyboard.client.board_state import NOTES_KEY
from stickyboard.client.config import get_client_settings
from stickyboard.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from stickyboard.client.storage import LocalStore

logger = get_logger(__name__)

REMINDERS_KEY = "note_reminders"
DEFAULT_TITLE = "Untitled Note"
REMINDER_MESSAGE = "Your reminder went off!"


@dataclass(frozen=True)
class ReminderAlert:
    note_id: str
    title: str
    message: str = REMINDER_MESSAGE
    heading: str = "Note Reminder"


@dataclass(frozen=True)
class ReminderStatus:
    reminder_at: datetime | None
    triggered: bool


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO timestamp; naive values are taken as UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Ignoring malformed reminder timestamp", extra={"value": str(value)})
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _log_alert(alert: ReminderAlert) -> None:
    logger.warning("%s: %s - %s", alert.heading, alert.title, alert.message, extra={"note_id": alert.note_id})


class ReminderService:
    def __init__(
        self,
        store: LocalStore,
        *,
        interval: float | None = None,
        initial_delay: float | None = None,
        alert_handler: Callable[[ReminderAlert], None] | None = None,
    ) -> None:
        settings = get_client_settings()
        self._store = store
        self._interval = interval if interval is not None else settings.reminder_interval_seconds
        self._initial_delay = initial_delay if initial_delay is not None else settings.reminder_initial_delay_seconds
        self._alert_handler = alert_handler or _log_alert
        self._subscribers: list[Callable[[str], None]] = []
        self._task: asyncio.Task | None = None
        self._wakeup: asyncio.Event | None = None

        if self._store.get_item(REMINDERS_KEY) is None:
            self._save({})

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _load(self) -> dict[str, dict[str, Any]]:
        data = self._store.get_json(REMINDERS_KEY, {})
        if not isinstance(data, dict):
            logger.error("Reminder records are not a JSON object, ignoring")
            return {}
        return data

    def _save(self, reminders: dict[str, dict[str, Any]]) -> None:
        self._store.set_json(REMINDERS_KEY, reminders)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Register ``callback(note_id)`` for fired reminders; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set_reminder(self, note_id: UUID | str, when: datetime) -> None:
        reminders = self._load()
        reminders[str(note_id)] = {
            "reminder_at": parse_timestamp(when).isoformat(),
            "reminder_triggered": False,
            "triggered_at": None,
        }
        self._save(reminders)
        logger.info("Reminder set", extra={"note_id": str(note_id)})
        if self._wakeup is not None:
            self._wakeup.set()

    def remove_reminder(self, note_id: UUID | str) -> None:
        reminders = self._load()
        if reminders.pop(str(note_id), None) is not None:
            self._save(reminders)

    def reset_reminder(self, note_id: UUID | str) -> None:
        reminders = self._load()
        record = reminders.get(str(note_id))
        if record is None:
            return
        record["reminder_triggered"] = False
        record["triggered_at"] = None
        self._save(reminders)

    def get_reminder(self, note_id: UUID | str) -> ReminderStatus:
        record = self._load().get(str(note_id)) or {}
        return ReminderStatus(
            reminder_at=parse_timestamp(record.get("reminder_at")),
            triggered=bool(record.get("reminder_triggered", False)),
        )

    def _notes_with_reminders(self, reminders: dict[str, dict[str, Any]]) -> list[dict[str, Any]]:
        notes = self._store.get_json(NOTES_KEY, [])
        if not isinstance(notes, list):
            logger.error("Mirrored notes are not a JSON array, skipping reminder check")
            return []
        merged = []
        for note in notes:
            if not isinstance(note, dict) or "id" not in note:
                continue
            note_id = str(note["id"])
            record = reminders.get(note_id)
            if record is not None:
                reminder_at = record.get("reminder_at")
                triggered = bool(record.get("reminder_triggered", False))
            else:
                reminder_at = note.get("reminder_at")
                triggered = bool(note.get("reminder_triggered", False))
            merged.append({
                "id": note_id,
                "title": note.get("title") or DEFAULT_TITLE,
                "reminder_at": parse_timestamp(reminder_at),
                "reminder_triggered": triggered,
            })
        return merged

    def check_reminders(self, now: datetime | None = None) -> list[ReminderAlert]:
        """Fire every due, untriggered reminder and return the alerts raised."""
        now = parse_timestamp(now) or datetime.now(UTC)
        reminders = self._load()
        fired: list[ReminderAlert] = []

        for note in self._notes_with_reminders(reminders):
            reminder_at = note["reminder_at"]
            if reminder_at is None or note["reminder_triggered"] or reminder_at > now:
                continue

            alert = ReminderAlert(note_id=note["id"], title=note["title"])
            self._alert_handler(alert)

            reminders[note["id"]] = {
                **reminders.get(note["id"], {}),
                "reminder_at": reminder_at.isoformat(),
                "reminder_triggered": True,
                "triggered_at": now.isoformat(),
            }
            self._save(reminders)
            fired.append(alert)
            for callback in list(self._subscribers):
                callback(note["id"])

        return fired

    def cleanup_old_reminders(self, days_old: int | None = None, *, now: datetime | None = None) -> int:
        """Drop triggered records older than ``days_old`` days; returns how many were removed."""
        days = days_old if days_old is not None else get_client_settings().reminder_cleanup_days
        cutoff = (parse_timestamp(now) or datetime.now(UTC)) - timedelta(days=days)
        reminders = self._load()
        stale = [
            note_id for note_id, record in reminders.items()
            if record.get("reminder_triggered")
            and (triggered_at := parse_timestamp(record.get("triggered_at"))) is not None
            and triggered_at < cutoff
        ]
        for note_id in stale:
            del reminders[note_id]
        if stale:
            self._save(reminders)
            logger.info("Cleaned up old reminders", extra={"count": len(stale)})
        return len(stale)

    @staticmethod
    async def _wait(wakeup: asyncio.Event, seconds: float) -> None:
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(wakeup.wait(), timeout=seconds)
        wakeup.clear()

    async def _poll(self, wakeup: asyncio.Event) -> None:
        await self._wait(wakeup, self._initial_delay)
        while True:
            try:
                self.check_reminders()
            except Exception as err:
                logger.exception("Reminder check failed", extra={"error": str(err)})
            await self._wait(wakeup, self._interval)

    def start(self) -> None:
        """Start polling on the running event loop."""
        if self.running:
            return
        self._wakeup = asyncio.Event()
        self._task = asyncio.get_running_loop().create_task(self._poll(self._wakeup))
        logger.info("Reminder polling started", extra={"interval": self._interval})

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._wakeup = None
        logger.info("Reminder polling stopped")

    async def run_forever(self) -> None:
        """Poll until cancelled."""
        self.start()
        try:
            await asyncio.Event().wait()
        finally:
            await self.stop()
