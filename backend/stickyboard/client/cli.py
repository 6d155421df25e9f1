from __future__ import annotations

import asyncio
import contextlib

from stickyboard.client.config import get_client_settings
from stickyboard.client.reminders import ReminderService
from stickyboard.client.storage import LocalStore
from stickyboard.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def run_reminders() -> None:
    """Poll the local store for due reminders until interrupted (``stickyboard-reminders``)."""
    settings = get_client_settings()
    setup_logging(settings.log_level)

    service = ReminderService(LocalStore(settings.storage_path))
    removed = service.cleanup_old_reminders()
    logger.info(
        "Reminder daemon starting",
        extra={"storage_path": str(settings.storage_path), "stale_removed": removed},
    )
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(service.run_forever())
