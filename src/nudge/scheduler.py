"""Nudge background scheduler - morning notification and daily backup."""

import asyncio
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.json_store import JsonTaskStore
from .adapters.telegram_notifier import TelegramNotifier
from .config import Config, load_config
from .ports import Notifier, TaskStore
from .workflows import daily_backup, get_backups, send_attention_notification

logger = logging.getLogger(__name__)


async def run_morning_notification(store: TaskStore, notifier: Notifier, config: Config) -> None:
    try:
        await send_attention_notification(store, notifier, config)
    except Exception as e:
        logger.error(f"Morning notification failed: {e}")


def run_daily_backup(store: TaskStore, config: Config) -> None:
    try:
        daily_backup(store, get_backups(config))
    except OSError as e:
        logger.error(f"Daily backup failed: {e}")


def setup_scheduler(store: TaskStore, notifier: Notifier | None, config: Config) -> AsyncIOScheduler:
    """Set up scheduled jobs."""
    scheduler = AsyncIOScheduler(timezone=config.timezone or "America/Toronto")

    if notifier is not None:
        hour, minute = config.notification_hour_minute()
        scheduler.add_job(
            run_morning_notification,
            CronTrigger(hour=hour, minute=minute),
            args=[store, notifier, config],
            id="morning_notification",
        )
        logger.info(f"Scheduled morning notification at {hour:02d}:{minute:02d}")

    scheduler.add_job(
        run_daily_backup,
        CronTrigger(hour=0, minute=5),
        args=[store, config],
        id="daily_backup",
    )
    logger.info("Scheduled daily backup at 00:05")

    return scheduler


def run_scheduler(config: Config | None = None) -> None:
    """Run the scheduler until interrupted."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    config = config or load_config()
    store = JsonTaskStore(config.data_path)

    notifier = None
    if config.telegram_bot_token and config.telegram_chat_ids:
        notifier = TelegramNotifier.from_config(config)
    else:
        logger.warning("Telegram not configured - morning notification disabled")

    async def main() -> None:
        scheduler = setup_scheduler(store, notifier, config)
        scheduler.start()
        logger.info("Scheduler started")
        # No-op if today already has a backup
        run_daily_backup(store, config)
        try:
            await asyncio.Event().wait()
        finally:
            scheduler.shutdown()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Scheduler stopped")
