"""
Service Context

Holds the objects one worker process owns: settings, the run coordinator and
(once started) the APScheduler instance. Created by the entry point and handed
to the scheduler instead of living in module globals.
"""

from dataclasses import dataclass, field

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from apps.indexer.coordinator import RunCoordinator
from apps.indexer.submitter import QuotaAwareSubmitter, build_indexing_service, load_credentials
from utils.config import Settings


@dataclass
class ServiceContext:
    settings: Settings
    coordinator: RunCoordinator
    scheduler: AsyncIOScheduler | None = field(default=None)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContext":
        """
        Load credentials and wire the submitter and coordinator.

        Raises:
            FileNotFoundError: If the credentials file doesn't exist
        """
        credentials = load_credentials(settings.CREDENTIALS_FILE, settings.INDEXING_SCOPES)
        submitter = QuotaAwareSubmitter(
            build_indexing_service(credentials),
            notification_type=settings.NOTIFICATION_TYPE,
        )
        coordinator = RunCoordinator(
            submitter,
            urls_file=settings.URLS_FILE,
            indexed_file=settings.INDEXED_FILE,
            start_from_url=settings.START_FROM_URL,
            daily_quota=settings.DAILY_QUOTA,
        )
        return cls(settings=settings, coordinator=coordinator)
