"""
Indexing API Submitter

Wraps a single Google Indexing API `urlNotifications.publish` call and classifies
the result as confirmed, quota exceeded, or transient failure.

Features:
- Service-account credential loading
- Quota (HTTP 429 / quota reasons) vs. generic error classification
- Blocking client call off-loaded to a worker thread
- Structured logging

Usage:
    from apps.indexer.submitter import QuotaAwareSubmitter, build_indexing_service, load_credentials

    service = build_indexing_service(load_credentials("indexingKey.json"))
    outcome = await QuotaAwareSubmitter(service).submit("https://example.com/page")
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Sequence

from google.oauth2 import service_account
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError

from utils.config import settings
from utils.schemas import SubmissionOutcome, UrlNotification

logger = logging.getLogger(__name__)

QUOTA_STATUS_CODES = frozenset({429})
QUOTA_REASONS = frozenset(
    {"quotaExceeded", "rateLimitExceeded", "dailyLimitExceeded", "userRateLimitExceeded", "RESOURCE_EXHAUSTED"}
)


def load_credentials(
    path: str, scopes: Sequence[str] | None = None
) -> service_account.Credentials:
    """
    Load scoped service-account credentials for the Indexing API.

    Args:
        path: Path to the service-account JSON key
        scopes: OAuth scopes, defaults to settings.INDEXING_SCOPES

    Returns:
        Scoped service-account credentials

    Raises:
        FileNotFoundError: If the key file doesn't exist
        ValueError: If the key file is not a valid service-account key
    """
    key_path = Path(path)
    if not key_path.exists():
        raise FileNotFoundError(f"Credentials file not found: {key_path}")

    return service_account.Credentials.from_service_account_file(
        str(key_path), scopes=list(scopes or settings.INDEXING_SCOPES)
    )


def build_indexing_service(credentials: service_account.Credentials) -> Resource:
    """Build the Indexing API v3 resource."""
    return build("indexing", "v3", credentials=credentials, cache_discovery=False)


def is_quota_error(error: HttpError) -> bool:
    """
    Tell whether an API error means the daily quota is exhausted.

    Args:
        error: Error raised by the API client

    Returns:
        True for HTTP 429, or a 403 whose reason names a quota/rate limit
    """
    status = getattr(error.resp, "status", None)
    if status in QUOTA_STATUS_CODES:
        return True

    if status != 403:
        return False

    details = getattr(error, "error_details", None) or []
    if isinstance(details, list):
        for detail in details:
            if isinstance(detail, dict) and detail.get("reason") in QUOTA_REASONS:
                return True

    reason = (getattr(error, "reason", None) or "").lower()
    return "quota" in reason or "rate limit" in reason


class QuotaAwareSubmitter:
    """
    Submit URLs to the Indexing API one at a time.

    Never raises for remote failures; every outcome comes back as a
    SubmissionOutcome.
    """

    def __init__(self, service: Resource, notification_type: str | None = None) -> None:
        """
        Initialize submitter.

        Args:
            service: Indexing API v3 resource (see build_indexing_service)
            notification_type: Notification type, defaults to settings.NOTIFICATION_TYPE
        """
        self.service = service
        self.notification_type = notification_type or settings.NOTIFICATION_TYPE

    def _publish(self, notification: UrlNotification) -> dict[str, Any]:
        request = self.service.urlNotifications().publish(body=notification.model_dump())
        return request.execute()

    async def submit(self, url: str) -> SubmissionOutcome:
        """
        Publish one URL notification and classify the result.

        Args:
            url: URL to notify, already trimmed

        Returns:
            Confirmed when the response carries notification metadata,
            QuotaExceeded for quota errors, TransientFailure for anything else
        """
        try:
            notification = UrlNotification(url=url, type=self.notification_type)
            response = await asyncio.to_thread(self._publish, notification)

        except HttpError as e:
            if is_quota_error(e):
                return SubmissionOutcome.quota_exceeded(url, detail=str(e))
            return SubmissionOutcome.transient_failure(url, detail=str(e))

        except Exception as e:
            return SubmissionOutcome.transient_failure(url, detail=f"{type(e).__name__}: {e}")

        metadata = (response or {}).get("urlNotificationMetadata")
        if metadata is None:
            return SubmissionOutcome.transient_failure(
                url, detail=f"Response without urlNotificationMetadata: {response!r}"
            )

        logger.debug("Indexing API accepted URL", extra={"url": url, "metadata": metadata})
        return SubmissionOutcome.confirmed(url, metadata=metadata)
