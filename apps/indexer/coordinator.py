"""
Run Coordinator - One Processing Run Over the Pending Queue

Walks urls.txt from the configured resume index, submitting one URL at a time.
Confirmed URLs move to indexed.txt; the first quota or transient failure stops
the run. Once the pending queue is exhausted, indexed.txt is recycled into
urls.txt so the indexing cycle starts over.

Each run re-reads both files from disk, so invoking it again within the same
window resumes from current state.
"""

import logging
from typing import Protocol

from utils import queue_store
from utils.config import settings
from utils.schemas import OutcomeStatus, RunReport, SubmissionOutcome

logger = logging.getLogger(__name__)


class Submitter(Protocol):
    async def submit(self, url: str) -> SubmissionOutcome: ...


class RunCoordinator:
    """
    Orchestrates one processing run.

    Handles:
    - Loading the pending queue and positioning the cursor
    - Moving confirmed URLs from pending to processed
    - Stopping on the first failure
    - Recycling the processed list when pending runs dry
    """

    def __init__(
        self,
        submitter: Submitter,
        urls_file: str | None = None,
        indexed_file: str | None = None,
        start_from_url: int | None = None,
        daily_quota: int | None = None,
    ) -> None:
        """
        Initialize coordinator.

        Args:
            submitter: Object with an async submit(url) -> SubmissionOutcome
            urls_file: Pending queue path, defaults to settings.URLS_FILE
            indexed_file: Processed list path, defaults to settings.INDEXED_FILE
            start_from_url: Resume index, defaults to settings.START_FROM_URL
            daily_quota: Quota quoted in logs, defaults to settings.DAILY_QUOTA
        """
        self.submitter = submitter
        self.urls_file = settings.URLS_FILE if urls_file is None else urls_file
        self.indexed_file = settings.INDEXED_FILE if indexed_file is None else indexed_file
        self.start_from_url = settings.START_FROM_URL if start_from_url is None else start_from_url
        self.daily_quota = settings.DAILY_QUOTA if daily_quota is None else daily_quota

    async def run(self) -> RunReport:
        """
        Execute one run: loop, flush, recycle check.

        The pending queue is flushed even when the loop raises, so URLs already
        moved to the processed list are never left behind in urls.txt.

        Returns:
            Summary of what the run did

        Raises:
            IOError: If either queue file can't be read or written
        """
        urls = queue_store.load_list(self.urls_file)
        cursor = self.start_from_url

        report = RunReport(
            start_cursor=cursor,
            final_cursor=cursor,
            pending_before=len(urls),
        )

        try:
            while 0 <= cursor < len(urls):
                clean_url = urls[cursor].strip()

                if not clean_url:
                    # Blank line, nothing to submit
                    del urls[cursor]
                    continue

                outcome = await self.submitter.submit(clean_url)

                if outcome.is_confirmed:
                    queue_store.append_line(self.indexed_file, clean_url)
                    # Next URL shifts into this position
                    del urls[cursor]
                    report.confirmed.append(clean_url)
                    logger.info(f"Processed URL: {clean_url}", extra={"url": clean_url})
                    continue

                if outcome.status is OutcomeStatus.QUOTA_EXCEEDED:
                    logger.error(
                        f"Exceeded limit quota! ({self.daily_quota} urls per day)",
                        extra={"url": clean_url, "detail": outcome.detail},
                    )
                else:
                    logger.error(
                        f"An error occurred: {outcome.detail}",
                        extra={"url": clean_url, "detail": outcome.detail},
                    )

                cursor += 1
                report.stop_reason = outcome.status
                break

        finally:
            report.final_cursor = cursor
            queue_store.rewrite_list(self.urls_file, urls)

        report.pending_after = len(urls)

        if not urls:
            self.recycle()
            report.recycled = True

        return report

    def recycle(self) -> None:
        """
        Move the processed list back into the pending queue and clear it.

        Raises:
            IOError: If either queue file can't be read or written
        """
        indexed = queue_store.load_list(self.indexed_file)
        queue_store.rewrite_list(self.urls_file, indexed)
        queue_store.clear(self.indexed_file)

        logger.info(
            f"{self.urls_file} is empty. Copied content from {self.indexed_file} "
            f"to {self.urls_file} and cleared {self.indexed_file}.",
            extra={"recycled_count": len(indexed)},
        )
