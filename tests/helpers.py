"""Test doubles and small helpers shared by the test modules."""

from pathlib import Path

from utils.schemas import OutcomeStatus, SubmissionOutcome


class FakeSubmitter:
    """Submitter double that answers from a per-URL script.

    URLs missing from `script` are confirmed.
    """

    def __init__(self, script: dict[str, OutcomeStatus] | None = None) -> None:
        self.script = script or {}
        self.calls: list[str] = []

    async def submit(self, url: str) -> SubmissionOutcome:
        self.calls.append(url)
        status = self.script.get(url, OutcomeStatus.CONFIRMED)

        if status is OutcomeStatus.CONFIRMED:
            return SubmissionOutcome.confirmed(url, metadata={"url": url})
        if status is OutcomeStatus.QUOTA_EXCEEDED:
            return SubmissionOutcome.quota_exceeded(url, detail="429 Quota exceeded")
        return SubmissionOutcome.transient_failure(url, detail="connection reset")


def read_lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()
