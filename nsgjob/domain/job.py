"""
Domain models for remote jobs.

These are read-only projections of the remote job service's state. They are
rebuilt from every query and never written back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

import dateutil.parser
import dateutil.tz

STAGE_COMPLETED = "COMPLETED"

SORT_FIELDS = (
    "job_id",
    "tool",
    "job_stage",
    "date_submitted",
    "date_completed",
)
_DATE_FIELDS = ("date_submitted", "date_completed")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning None if absent or unparseable."""
    if not value:
        return None
    try:
        return dateutil.parser.isoparse(value)
    except (ValueError, OverflowError):
        return None


@dataclass
class JobSummary:  # pylint: disable=too-many-instance-attributes
    """One entry of the user's job list."""

    job_id: str
    url: str
    tool: Optional[str] = None
    job_stage: Optional[str] = None
    failed: bool = False
    date_submitted: Optional[str] = None
    date_completed: Optional[str] = None

    def submitted_at(self) -> Optional[datetime]:
        return parse_timestamp(self.date_submitted)

    def completed_at(self) -> Optional[datetime]:
        return parse_timestamp(self.date_completed)

    def __str__(self) -> str:
        stage = self.job_stage or "?"
        if self.failed:
            stage += " (failed)"
        return f"{self.job_id:<30} {self.tool or '-':<24} {stage:<20} {self.url}"


@dataclass
class JobMessage:
    timestamp: Optional[str]
    stage: Optional[str]
    text: str


@dataclass
class JobDetails:  # pylint: disable=too-many-instance-attributes
    """Status of a single job."""

    job_id: str
    job_stage: str
    failed: bool
    date_submitted: Optional[str]
    self_uri: str
    results_uri: Optional[str] = None
    terminal_stage: bool = False
    messages: List[JobMessage] = field(default_factory=list)

    def is_finished(self) -> bool:
        return self.terminal_stage or self.job_stage == STAGE_COMPLETED

    def detail(self) -> str:
        lines = [
            f"Job:       {self.job_id}",
            f"Stage:     {self.job_stage}" + (" (failed)" if self.failed else ""),
            f"Submitted: {self.date_submitted or '-'}",
            f"URL:       {self.self_uri}",
            f"Results:   {self.results_uri or '-'}",
        ]
        for msg in self.messages:
            lines.append(f"  [{msg.timestamp or '-'}] {msg.stage or '-'}: {msg.text}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FetchedFile:
    """A result file downloaded into the staging directory."""

    path: str
    filename: str
    size: int


def filter_jobs(jobs: Iterable[JobSummary], query: str) -> List[JobSummary]:
    """Keep jobs where any displayed field contains query (case-insensitive)."""
    query = query.lower()
    if not query:
        return list(jobs)

    def matches(job: JobSummary) -> bool:
        values = (
            job.job_id,
            job.url,
            job.tool,
            job.job_stage,
            job.date_submitted,
            job.date_completed,
        )
        return any(value and query in value.lower() for value in values)

    return [job for job in jobs if matches(job)]


def sort_jobs(
    jobs: Iterable[JobSummary],
    sort_field: str = "date_submitted",
    descending: bool = True,
) -> List[JobSummary]:
    """
    Sort jobs by one field.

    Jobs with no value for the field always go last, whatever the direction.
    Date fields are compared as datetimes.

    Raises:
        ValueError: If sort_field is not one of SORT_FIELDS
    """
    if sort_field not in SORT_FIELDS:
        raise ValueError(
            "Unknown sort field {!r}; valid fields: {}".format(
                sort_field, ", ".join(SORT_FIELDS)))

    def key(job: JobSummary):
        value = getattr(job, sort_field)
        if sort_field in _DATE_FIELDS:
            value = parse_timestamp(value)
            if value is not None and value.tzinfo is None:
                value = value.replace(tzinfo=dateutil.tz.tzutc())
        return value

    present = []
    missing = []
    for job in jobs:
        value = key(job)
        if value is None or value == "":
            missing.append(job)
        else:
            present.append((value, job))
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [job for _, job in present] + missing
