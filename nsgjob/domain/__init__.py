"""
Domain models for nsgjob.

This package contains plain data classes with no knowledge of the REST API
or of the local filesystem layout.
"""

from .credentials import Credentials
from .job import (
    FetchedFile,
    JobDetails,
    JobMessage,
    JobSummary,
    filter_jobs,
    sort_jobs,
)

__all__ = [
    "Credentials",
    "FetchedFile",
    "JobDetails",
    "JobMessage",
    "JobSummary",
    "filter_jobs",
    "sort_jobs",
]
