"""
Adapters between the REST API's XML documents and the domain models.
"""

from .job_converter import (
    JobFile,
    error_message,
    joblist_to_summaries,
    jobstatus_to_details,
    jobstatus_to_summary,
    results_to_jobfiles,
)

__all__ = [
    "JobFile",
    "error_message",
    "joblist_to_summaries",
    "jobstatus_to_details",
    "jobstatus_to_summary",
    "results_to_jobfiles",
]
