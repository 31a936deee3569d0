"""
Service layer for job operations.

This package holds the session state, the results packaging pipeline and
the job service that ties them to the remote client.
"""

from .dispatcher import Dispatcher
from .job_service import JobService
from .packager import ResultsPackager
from .session import JobSession

__all__ = ["Dispatcher", "JobService", "JobSession", "ResultsPackager"]
