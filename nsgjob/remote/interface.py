"""
Interface to the remote job-submission service.

This module defines the abstract interface the job service needs from a
remote back-end. Implementations handle transport, authentication and
document formats.
"""

from abc import ABC, abstractmethod
from typing import Callable, List

from nsgjob.domain import FetchedFile, JobDetails, JobSummary

ProgressCallback = Callable[[str, int, int], None]


class JobRemote(ABC):
    """
    Abstract client for one authenticated user of the remote service.

    Every method performs blocking network I/O and must be called from a
    worker thread, never from the thread driving the user interface.
    """

    def close(self) -> None:
        """Release network resources. The client is not used afterwards."""

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Check that the service accepts the credentials.

        Returns:
            True on success

        Raises:
            RemoteError: If the service is unreachable or rejects the user
        """

    @abstractmethod
    def list_jobs(self) -> List[JobSummary]:
        """
        Get the user's jobs.

        Returns:
            One summary per job, in the order the service lists them
        """

    @abstractmethod
    def get_job_status(self, job_url: str) -> JobDetails:
        """
        Get the status of one job.

        Args:
            job_url: The job's self URL
        """

    @abstractmethod
    def submit_job(self, file_path: str, tool: str) -> JobDetails:
        """
        Submit a new job.

        Args:
            file_path: Local input file (usually a zip of the model)
            tool: Tool identifier, e.g. NEURON_EXPANSE

        Returns:
            Status of the newly created job
        """

    @abstractmethod
    def download_results(
        self, job_url: str, destination: str, on_progress: ProgressCallback
    ) -> List[FetchedFile]:
        """
        Download every result file of a job.

        Args:
            job_url: The job's self URL
            destination: Existing directory to write the files into, each
                under its original file name
            on_progress: Called as (filename, downloaded, total) at least
                once per file and after every chunk

        Returns:
            The downloaded files, in the order the service lists them

        Raises:
            RemoteFetchError: If the job has no results or a download fails
        """
