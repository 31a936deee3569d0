"""
Job operations against the remote service.

This module contains the JobService class, which checks the session,
builds a client for the stored credentials, calls the remote service and
rewrites identifiers for display. All methods block on network or disk I/O;
use nsgjob.service_layer.Dispatcher to run them off the calling thread.
"""

from __future__ import annotations

from contextlib import closing
import logging
import threading
from typing import Callable, Dict, List, Optional

from nsgjob.anonymize import (
    anonymizeJobId,
    anonymizeUrl,
    anonymizeUsername,
    showcaseMode,
)
from nsgjob.domain import Credentials, JobDetails, JobSummary
from nsgjob.errors import ConnectionFailedError, RemoteError
from nsgjob.progress import ProgressBridge
from nsgjob.remote import JobRemote

from .packager import ResultsPackager
from .session import JobSession

LOG = logging.getLogger(__name__)

ClientFactory = Callable[[Credentials], JobRemote]


class JobService:
    """
    Service for remote job operations.

    This class handles:
    - Connecting (validating and storing credentials) and disconnecting
    - Listing jobs and querying job status
    - Submitting jobs
    - Downloading a job's results into a single archive
    """

    def __init__(
        self,
        session: JobSession,
        client_factory: ClientFactory,
        bridge: Optional[ProgressBridge] = None,
    ):
        """
        Initialize service.

        Args:
            session: Holder of the active credentials
            client_factory: Builds a remote client for a set of credentials
            bridge: Receives download progress and completion events
        """
        self.session = session
        self._client_factory = client_factory
        self._bridge = bridge
        self._urls_lock = threading.Lock()
        self._real_urls: Dict[str, str] = {}

    def _client(self) -> JobRemote:
        return self._client_factory(self.session.require_credentials())

    def _display_url(self, url: Optional[str]) -> Optional[str]:
        """Anonymize url, remembering the real URL behind a pseudonym."""
        if url is None:
            return None
        shown = anonymizeUrl(url)
        if shown != url:
            with self._urls_lock:
                self._real_urls[shown] = url
        return shown

    def _lookup_real_url(self, url: str) -> Optional[str]:
        with self._urls_lock:
            return self._real_urls.get(url)

    def _real_url(self, client: JobRemote, url: str) -> str:
        """
        Map a URL handed out by this service back to the real job URL.

        In showcase mode a pseudonymous URL may come from an earlier
        process, so an unknown one is resolved by listing the jobs once.
        """
        real = self._lookup_real_url(url)
        if real is None and showcaseMode():
            LOG.debug("unknown job url, refreshing job list")
            for job in client.list_jobs():
                self._display_url(job.url)
            real = self._lookup_real_url(url)
        return real or url

    def _display_details(self, details: JobDetails) -> JobDetails:
        details.job_id = anonymizeJobId(details.job_id)
        details.self_uri = self._display_url(details.self_uri)
        details.results_uri = self._display_url(details.results_uri)
        return details

    def connect(self, username: str, password: str, app_key: str) -> str:
        """
        Validate credentials against the service and store them.

        Returns:
            Confirmation message

        Raises:
            ConnectionFailedError: If the connectivity check fails; the
                previous session, if any, is kept
        """
        credentials = Credentials(
            username=username, password=password, app_key=app_key)
        try:
            with closing(self._client_factory(credentials)) as client:
                client.test_connection()
        except RemoteError as err:
            raise ConnectionFailedError(f"Connection test failed: {err}") from err

        self.session.store(credentials)
        LOG.info("connected as %s", anonymizeUsername(username))
        return f"Connected as {anonymizeUsername(username)}"

    def disconnect(self) -> None:
        self.session.clear()
        LOG.info("disconnected")

    def list_jobs(self) -> List[JobSummary]:
        """
        Get the user's jobs.

        Raises:
            NotConnectedError: If no credentials are stored
        """
        with closing(self._client()) as client:
            jobs = client.list_jobs()
        for job in jobs:
            job.job_id = anonymizeJobId(job.job_id)
            job.url = self._display_url(job.url)
        LOG.info("listed %d jobs", len(jobs))
        return jobs

    def get_job_status(self, job_url: str) -> JobDetails:
        """
        Get the status of one job.

        Raises:
            NotConnectedError: If no credentials are stored
        """
        with closing(self._client()) as client:
            details = client.get_job_status(self._real_url(client, job_url))
        LOG.info("job %s is %s", anonymizeJobId(details.job_id), details.job_stage)
        return self._display_details(details)

    def submit_job(self, file_path: str, tool: str) -> str:
        """
        Submit a new job.

        Returns:
            The new job's id

        Raises:
            NotConnectedError: If no credentials are stored
        """
        with closing(self._client()) as client:
            details = self._display_details(client.submit_job(file_path, tool))
        return details.job_id

    def download_results(self, job_url: str, output_dir: str) -> str:
        """
        Download all result files of a job into one zip archive.

        Args:
            job_url: Job URL as returned by list_jobs or get_job_status
            output_dir: Directory for the archive

        Returns:
            Absolute path of the archive

        Raises:
            NotConnectedError: If no credentials are stored
            JobClientError: Any packaging failure, see ResultsPackager
        """
        with closing(self._client()) as client:
            real_url = self._real_url(client, job_url)

            def fetch(_reference, staging_dir, on_progress):
                return client.download_results(real_url, staging_dir, on_progress)

            LOG.info("downloading results for %s", anonymizeUrl(real_url))
            packager = ResultsPackager(fetch, self._bridge)
            return packager.package_results(
                self._display_url(real_url), output_dir)
