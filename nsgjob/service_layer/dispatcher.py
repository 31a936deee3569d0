"""Run job operations on worker threads."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
import logging

from .job_service import JobService

LOG = logging.getLogger(__name__)

DEFAULT_WORKERS = 4


class Dispatcher:
    """
    Thread pool front-end for a JobService.

    Every method submits the matching JobService call to the pool and returns
    a Future at once, so the calling (user interface) thread never blocks on
    network or disk I/O. Results and exceptions are delivered through the
    future.
    """

    def __init__(self, job_service: JobService, max_workers: int = DEFAULT_WORKERS):
        self.job_service = job_service
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="nsgjob-worker")

    def _submit(self, func, *args) -> Future:
        LOG.debug("dispatch %s", func.__name__)
        return self._executor.submit(func, *args)

    def connect(self, username: str, password: str, app_key: str) -> Future:
        return self._submit(self.job_service.connect, username, password, app_key)

    def list_jobs(self) -> Future:
        return self._submit(self.job_service.list_jobs)

    def get_job_status(self, job_url: str) -> Future:
        return self._submit(self.job_service.get_job_status, job_url)

    def submit_job(self, file_path: str, tool: str) -> Future:
        return self._submit(self.job_service.submit_job, file_path, tool)

    def download_results(self, job_url: str, output_dir: str) -> Future:
        return self._submit(self.job_service.download_results, job_url, output_dir)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _ = (exc_type, exc_val, exc_tb)
        self.shutdown()
        return False
