"""
Client for the NSG (CIPRES) job REST API.

Every request carries HTTP basic auth and the ``cipres-appkey`` header. The
service answers in XML; see nsgjob.adapters.job_converter.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional
from urllib.parse import quote
from xml.etree import ElementTree

import requests

from nsgjob.adapters import (
    JobFile,
    error_message,
    joblist_to_summaries,
    jobstatus_to_details,
    results_to_jobfiles,
)
from nsgjob.anonymize import anonymizeJobId, anonymizeUrl
from nsgjob.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT
from nsgjob.domain import Credentials, FetchedFile, JobDetails, JobSummary
from nsgjob.errors import InvalidRequestError, RemoteError, RemoteFetchError
from nsgjob.utils import autoDecode

from .interface import JobRemote, ProgressCallback

LOG = logging.getLogger(__name__)

APP_KEY_HEADER = "cipres-appkey"
CHUNK_SIZE = 64 * 1024
INPUT_FILE_FIELD = "input.infile_"


def _parse(content: bytes) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(content)
    except ElementTree.ParseError as err:
        raise RemoteError(f"Malformed response from job service: {err}") from err


def _error_text(resp: requests.Response) -> str:
    message = None
    try:
        message = error_message(ElementTree.fromstring(resp.content))
    except ElementTree.ParseError:
        LOG.debug("error body is not XML")
    if not message:
        message = autoDecode(resp.content).strip()[:500] or resp.reason
    return f"HTTP {resp.status_code}: {message}"


def _content_length(resp: requests.Response, fallback: int) -> int:
    try:
        return int(resp.headers.get("Content-Length", fallback))
    except (TypeError, ValueError):
        return fallback


class NsgClient(JobRemote):
    def __init__(
        self,
        credentials: Credentials,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            credentials: Account used for every request
            base_url: REST API root, e.g. https://host:8443/cipresrest/v1
            timeout: Per-request timeout in seconds
            session: Optional pre-built requests session
        """
        self.credentials = credentials
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._http = session if session is not None else requests.Session()
        self._http.auth = (credentials.username, credentials.password)
        self._http.headers.update({APP_KEY_HEADER: credentials.app_key})

    def close(self) -> None:
        self._http.close()

    @property
    def user_url(self) -> str:
        return "{}/job/{}".format(
            self.base_url, quote(self.credentials.username, safe=""))

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        LOG.debug("%s %s", method, anonymizeUrl(url))
        try:
            resp = self._http.request(method, url, **kwargs)
        except requests.RequestException as err:
            raise RemoteError(
                f"Request to {anonymizeUrl(url)} failed: {err}") from err
        if not resp.ok:
            raise RemoteError(_error_text(resp), status=resp.status_code)
        return resp

    def _get_document(self, url: str, **kwargs) -> ElementTree.Element:
        return _parse(self._request("GET", url, **kwargs).content)

    def test_connection(self) -> bool:
        self._request("GET", self.user_url)
        return True

    def list_jobs(self) -> List[JobSummary]:
        root = self._get_document(self.user_url, params={"expand": "true"})
        try:
            return joblist_to_summaries(root)
        except ValueError as err:
            raise RemoteError(f"Malformed job list: {err}") from err

    def get_job_status(self, job_url: str) -> JobDetails:
        root = self._get_document(job_url)
        try:
            return jobstatus_to_details(root)
        except ValueError as err:
            raise RemoteError(f"Malformed job status: {err}") from err

    def submit_job(self, file_path: str, tool: str) -> JobDetails:
        if not tool:
            raise InvalidRequestError("No tool selected")
        if not os.path.isfile(file_path):
            raise InvalidRequestError(f"Input file does not exist: {file_path}")
        data = {
            "tool": tool,
            "metadata.statusEmail": "true",
        }
        with open(file_path, "rb") as infile:
            files = {INPUT_FILE_FIELD: (os.path.basename(file_path), infile)}
            resp = self._request("POST", self.user_url, data=data, files=files)
        try:
            details = jobstatus_to_details(_parse(resp.content))
        except ValueError as err:
            raise RemoteError(f"Malformed job status: {err}") from err
        LOG.info("submitted %s as %s", tool, anonymizeJobId(details.job_id))
        return details

    def download_results(
        self, job_url: str, destination: str, on_progress: ProgressCallback
    ) -> List[FetchedFile]:
        details = self.get_job_status(job_url)
        if not details.results_uri:
            raise RemoteFetchError(
                "Job {} has no results yet (stage {})".format(
                    anonymizeJobId(details.job_id), details.job_stage))
        try:
            jobFiles = results_to_jobfiles(self._get_document(details.results_uri))
        except ValueError as err:
            raise RemoteFetchError(f"Malformed result list: {err}") from err
        LOG.debug("%d result files for %s", len(jobFiles),
                  anonymizeJobId(details.job_id))
        return [
            self._download_file(jobFile, destination, on_progress)
            for jobFile in jobFiles
        ]

    def _download_file(
        self, jobFile: JobFile, destination: str, on_progress: ProgressCallback
    ) -> FetchedFile:
        filename = os.path.basename(jobFile.filename.replace("\\", "/"))
        if filename in ("", ".", ".."):
            raise RemoteFetchError(f"Invalid result file name {jobFile.filename!r}")
        path = os.path.join(destination, filename)

        resp = self._request("GET", jobFile.url, stream=True)
        total = _content_length(resp, jobFile.length)
        downloaded = 0
        on_progress(filename, downloaded, total)
        try:
            with resp, open(path, "wb") as out:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    out.write(chunk)
                    downloaded += len(chunk)
                    on_progress(filename, downloaded, total)
        except requests.RequestException as err:
            raise RemoteFetchError(
                f"Failed to download {filename}: {err}") from err
        return FetchedFile(path=path, filename=filename, size=downloaded)
