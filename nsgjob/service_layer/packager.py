"""
Fetch a job's result files and package them into a single zip archive.

The files are downloaded into a fresh staging directory under the system
temp area, written into ``<output dir>/results_<job token>.zip`` in the order
the fetcher returned them, and the staging directory is removed on every
exit path.
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
import os
import shutil
import stat
import tempfile
from typing import Callable, Iterator, List, Optional, Sequence
from urllib.parse import urlsplit
import zipfile

from nsgjob.anonymize import anonymizeJobId
from nsgjob.domain import FetchedFile
from nsgjob.errors import (
    DuplicateEntryNameError,
    InvalidReferenceError,
    OutputIOError,
    RemoteFetchError,
    StagingIOError,
)
from nsgjob.progress import ProgressBridge

LOG = logging.getLogger(__name__)

ARCHIVE_PREFIX = "results_"
ARCHIVE_EXT = ".zip"
STAGING_PREFIX = "nsg_download_"

ENTRY_MODE = 0o755
# Fixed timestamp so identical inputs produce identical archives
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
_CREATE_SYSTEM_UNIX = 3

ProgressCallback = Callable[[str, int, int], None]
Fetcher = Callable[[str, str, ProgressCallback], Sequence[FetchedFile]]


def job_token(job_reference: str) -> str:
    """
    Return the last path segment of a job URL.

    Raises:
        InvalidReferenceError: If there is no usable last segment
    """
    if not isinstance(job_reference, str):
        raise InvalidReferenceError(job_reference)
    path = urlsplit(job_reference).path.rstrip("/")
    token = path.rsplit("/", 1)[-1]
    if token in ("", ".", ".."):
        raise InvalidReferenceError(job_reference)
    return token


def archive_name(token: str) -> str:
    return ARCHIVE_PREFIX + token + ARCHIVE_EXT


def _remove_staging(path: str, strict: bool) -> None:
    try:
        shutil.rmtree(path)
    except OSError as err:
        if strict:
            raise StagingIOError(
                f"Failed to clean up temp dir {path}: {err}") from err
        LOG.warning("failed to clean up temp dir %s", path, exc_info=True)
    else:
        LOG.debug("removed staging directory %s", path)


@contextmanager
def staging_directory(token: str) -> Iterator[str]:
    """
    Create a uniquely named staging directory and remove it on exit.

    A removal failure on the success path raises StagingIOError. When the
    body raised, a removal failure is only logged so the original error
    propagates.
    """
    try:
        path = tempfile.mkdtemp(prefix=f"{STAGING_PREFIX}{token}_")
    except OSError as err:
        raise StagingIOError(f"Failed to create temp dir: {err}") from err
    LOG.debug("created staging directory %s", path)
    try:
        yield path
    except BaseException:
        _remove_staging(path, strict=False)
        raise
    _remove_staging(path, strict=True)


def entry_names(files: Sequence[FetchedFile]) -> List[str]:
    """
    Archive entry names for the fetched files, in order.

    Raises:
        DuplicateEntryNameError: If two files share a base name
        OutputIOError: If a file path has no base name
    """
    names = []
    seen = set()
    for fetched in files:
        name = os.path.basename(fetched.path)
        if not name:
            raise OutputIOError(f"Invalid file path: {fetched.path!r}")
        if name in seen:
            raise DuplicateEntryNameError(name)
        seen.add(name)
        names.append(name)
    return names


def _entry_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ENTRY_DATE_TIME)
    info.compress_type = zipfile.ZIP_DEFLATED
    info.create_system = _CREATE_SYSTEM_UNIX
    info.external_attr = (stat.S_IFREG | ENTRY_MODE) << 16
    return info


def _discard_partial(archive_path: str) -> None:
    try:
        os.remove(archive_path)
    except FileNotFoundError:
        pass
    except OSError:
        LOG.warning("failed to remove partial archive %s", archive_path,
                    exc_info=True)


def write_archive(
    archive_path: str, files: Sequence[FetchedFile], names: Sequence[str]
) -> None:
    """
    Write files into a new archive at archive_path, replacing any old file.

    A partially written archive is removed before OutputIOError is raised.
    """
    try:
        os.makedirs(os.path.dirname(archive_path), exist_ok=True)
    except OSError as err:
        raise OutputIOError(f"Failed to create output dir: {err}") from err

    try:
        with zipfile.ZipFile(archive_path, "w", zipfile.ZIP_DEFLATED) as archive:
            for fetched, name in zip(files, names):
                try:
                    with open(fetched.path, "rb") as src:
                        contents = src.read()
                except OSError as err:
                    raise OutputIOError(
                        f"Failed to read file {name}: {err}") from err
                archive.writestr(_entry_info(name), contents)
    except OutputIOError:
        _discard_partial(archive_path)
        raise
    except (OSError, zipfile.LargeZipFile) as err:
        _discard_partial(archive_path)
        raise OutputIOError(
            f"Failed to write zip file {archive_path}: {err}") from err


class ResultsPackager:
    """
    Runs one fetch-and-package pipeline per call.

    Only one run per job reference is expected at a time; concurrent runs for
    the same job would write the same archive path.
    """

    def __init__(self, fetcher: Fetcher, bridge: Optional[ProgressBridge] = None):
        """
        Args:
            fetcher: Callable (job_reference, staging_dir, on_progress) that
                downloads every result file and returns them as FetchedFiles
            bridge: Progress relay; progress and completion go nowhere if None
        """
        self._fetch = fetcher
        self._bridge = bridge

    def _on_progress(self, filename: str, downloaded: int, total: int) -> None:
        if self._bridge is not None:
            self._bridge.progress(filename, downloaded, total)

    def _fetch_into(self, job_reference: str, staging: str) -> List[FetchedFile]:
        try:
            return list(self._fetch(job_reference, staging, self._on_progress))
        except RemoteFetchError:
            raise
        except Exception as err:
            raise RemoteFetchError(
                f"Failed to download results: {err}",
                status=getattr(err, "status", None)) from err

    def package_results(self, job_reference: str, output_dir: str) -> str:
        """
        Fetch the job's results and write them into one archive.

        Args:
            job_reference: Job URL; its last segment names the archive
            output_dir: Directory for the archive, created if missing

        Returns:
            Absolute path of the archive

        Raises:
            InvalidReferenceError, StagingIOError, RemoteFetchError,
            DuplicateEntryNameError, OutputIOError
        """
        token = job_token(job_reference)
        archive_path = os.path.abspath(
            os.path.join(output_dir, archive_name(token)))

        with staging_directory(token) as staging:
            fetched = self._fetch_into(job_reference, staging)
            names = entry_names(fetched)
            write_archive(archive_path, fetched, names)
            LOG.info("packaged %d result files for %s", len(fetched),
                     anonymizeJobId(token))

        if self._bridge is not None:
            self._bridge.complete()
        return archive_path
