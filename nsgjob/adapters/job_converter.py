"""
Converters from NSG REST API XML documents to domain objects.

The service answers with small XML documents: ``joblist`` (a ``jobs`` list of
``jobstatus`` elements), ``jobstatus``, ``results`` (a ``jobfiles`` list of
``jobfile`` elements) and ``error``.
"""

from collections import namedtuple
from typing import List, Optional
from xml.etree.ElementTree import Element

from nsgjob.domain import JobDetails, JobMessage, JobSummary
from nsgjob.domain.job import STAGE_COMPLETED, parse_timestamp

JobFile = namedtuple('JobFile', 'filename, url, length')


def _text(elem: Element, path: str) -> Optional[str]:
    found = elem.find(path)
    if found is None or found.text is None:
        return None
    value = found.text.strip()
    return value or None


def _bool(elem: Element, path: str) -> bool:
    return (_text(elem, path) or "").lower() == "true"


def _int(elem: Element, path: str) -> int:
    try:
        return int(_text(elem, path) or 0)
    except ValueError:
        return 0


def _metadata(elem: Element, key: str) -> Optional[str]:
    for entry in elem.findall("metadata/entry"):
        if (_text(entry, "key") or "").lower() == key.lower():
            return _text(entry, "value")
    return None


def _messages(elem: Element) -> List[JobMessage]:
    return [
        JobMessage(
            timestamp=_text(msg, "timestamp"),
            stage=_text(msg, "stage"),
            text=_text(msg, "text") or "",
        )
        for msg in elem.findall("messages/message")
    ]


def _completed_timestamp(elem: Element) -> Optional[str]:
    explicit = _text(elem, "dateCompleted")
    if explicit:
        return explicit
    latest = None
    for msg in _messages(elem):
        if msg.stage != STAGE_COMPLETED or not msg.timestamp:
            continue
        when = parse_timestamp(msg.timestamp)
        if when is None:
            continue
        if latest is None or when > latest[0]:
            latest = (when, msg.timestamp)
    return latest[1] if latest else None


def _self_url(elem: Element) -> str:
    url = _text(elem, "selfUri/url")
    if not url:
        raise ValueError("jobstatus document has no selfUri")
    return url


def _job_id(elem: Element, url: str) -> str:
    return (
        _text(elem, "jobHandle")
        or _text(elem, "selfUri/title")
        or url.rstrip("/").rsplit("/", 1)[-1]
    )


def error_message(root: Element) -> Optional[str]:
    """The human readable message of an ``error`` document, if it is one."""
    if root.tag != "error":
        return None
    return _text(root, "displayMessage") or _text(root, "message")


def jobstatus_to_summary(elem: Element) -> JobSummary:
    url = _self_url(elem)
    return JobSummary(
        job_id=_job_id(elem, url),
        url=url,
        tool=_text(elem, "tool") or _metadata(elem, "tool"),
        job_stage=_text(elem, "jobStage"),
        failed=_bool(elem, "failed"),
        date_submitted=_text(elem, "dateSubmitted"),
        date_completed=_completed_timestamp(elem),
    )


def jobstatus_to_details(elem: Element) -> JobDetails:
    url = _self_url(elem)
    return JobDetails(
        job_id=_job_id(elem, url),
        job_stage=_text(elem, "jobStage") or "UNKNOWN",
        failed=_bool(elem, "failed"),
        date_submitted=_text(elem, "dateSubmitted"),
        self_uri=url,
        results_uri=_text(elem, "resultsUri/url"),
        terminal_stage=_bool(elem, "terminalStage"),
        messages=_messages(elem),
    )


def joblist_to_summaries(root: Element) -> List[JobSummary]:
    return [jobstatus_to_summary(elem) for elem in root.findall("jobs/jobstatus")]


def results_to_jobfiles(root: Element) -> List[JobFile]:
    """Result files in listing order."""
    jobFiles = []
    for elem in root.findall("jobfiles/jobfile"):
        url = _text(elem, "downloadUri/url")
        if not url:
            raise ValueError("jobfile entry has no downloadUri")
        filename = _text(elem, "filename") or _text(elem, "downloadUri/title")
        if not filename:
            raise ValueError("jobfile entry has no filename")
        jobFiles.append(JobFile(filename, url, _int(elem, "length")))
    return jobFiles
