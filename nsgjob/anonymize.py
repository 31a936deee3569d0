"""Identifier redaction for showcase (demonstration) mode.

When the ``SHOWCASE_MODE`` environment variable is ``1`` at start-up, user
names, job ids and job URLs shown to the user are replaced by stable
pseudonyms. Authenticated calls to the remote service always use the real
values; only what is displayed or returned to the caller is rewritten.

With showcase mode off every function here returns its input unchanged.
"""

import os

# Read once; there is no runtime toggle.
_ENABLED = os.environ.get("SHOWCASE_MODE") == "1"

DEMO_USER = "demo_user"
JOB_ID_PREFIX = "NGBW-JOB-"
_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
_SUFFIX_LEN = 12
_MASK64 = (1 << 64) - 1


def showcaseMode() -> bool:
    return _ENABLED


def jobIdHash(value: str) -> int:
    """64-bit wrapping ``h * 31 + byte`` hash over the UTF-8 bytes."""
    hashVal = 0
    for byte in value.encode("utf-8"):
        hashVal = (hashVal * 31 + byte) & _MASK64
    return hashVal


def pseudonymForJobId(jobId: str) -> str:
    hashVal = jobIdHash(jobId)
    suffix = []
    for _ in range(_SUFFIX_LEN):
        suffix.append(_ALPHABET[hashVal % 36])
        hashVal //= 36
    return JOB_ID_PREFIX + "".join(suffix)


def anonymizeUsername(username: str) -> str:
    if not _ENABLED:
        return username
    return DEMO_USER


def anonymizeJobId(jobId: str) -> str:
    if not _ENABLED:
        return jobId
    return pseudonymForJobId(jobId)


def anonymizeUrl(url: str) -> str:
    """
    Replace the user and job id path segments of a job URL.

    NSG job URLs end in ``.../job/<username>/<job id>``, so the second-to-last
    segment is taken as the user name and the last one as the job id. The
    URL is not otherwise parsed.
    """
    if not _ENABLED:
        return url
    parts = url.split("/")
    if len(parts) < 2:
        return url
    parts[-2] = DEMO_USER
    parts[-1] = pseudonymForJobId(parts[-1])
    return "/".join(parts)


def anonymizeAppKey(appKey: str) -> str:
    if not _ENABLED:
        return appKey
    return "DEMO-APP-KEY-" + "X" * 32
