"""NSG account credentials."""

from __future__ import annotations

from dataclasses import dataclass

from nsgjob.anonymize import anonymizeUsername


@dataclass(frozen=True, repr=False)
class Credentials:
    """
    Username, password and application key for the NSG REST API.

    Held in memory for the active session only. repr() never shows the
    password or application key, and shows the username only as the
    anonymizer displays it, so credentials cannot leak into logs.
    """

    username: str
    password: str
    app_key: str

    def __repr__(self) -> str:
        return "Credentials(username={!r})".format(
            anonymizeUsername(self.username))

    def is_complete(self) -> bool:
        return bool(self.username and self.password and self.app_key)
