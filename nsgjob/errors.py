"""Exception classes raised by the job client."""


class JobClientError(Exception):
    """Base class for errors surfaced to the user."""


class NotConnectedError(JobClientError):
    def __init__(self):
        super().__init__("Not connected")


class ConnectionFailedError(JobClientError):
    """Raised when the connectivity check for new credentials fails."""


class InvalidRequestError(JobClientError):
    """Raised when a request is rejected before reaching the remote service."""


class RemoteError(JobClientError):
    """Raised when the remote job service reports a failure."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class RemoteFetchError(RemoteError):
    """Raised when job results could not be fetched."""


class StagingIOError(JobClientError):
    """Raised when the staging directory cannot be created or removed."""


class OutputIOError(JobClientError):
    """Raised when the output archive cannot be created, written or sealed."""


class DuplicateEntryNameError(JobClientError):
    def __init__(self, name):
        super().__init__(
            "Duplicate result file name {!r}; refusing to overwrite archive "
            "entry".format(name))
        self.name = name


class InvalidReferenceError(JobClientError):
    def __init__(self, reference):
        super().__init__("Invalid job URL: {!r}".format(reference))
        self.reference = reference


class PreferencesError(JobClientError):
    """Raised when a preference value is rejected."""
