"""Error taxonomy for the team battle scheduler."""

from __future__ import annotations


class TeamfightsError(Exception):
    """Base class for all scheduler errors."""


class ConfigError(TeamfightsError):
    """Configuration file or value is malformed."""


class MissingCredential(TeamfightsError):
    """The OAuth token environment variable is not set."""


class InvalidCredential(TeamfightsError):
    """The OAuth token failed local validation; no request was sent."""


class NetworkError(TeamfightsError):
    """Transport-level failure while talking to the remote service."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class RemoteRequestFailed(TeamfightsError):
    """The remote service answered with a non-success status."""

    def __init__(self, status: int, body: str):
        super().__init__(f"{status}: {body}")
        self.status = status
        self.body = body


class InvalidBatchIndex(TeamfightsError):
    """A batch index outside 1..4 reached the batch selector."""

    def __init__(self, index: object):
        super().__init__(f"Invalid batch number: {index!r}")
        self.index = index


class StateStoreUnreadable(TeamfightsError):
    """The persisted cycle state could not be read or parsed."""

    def __init__(self, path: object, cause: BaseException | None = None):
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not read state file {path}{detail}")
        self.path = path
        self.cause = cause


__all__ = [
    "TeamfightsError",
    "ConfigError",
    "MissingCredential",
    "InvalidCredential",
    "NetworkError",
    "RemoteRequestFailed",
    "InvalidBatchIndex",
    "StateStoreUnreadable",
]
