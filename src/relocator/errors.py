"""Error taxonomy for relocation decisions.

Components raise the ``RelocationError`` subclasses below; the orchestrator
turns every one of them into a ``RelocationFailure`` value so that a host
processing many files never sees an exception escape a single decision.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    MISSING_ASSOCIATION = "missing_association"
    NO_USABLE_TITLE = "no_usable_title"
    INVALID_EPISODE_TYPE = "invalid_episode_type"
    INCOMPLETE_METADATA = "incomplete_metadata"
    DESTINATION_NOT_FOUND = "destination_not_found"
    PRECONDITION_FAILED = "precondition_failed"
    UNEXPECTED = "unexpected"

    @property
    def recoverable(self) -> bool:
        """Whether a host may reasonably defer to another mechanism."""
        return self is ErrorKind.DESTINATION_NOT_FOUND


class RelocationError(Exception):
    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingAssociation(RelocationError):
    kind = ErrorKind.MISSING_ASSOCIATION


class NoUsableTitle(RelocationError):
    kind = ErrorKind.NO_USABLE_TITLE


class InvalidEpisodeType(RelocationError):
    kind = ErrorKind.INVALID_EPISODE_TYPE


class IncompleteMetadata(RelocationError):
    kind = ErrorKind.INCOMPLETE_METADATA


class DestinationNotFound(RelocationError):
    kind = ErrorKind.DESTINATION_NOT_FOUND


class PreconditionFailed(RelocationError):
    kind = ErrorKind.PRECONDITION_FAILED
