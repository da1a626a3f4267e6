from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from content_api.identity.manager import IdentityError


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    COLLABORATOR_ERROR = "collaborator_error"


class ContentApiError(Exception):
    """Base class for errors raised by services; `kind` lets callers branch without parsing messages."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ContentApiError):
    kind = ErrorKind.NOT_FOUND


class UserNotFoundError(NotFoundError):
    def __init__(self, message: str = "User Not Found.") -> None:
        super().__init__(message)


class MenuNotFoundError(NotFoundError):
    def __init__(self, message: str = "Menu Not Found.") -> None:
        super().__init__(message)


class ValidationFailedError(ContentApiError):
    kind = ErrorKind.VALIDATION_FAILED


class IdentityOperationError(ContentApiError):
    """
    The identity collaborator rejected an operation.

    The message is the newline-joined list of error descriptions; the
    structured (code, description) pairs are kept on `errors`.
    """

    kind = ErrorKind.COLLABORATOR_ERROR

    def __init__(self, errors: Iterable["IdentityError"]) -> None:
        self.errors: List["IdentityError"] = list(errors)
        super().__init__(format_identity_errors(self.errors))

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self.errors]


def format_identity_errors(errors: Iterable["IdentityError"]) -> str:
    return "\n".join(e.description for e in errors)
