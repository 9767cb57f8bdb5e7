"""Exception hierarchy shared by the services, clients and HTTP layer."""
from enum import Enum


class StudioError(Exception):
    """Base class for application errors."""


class UnauthorizedError(StudioError):
    """An operation that needs a viewer was called without one."""

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class MutationError(StudioError):
    """A write against the relational store failed."""


class UnknownContentTypeError(StudioError, KeyError):
    """No prompt template is registered for a (category, slug) pair."""

    def __init__(self, category: str, slug: str) -> None:
        self.category = category
        self.slug = slug
        super().__init__(f"Unknown content type {category}/{slug}")

    def __str__(self) -> str:
        return self.args[0]


class FailureReason(str, Enum):
    NETWORK = "network"
    HTTP_STATUS = "http_status"
    MALFORMED_RESPONSE = "malformed_response"


class GenerationError(StudioError):
    """The chat-completion call did not produce text."""

    def __init__(self, reason: FailureReason, detail: str) -> None:
        self.reason = reason
        self.detail = detail
        super().__init__(f"Content generation failed ({reason.value}): {detail}")
