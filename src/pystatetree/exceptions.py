"""Custom exception hierarchy for pystatetree."""

from __future__ import annotations


class StateTreeError(Exception):
    """Base exception for all pystatetree errors."""


class StateTreeConfigError(StateTreeError):
    """Invalid or missing configuration."""


class PayloadDecodeError(StateTreeError):
    """A payload fragment (base64, JSON) could not be decoded."""


class TreeStoreError(StateTreeError):
    """The tree store rejected a node creation, deletion or value write."""

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class StateTreeTransportError(StateTreeError):
    """HTTP-level failure while fetching a document (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)
