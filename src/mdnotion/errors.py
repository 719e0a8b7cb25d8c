"""Typed exception hierarchy for mdnotion.

Every error carries the context needed to locate the problem (document path,
offending URL, remote status) and is fatal to a run: nothing in the library
catches one of these and continues.
"""

from typing import Optional, Sequence


class MdNotionError(Exception):
    """Base exception for all mdnotion errors."""
    pass


class ConversionError(MdNotionError):
    """Base exception for failures while converting a single document."""

    def __init__(self, document: str, message: str):
        super().__init__(f"(page={document}) {message}")
        self.document = document


class ValidationError(ConversionError):
    """Raised when a link or image URL is not a well-formed absolute URL."""

    def __init__(self, document: str, url: str, reason: Optional[str] = None):
        message = f"detected invalid url: {url}"
        if reason:
            message += f", err: {reason}"
        super().__init__(document, message)
        self.url = url
        self.reason = reason


class UnresolvedLinkError(ConversionError):
    """Raised when a relative link points at a path that is not part of the run."""

    def __init__(self, document: str, url: str):
        super().__init__(
            document,
            f"detected invalid link url: {url}, found no fallback alternative",
        )
        self.url = url


class ArgParseError(ConversionError):
    """Raised when a document's leading metadata directive cannot be parsed."""

    def __init__(self, document: str, message: str):
        super().__init__(document, f"failed to parse metadata directive: {message}")
        self.message = message


class AmbiguousLookupError(MdNotionError):
    """Raised when a page lookup by name does not match exactly one page."""

    def __init__(self, name: str, matches: Sequence[str]):
        super().__init__(
            f"need to match exactly one page named '{name}', "
            f"found {len(matches)} results ({', '.join(matches)})"
        )
        self.name = name
        self.matches = list(matches)


class RemoteAPIError(MdNotionError):
    """Raised when a remote call fails or returns a non-success status."""

    def __init__(self, operation: str, status: Optional[int], body: str):
        if status is None:
            message = f"failed to {operation}: {body}"
        else:
            message = f"(request_status={status}) failed to {operation}: {body}"
        super().__init__(message)
        self.operation = operation
        self.status = status
        self.body = body


class DocumentIOError(MdNotionError):
    """Raised when source documents cannot be discovered or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to read {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(MdNotionError):
    """Raised when settings are missing a value a command needs."""

    def __init__(self, message: str, field: Optional[str] = None):
        if field:
            full_message = f"Configuration error in field '{field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.field = field
