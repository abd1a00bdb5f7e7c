"""
Errors raised by peerdep.

Every error derives from :class:`PeerDepError` and keeps machine-readable
context in ``details``; ``str()`` appends that context as ``key=value``
pairs so a single ``print_error(str(exc))`` shows everything.

Manifest, configuration and file errors abort the run with exit code 1.
A :class:`RegistryError` describes one failed lookup and is absorbed by the
registry prober, which drops that dependency from the report.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

_BODY_PREVIEW_LENGTH = 200


def _present(**fields: Any) -> Dict[str, Any]:
    """Keep only the fields that were actually provided."""
    return {key: value for key, value in fields.items() if value is not None}


def _preview(text: str, limit: int = _BODY_PREVIEW_LENGTH) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


class PeerDepError(Exception):
    """Base class of every peerdep error.

    Args:
        message: Human-readable description.
        details: Structured context such as paths, URLs or status codes.
    """

    def __init__(
        self,
        message: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"details={self.details!r})"
        )


class ManifestError(PeerDepError):
    """``package.json`` is missing, unreadable or not valid JSON.

    Args:
        message: Error description.
        file_path: Manifest path.
        line_number: Line of the JSON syntax error, if known.
    """

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        super().__init__(message, _present(file=file_path, line=line_number))
        self.file_path = file_path
        self.line_number = line_number


class ConfigError(PeerDepError):
    """``peerdep.toml`` cannot be parsed or holds an invalid option."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, _present(path=config_path, option=option))
        self.config_path = config_path
        self.option = option


class NetworkError(PeerDepError):
    """An HTTP request failed or returned an unusable response.

    Args:
        message: Error description.
        url: Requested URL.
        status_code: HTTP status, when a response arrived.
        response_body: Raw body; only a short preview goes into ``details``.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        details = _present(url=url, status_code=status_code)
        if response_body is not None:
            details["response"] = _preview(response_body)
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RegistryError(NetworkError):
    """Metadata of one package could not be obtained.

    Raised by both lookup backends, including ``npm info`` failures that
    never touch the network directly.
    """

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            url=url,
            status_code=status_code,
            response_body=response_body,
        )
        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class FileOperationError(PeerDepError):
    """Reading the manifest or writing the HTML report failed."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            _present(
                path=file_path,
                operation=operation,
                original_error=str(original_error) if original_error else None,
            ),
        )
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error
