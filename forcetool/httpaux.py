"""HTTP request descriptions, content types and retry policy."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

RetryCheck = Callable[[Any, Optional[BaseException]], bool]
HttpCallback = Callable[[Any], None]


class ContentType(str, Enum):
    """Content types used in requests."""

    NONE = ""
    JSON = "application/json"
    XML = "application/xml"
    CSV = "text/csv"


class HttpMethod(str, Enum):
    """Methods used for requests that carry a body."""

    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"


class SessionExpiredError(Exception):
    """The session has expired and must be refreshed."""


_OS_NAMES = {"win32": "windows", "cygwin": "windows", "darwin": "darwin"}
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def user_agent(version: str) -> str:
    """Return the User-Agent header value for the given client version."""
    os_name = _OS_NAMES.get(sys.platform, sys.platform.rstrip("0123456789"))
    machine = platform.machine().lower()
    arch = _ARCH_NAMES.get(machine, machine)
    return f"force/{version} ({os_name}-{arch})"


def _is_session_expired(response: Any, error: BaseException | None) -> bool:
    return isinstance(error, SessionExpiredError)


@dataclass
class HttpRetrier:
    """Decides whether a failed request should be tried again."""

    max_attempts: int
    backoff_delay: float = 0.0
    retry_on_errors: list[RetryCheck] = field(default_factory=list)
    attempt: int = 0

    def reauth(self) -> HttpRetrier:
        """Retry when the session has expired."""
        return self.append_error_check(_is_session_expired)

    def append_error_check(self, check: RetryCheck) -> HttpRetrier:
        """Add a check that decides whether an error is retryable."""
        self.retry_on_errors.append(check)
        return self

    def with_backoff_delay(self, delay: float) -> HttpRetrier:
        """Set the delay, in seconds, between attempts."""
        self.backoff_delay = delay
        return self

    def should_retry(self, response: Any, error: BaseException | None) -> bool:
        """Count an attempt and report whether the error warrants a retry."""
        if error is None:
            return False
        if self.attempt >= self.max_attempts:
            return False
        self.attempt += 1
        return any(check(response, error) for check in self.retry_on_errors)

    def copy(self) -> HttpRetrier:
        """Return an independent retrier with the same settings and state."""
        return HttpRetrier(
            max_attempts=self.max_attempts,
            backoff_delay=self.backoff_delay,
            retry_on_errors=list(self.retry_on_errors),
            attempt=self.attempt,
        )


def default_retrier() -> HttpRetrier:
    """Two attempts, no delay, retrying on expired sessions."""
    return HttpRetrier(max_attempts=2, backoff_delay=0.0).reauth()


@dataclass
class RequestInput:
    """Description of an HTTP request to perform."""

    method: str
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    callback: Optional[HttpCallback] = None
    retrier: Optional[HttpRetrier] = None
    body: Optional[bytes] = None

    def with_header(self, key: str, value: str) -> RequestInput:
        self.headers[key] = value
        return self

    def with_content(self, content_type: ContentType | str) -> RequestInput:
        value = content_type.value if isinstance(content_type, ContentType) else content_type
        return self.with_header("Content-Type", value)

    def with_callback(self, callback: HttpCallback) -> RequestInput:
        self.callback = callback
        return self