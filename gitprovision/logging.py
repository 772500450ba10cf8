"""
gitprovision logging utilities.

Provides configurable logging for hosting provider HTTP traffic and for the
resolution pipeline. Access tokens are never written to log output.
"""

import logging
import re
from typing import Any

# Package loggers
_sdk_logger = logging.getLogger("gitprovision")
_http_logger = logging.getLogger("gitprovision.http")
_resolver_logger = logging.getLogger("gitprovision.resolver")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization headers
    (re.compile(r"(Bearer|token|Basic)\s+[A-Za-z0-9_\-\.=+/]{8,}"), r"\1 [REDACTED]"),
    # Well-known token formats (GitHub and GitLab personal access tokens)
    (re.compile(r"\b(ghp|gho|ghu|ghs|ghr|github_pat|glpat)_[A-Za-z0-9_\-]{10,}"), "[TOKEN_REDACTED]"),
    # Secret/token key-value pairs
    (re.compile(r"(secret|token|password|api_token|apitoken)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

_SENSITIVE_KEYS = {"authorization", "token", "api_token", "apitoken", "password", "secret", "private-token"}

# Characters of a token kept visible by mask_token
_TOKEN_PREVIEW_LENGTH = 4


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    resolver_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure gitprovision logging.

    Args:
        level: Default log level for all package loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        resolver_level: Log level for resolution stages (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from gitprovision.logging import configure_logging

        # Show every resolution stage
        configure_logging(level=logging.INFO, resolver_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _resolver_logger.setLevel(resolver_level if resolver_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a gitprovision logger.

    Args:
        name: Logger name suffix (e.g., "http", "resolver"). If None, returns
            the package logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"gitprovision.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Replaces authorization headers, personal access tokens and token-like
    key/value pairs with redacted placeholders.
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def mask_token(token: str | None) -> str:
    """
    Render an access token for safe display.

    Only the last few characters are kept, e.g. "****abcd". Short or empty
    tokens are fully redacted.
    """
    if not token:
        return "[EMPTY]"
    if len(token) <= _TOKEN_PREVIEW_LENGTH * 2:
        return "[REDACTED]"
    return f"****{token[-_TOKEN_PREVIEW_LENGTH:]}"


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Keys to mask (default: authorization, token, password, ...)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = _SENSITIVE_KEYS

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if key_lower in sensitive_keys or any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    headers: dict[str, str] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if headers:
        log_parts.append(f"headers={safe_log_dict(headers)}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_http_response(
    status_code: int,
    url: str,
    body: dict[str, Any] | list[Any] | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Log an HTTP response at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if isinstance(body, dict) and body:
        log_parts.append(f"body={safe_log_dict(body)}")
    elif isinstance(body, list):
        log_parts.append(f"items={len(body)}")

    _http_logger.debug(" | ".join(log_parts))


def log_resolution_stage(stage: str, **fields: Any) -> None:
    """
    Log a resolution stage transition at DEBUG level.

    Args:
        stage: Stage reached (e.g., "ServerResolved", "OwnerResolved")
        **fields: Values resolved so far; sensitive keys are masked
    """
    if not _resolver_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [stage]
    safe_fields = safe_log_dict(fields)
    log_parts.extend(f"{key}={value}" for key, value in safe_fields.items())

    _resolver_logger.debug(" | ".join(log_parts))


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "mask_token",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_resolution_stage",
]
