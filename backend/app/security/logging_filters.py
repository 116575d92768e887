"""Logging filters that scrub sensitive content."""

from __future__ import annotations

import logging
import re

_SENSITIVE_PATTERN = re.compile(
    r"(Authorization: Bearer\s+[\w\.-]+|access_token\"\s*:\s*\"[^\"]+\"|password\"\s*:\s*\"[^\"]+\")",
    re.IGNORECASE,
)
_EMAIL_PATTERN = re.compile(r"\b([A-Za-z0-9._%+-])([A-Za-z0-9._%+-]*)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")


def mask_email(value: str | None) -> str | None:
    """Keep the first character of the local part: ``a***@example.com``."""
    if not value or "@" not in value:
        return value
    local, _, domain = value.partition("@")
    if not local:
        return "***@" + domain
    return f"{local[0]}***@{domain}"


def scrub(text: str) -> str:
    text = _SENSITIVE_PATTERN.sub("**REDACTED**", text)
    return _EMAIL_PATTERN.sub(lambda match: f"{match.group(1)}***@{match.group(3)}", text)


def _scrub_arg(value: object) -> object:
    if isinstance(value, str):
        return scrub(value)
    if isinstance(value, (list, tuple)):
        return type(value)(_scrub_arg(item) for item in value)
    return value


class SensitiveFilter(logging.Filter):
    """Redact credentials and mask email addresses in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(_scrub_arg(arg) for arg in record.args)
        return True


def install_sensitive_filter(
    logger_names: tuple[str, ...] = ("", "uvicorn", "uvicorn.access", "uvicorn.error"),
) -> None:
    """Attach one ``SensitiveFilter`` to each named logger."""
    for name in logger_names:
        target = logging.getLogger(name)
        if not any(isinstance(existing, SensitiveFilter) for existing in target.filters):
            target.addFilter(SensitiveFilter())


__all__ = ["SensitiveFilter", "install_sensitive_filter", "mask_email", "scrub"]
