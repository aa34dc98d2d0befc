"""Exceptions raised by the notice bot."""

from __future__ import annotations


class NoticeBotError(Exception):
    """Base class for every error a pipeline run can raise."""


class ConfigError(NoticeBotError, ValueError):
    """Missing or invalid startup configuration."""


class TransportError(NoticeBotError):
    """Network or HTTP level failure while fetching or delivering."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ContentDecodeError(NoticeBotError):
    """The response body cannot be turned into text."""


class MissingContentType(ContentDecodeError):
    def __init__(self, url: str | None = None):
        self.url = url
        super().__init__(f"Empty content-type ({url})" if url else "Empty content-type")


class UnsupportedEncoding(ContentDecodeError):
    def __init__(self, content_type: str):
        self.content_type = content_type
        super().__init__(f"Unknown content-type charset: {content_type}")


class DecodeError(ContentDecodeError):
    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Failed to decode html as {encoding}")


class StructureMismatch(NoticeBotError):
    """An expected element is missing; the remote page layout changed."""


class ItemFieldMissing(NoticeBotError):
    """A listing row lacks its number, title or link."""

    def __init__(self, index: int, field: str):
        self.index = index
        self.field = field
        super().__init__(f"{field} cannot be found at {index}th item")


class TimestampParseError(NoticeBotError):
    """The detail page date text does not match ``YYYY.MM.DD. HH:MM``."""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"Unexpected date format: {raw!r}")


class PersistenceError(NoticeBotError):
    """Reading or writing the cursor failed."""
