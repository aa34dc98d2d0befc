"""Fetch and parse notices from the Cookie Run: Kingdom Naver cafe board."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

from .errors import (
    DecodeError,
    ItemFieldMissing,
    MissingContentType,
    StructureMismatch,
    TimestampParseError,
    TransportError,
    UnsupportedEncoding,
)
from .models import Notice

LOGGER = logging.getLogger(__name__)

URL_PREFIX = "https://cafe.naver.com/crkingdom"
NOTICE_PAGE = (
    "/ArticleList.nhn?search.clubid=30291108&search.menuid=6&search.boardtype=L"
)
NOTICE_LIST_URL = URL_PREFIX + NOTICE_PAGE

REQUEST_TIMEOUT = 10
HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/118.0.0.0 Safari/537.36"
    )
}

# charset label -> python codec, always decoded with errors="strict"
CHARSET_CODECS = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "ms949": "cp949",
    "cp949": "cp949",
    "windows-949": "cp949",
    "x-windows-949": "cp949",
    "euc-kr": "euc_kr",
}

BOARD_SELECTOR = ".article-board"
ITEM_SELECTOR = ".td_article"
NUMBER_SELECTOR = ".board-number .inner_number"
TITLE_SELECTOR = ".board-list a"
DATE_SELECTOR = ".date"

DATE_FORMAT = "%Y.%m.%d. %H:%M"
SOURCE_TZ = timezone(timedelta(hours=9))


def _charset_of(content_type: str) -> Optional[str]:
    for param in content_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset":
            return value.strip().strip("\"'").lower()
    return None


def decode_body(content_type: str, body: bytes) -> str:
    """Decode a response body using the charset declared in its content type."""
    charset = _charset_of(content_type)
    codec = CHARSET_CODECS.get(charset) if charset else None
    if codec is None:
        raise UnsupportedEncoding(content_type)

    try:
        return body.decode(codec)
    except UnicodeDecodeError as exc:
        raise DecodeError(codec) from exc


def fetch_html(url: str) -> str:
    """Retrieve the HTML contents of the given URL as text."""
    try:
        response = requests.get(url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise TransportError(f"Failed to fetch html from {url}: {exc}") from exc

    content_type = response.headers.get("Content-Type")
    if not content_type:
        raise MissingContentType(url)
    return decode_body(content_type, response.content)


def node_text(tag: Tag) -> str:
    """Join the direct text children of ``tag``, turning ``<br>`` into newlines.

    Each text node is stripped on its own; nested elements other than
    ``<br>`` and comments are skipped.
    """
    parts: list[str] = []
    for child in tag.children:
        if isinstance(child, PreformattedString):
            continue
        if isinstance(child, NavigableString):
            parts.append(child.strip())
        elif isinstance(child, Tag) and child.name == "br":
            parts.append("\n")
    return "".join(parts)


def _absolute_url(href: str) -> str:
    if urlparse(href).scheme:
        return href
    return URL_PREFIX + href


def _parse_number(item: Tag, index: int) -> int:
    number_tag = item.select_one(NUMBER_SELECTOR)
    if number_tag is None:
        raise ItemFieldMissing(index, "article number")

    text = node_text(number_tag).strip()
    if not (text.isascii() and text.isdigit()):
        raise ItemFieldMissing(index, "article number")
    return int(text)


def parse_notice_list(html: str, last_id: Optional[int]) -> List[Notice]:
    """Parse notices newer than ``last_id`` from the board list page.

    Rows come out newest first, exactly as the board lists them. Parsing
    stops at the first row whose number is not above ``last_id`` (0 when
    nothing was delivered yet), so older rows are never looked at.
    """
    soup = BeautifulSoup(html, "html.parser")

    # 첫 번째 article-board 는 상단 고정 공지, 두 번째가 실제 글 목록
    boards = soup.select(BOARD_SELECTOR)
    if not boards:
        raise StructureMismatch("Notice selector error - no match")
    if len(boards) < 2:
        raise StructureMismatch("Notice selector error - second item is not found")

    threshold = last_id or 0
    notices: list[Notice] = []

    for index, item in enumerate(boards[1].select(ITEM_SELECTOR)):
        number = _parse_number(item, index)
        if number <= threshold:
            break

        link = item.select_one(TITLE_SELECTOR)
        if link is None:
            raise ItemFieldMissing(index, "article title")

        title = node_text(link).strip()
        if not title:
            raise ItemFieldMissing(index, "article title")

        href = link.get("href")
        if not href:
            raise ItemFieldMissing(index, "href attr")

        LOGGER.debug("Found notice %d: %s", number, title)
        notices.append(Notice(number=number, title=title, url=_absolute_url(href)))

    return notices


def parse_notice_datetime(html: str) -> datetime:
    """Parse the post time from a notice detail page, returned in UTC."""
    soup = BeautifulSoup(html, "html.parser")

    date_tag = soup.select_one(DATE_SELECTOR)
    if date_tag is None:
        raise StructureMismatch("date cannot be found in the detail page")

    raw = node_text(date_tag)
    try:
        local = datetime.strptime(raw.strip(), DATE_FORMAT)
    except ValueError as exc:
        raise TimestampParseError(raw) from exc

    return local.replace(tzinfo=SOURCE_TZ).astimezone(timezone.utc)
