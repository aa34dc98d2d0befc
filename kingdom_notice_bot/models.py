"""Data models for the cafe notice crawler."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notice:
    """Represents a single post on the cafe notice board."""

    number: int
    title: str
    url: str
    timestamp: Optional[datetime] = None
