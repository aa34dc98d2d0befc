# state.py
"""마지막으로 전송한 공지 번호(cursor)를 관리하는 모듈."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from .errors import PersistenceError

LOGGER = logging.getLogger(__name__)

# 작업 디렉터리의 data.db를 기본으로 사용
DEFAULT_DB_PATH = Path("data.db")

# 단일 행만 사용하므로 pk는 항상 0
CURSOR_PK = 0


class CursorStore:
    """SQLite에 마지막 공지 번호 하나를 저장합니다."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_DB_PATH
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = sqlite3.connect(str(self.path), check_same_thread=False)
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS last_id (
                        pk INTEGER PRIMARY KEY,
                        id INTEGER NOT NULL
                    )
                    """
                )
                conn.commit()
            except sqlite3.Error as exc:
                raise PersistenceError(f"Failed to open {self.path}: {exc}") from exc
            self._conn = conn
        return self._conn

    def get(self) -> Optional[int]:
        """저장된 마지막 공지 번호, 없으면 None."""
        try:
            row = self.conn.execute(
                "SELECT id FROM last_id WHERE pk = ?", (CURSOR_PK,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to read last id: {exc}") from exc
        return int(row[0]) if row is not None else None

    def set(self, value: int) -> None:
        """마지막 공지 번호를 덮어씁니다. 같은 값으로 여러 번 불러도 안전."""
        try:
            self.conn.execute(
                "INSERT OR REPLACE INTO last_id (pk, id) VALUES (?, ?)",
                (CURSOR_PK, value),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to save last id {value}: {exc}") from exc
        LOGGER.info("last_id 저장 완료: %d", value)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
