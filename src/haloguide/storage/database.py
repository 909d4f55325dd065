#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Database storage module
SQLite backed key/value store, one row per (profile, key)
"""

import sqlite3
import logging
from pathlib import Path
from typing import List, Optional, Union
from contextlib import contextmanager

from .kv_store import PersistentKeyValueStore
from ..errors import StorageUnavailableError


class SqliteKeyValueStore(PersistentKeyValueStore):
    """SQLite key/value store"""

    def __init__(self, db_path: Union[str, Path], profile: str = "default"):
        """
        Initialize SQLite store

        Args:
            db_path: Database file path
            profile: Profile the keys are scoped to
        """
        self.db_path = Path(db_path).expanduser()
        self.profile = profile
        self.logger = logging.getLogger('haloguide.storage.database')
        self._initialized = False

    @contextmanager
    def get_connection(self):
        """
        Get database connection (context manager)

        Yields:
            sqlite3.Connection: Database connection object
        """
        conn = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            if not self._initialized:
                self._create_tables(conn)
                self._initialized = True
            yield conn
            conn.commit()
        except (sqlite3.Error, OSError) as e:
            if conn:
                conn.rollback()
            self.logger.error(f"Database operation failed: {e}")
            raise StorageUnavailableError(f"SQLite store unavailable: {e}")
        finally:
            if conn:
                conn.close()

    def _create_tables(self, conn: sqlite3.Connection):
        """Create key/value table"""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS guidance_kv (
                profile TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (profile, key)
            )
        """)

    def get(self, key: str) -> Optional[str]:
        with self.get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM guidance_kv WHERE profile = ? AND key = ?",
                (self.profile, key)
            ).fetchone()
        return row['value'] if row else None

    def set(self, key: str, value: str) -> None:
        with self.get_connection() as conn:
            conn.execute("""
                INSERT INTO guidance_kv (profile, key, value, updated_at)
                VALUES (?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(profile, key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """, (self.profile, key, str(value)))
        self.logger.debug(f"Stored {key} for profile {self.profile}")

    def remove(self, key: str) -> None:
        with self.get_connection() as conn:
            conn.execute(
                "DELETE FROM guidance_kv WHERE profile = ? AND key = ?",
                (self.profile, key)
            )

    def keys(self) -> List[str]:
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT key FROM guidance_kv WHERE profile = ? ORDER BY key",
                (self.profile,)
            ).fetchall()
        return [row['key'] for row in rows]

    def clear(self) -> None:
        with self.get_connection() as conn:
            cursor = conn.execute("DELETE FROM guidance_kv WHERE profile = ?", (self.profile,))
        self.logger.info(f"Cleared {cursor.rowcount} keys for profile {self.profile}")

    def list_profiles(self) -> List[str]:
        """List profiles that have stored guidance state"""
        with self.get_connection() as conn:
            rows = conn.execute(
                "SELECT DISTINCT profile FROM guidance_kv ORDER BY profile"
            ).fetchall()
        return [row['profile'] for row in rows]
