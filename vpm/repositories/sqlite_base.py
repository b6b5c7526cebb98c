# Rev 0.2.0
from __future__ import annotations
import json
import sqlite3
from typing import Any, Dict, List, Optional, Union


class SQLiteRepository:
    """
    Shared connection handling for the table repositories.
    Accepts a raw sqlite3.Connection or a wrapper exposing `.conn`
    (repositories/db.py).
    """

    def __init__(self, db_or_conn: Union[sqlite3.Connection, Any]):
        self._db_or_conn = db_or_conn

    def _conn(self) -> sqlite3.Connection:
        if isinstance(self._db_or_conn, sqlite3.Connection):
            return self._db_or_conn
        if isinstance(getattr(self._db_or_conn, "conn", None), sqlite3.Connection):
            return self._db_or_conn.conn
        raise RuntimeError(
            f"{type(self).__name__}: could not obtain sqlite3.Connection "
            "(expected .conn on wrapper, or a raw Connection)."
        )

    def _fetch_all(self, sql: str, params: tuple = ()) -> List[Dict[str, Any]]:
        cur = self._conn().execute(sql, params)
        cols = [d[0] for d in cur.description]
        return [{cols[i]: row[i] for i in range(len(cols))} for row in cur.fetchall()]

    def _fetch_one(self, sql: str, params: tuple = ()) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(sql, params)
        return rows[0] if rows else None

    def _upsert(self, table: str, values: Dict[str, Any]) -> None:
        # ON CONFLICT keeps the rowid, so listing by rowid stays in insertion order
        cols = list(values.keys())
        updates = ", ".join(f"{c} = excluded.{c}" for c in cols if c != "id")
        self._conn().execute(
            f"INSERT INTO {table}({', '.join(cols)}) VALUES ({', '.join('?' for _ in cols)}) "
            f"ON CONFLICT(id) DO UPDATE SET {updates}",
            tuple(values.values()),
        )

    def _delete(self, table: str, record_id: str) -> bool:
        cur = self._conn().execute(f"DELETE FROM {table} WHERE id = ?", (record_id,))
        return cur.rowcount > 0

    @staticmethod
    def _dump_ids(ids: List[str]) -> str:
        return json.dumps(list(ids))

    @staticmethod
    def _load_ids(raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        return [str(v) for v in json.loads(raw)]
