"""SQLite cache layer for ipinfo.io responses."""

from __future__ import annotations

import json
import sqlite3
import time

from .config import CACHE_DB_PATH, CACHE_DIR, CACHE_TTL


def _get_connection() -> sqlite3.Connection:
    # One connection per call so worker threads never share one.
    CACHE_DIR.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(CACHE_DB_PATH))
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def init_cache() -> None:
    """Create tables if they don't exist."""
    conn = _get_connection()
    try:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS responses (
                key         TEXT PRIMARY KEY,
                payload     TEXT NOT NULL,
                fetched_at  REAL NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_responses_fetched
                ON responses(fetched_at);
        """)
        conn.commit()
    finally:
        conn.close()


def get_cached(key: str, ttl: float = CACHE_TTL) -> dict | None:
    """Return the cached payload for *key* if it is younger than *ttl*."""
    conn = _get_connection()
    try:
        row = conn.execute(
            "SELECT payload, fetched_at FROM responses WHERE key = ?",
            (key,),
        ).fetchone()
    finally:
        conn.close()

    if row is None or time.time() - row[1] > ttl:
        return None
    try:
        return json.loads(row[0])
    except ValueError:
        return None


def store(key: str, payload: dict) -> None:
    """Insert or replace the payload cached under *key*."""
    conn = _get_connection()
    try:
        conn.execute(
            """
            INSERT INTO responses (key, payload, fetched_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                payload    = excluded.payload,
                fetched_at = excluded.fetched_at
            """,
            (key, json.dumps(payload), time.time()),
        )
        conn.commit()
    finally:
        conn.close()


def purge_expired(ttl: float = CACHE_TTL) -> int:
    """Delete entries older than *ttl*. Returns count removed."""
    conn = _get_connection()
    try:
        cur = conn.execute(
            "DELETE FROM responses WHERE fetched_at < ?",
            (time.time() - ttl,),
        )
        conn.commit()
        return cur.rowcount
    finally:
        conn.close()


def clear_cache() -> int:
    """Delete every cached response. Returns count removed."""
    conn = _get_connection()
    try:
        cur = conn.execute("DELETE FROM responses")
        conn.commit()
        return cur.rowcount
    finally:
        conn.close()


def get_stats(ttl: float = CACHE_TTL) -> dict:
    """Return cache statistics."""
    conn = _get_connection()
    try:
        total = conn.execute("SELECT COUNT(*) FROM responses").fetchone()[0]
        fresh = conn.execute(
            "SELECT COUNT(*) FROM responses WHERE fetched_at >= ?",
            (time.time() - ttl,),
        ).fetchone()[0]
        asn_count = conn.execute(
            "SELECT COUNT(*) FROM responses WHERE key LIKE 'asn:%'"
        ).fetchone()[0]

        return {
            "entries": total,
            "fresh": fresh,
            "expired": total - fresh,
            "by_kind": {"ip": total - asn_count, "asn": asn_count},
        }
    finally:
        conn.close()
