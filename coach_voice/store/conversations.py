"""Relational store access for the voice pipeline (sqlite3, parameterized queries).

Calls are blocking; async callers go through `asyncio.to_thread`.
"""

from __future__ import annotations

import sqlite3
import contextlib
from typing import Any
from pathlib import Path
from datetime import date, datetime
from collections.abc import Iterator

from coach_voice.config.pipeline import INPUT_MODE_VOICE, CONTEXT_TYPE_MENTOR, DEFAULT_MENTOR_PERSONALITY

# Career arc value per logged hour: $5,270,000 over 10,400 hours.
HOURLY_VALUE = 507

RECENT_CHECK_INS_LIMIT = 7

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    name TEXT,
    preferred_model TEXT,
    mentor_personality TEXT,
    current_streak INTEGER DEFAULT 0,
    total_tasks_completed INTEGER DEFAULT 0,
    total_hours_logged REAL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS plans (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active',
    phase INTEGER DEFAULT 0,
    niche TEXT,
    offer TEXT,
    start_date TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS tasks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    plan_id INTEGER NOT NULL,
    day_number INTEGER NOT NULL,
    title TEXT,
    description TEXT,
    status TEXT,
    energy_level INTEGER
);
CREATE TABLE IF NOT EXISTS check_ins (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    energy_rating INTEGER,
    task_completed INTEGER,
    check_in_date TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE IF NOT EXISTS conversations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    context_type TEXT NOT NULL,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    input_mode TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


def _plan_day_number(start_date: str | None, today: date) -> int | None:
    if not start_date:
        return None
    try:
        start = datetime.fromisoformat(start_date).date()
    except ValueError:
        return None
    return (today - start).days + 1


class ConversationStore:
    def __init__(self, path: Path | str) -> None:
        self._path = str(path)

    @contextlib.contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._path, timeout=5.0)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    def user_profile(self, user_id: str) -> dict[str, Any] | None:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return dict(row) if row is not None else None

    def recent_history(self, user_id: str, limit: int) -> list[dict[str, str]]:
        """Most recent mentor turns, oldest first."""
        if limit <= 0:
            return []
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT role, content FROM conversations WHERE user_id = ? AND context_type = ?"
                " ORDER BY id DESC LIMIT ?",
                (user_id, CONTEXT_TYPE_MENTOR, limit),
            ).fetchall()
        return [{"role": row["role"], "content": row["content"]} for row in reversed(rows)]

    def mentor_context(self, user_id: str, *, today: date | None = None) -> dict[str, Any]:
        today = today or date.today()
        with self._connect() as conn:
            user = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            plan = conn.execute(
                "SELECT * FROM plans WHERE user_id = ? AND status = 'active' ORDER BY id DESC LIMIT 1",
                (user_id,),
            ).fetchone()

            today_tasks: list[dict[str, Any]] = []
            day_number = _plan_day_number(plan["start_date"], today) if plan is not None else None
            if plan is not None and day_number is not None:
                today_tasks = [
                    dict(row)
                    for row in conn.execute(
                        "SELECT title, description, status, energy_level FROM tasks"
                        " WHERE plan_id = ? AND day_number = ?",
                        (plan["id"], day_number),
                    ).fetchall()
                ]

            check_ins = [
                dict(row)
                for row in conn.execute(
                    "SELECT energy_rating, task_completed, check_in_date FROM check_ins"
                    " WHERE user_id = ? ORDER BY id DESC LIMIT ?",
                    (user_id, RECENT_CHECK_INS_LIMIT),
                ).fetchall()
            ]

        profile = dict(user) if user is not None else {}
        hours = float(profile.get("total_hours_logged") or 0.0)
        return {
            "userName": profile.get("name"),
            "currentPhase": plan["phase"] if plan is not None else 0,
            "niche": (plan["niche"] if plan is not None else None) or "Not yet chosen",
            "offer": (plan["offer"] if plan is not None else None) or "",
            "currentStreak": profile.get("current_streak") or 0,
            "totalTasksCompleted": profile.get("total_tasks_completed") or 0,
            "todayTasks": today_tasks,
            "recentCheckIns": check_ins,
            "careerArc": {"hoursLogged": hours, "earned": round(hours * HOURLY_VALUE, 2)},
            "mentorPersonality": profile.get("mentor_personality") or DEFAULT_MENTOR_PERSONALITY,
        }

    def save_exchange(self, user_id: str, user_text: str, assistant_text: str) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO conversations (user_id, context_type, role, content, input_mode)"
                " VALUES (?, ?, 'user', ?, ?)",
                (user_id, CONTEXT_TYPE_MENTOR, user_text, INPUT_MODE_VOICE),
            )
            if assistant_text:
                conn.execute(
                    "INSERT INTO conversations (user_id, context_type, role, content) VALUES (?, ?, 'assistant', ?)",
                    (user_id, CONTEXT_TYPE_MENTOR, assistant_text),
                )


__all__ = ["HOURLY_VALUE", "SCHEMA", "ConversationStore"]
