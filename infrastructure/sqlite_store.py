"""SQLite implementation of the TaskStore port.

One connection, one logical writer. The store hands out at most one open
result cursor (see `top_level_cursor`); any other call made while that
cursor is open raises CursorBusyError instead of silently nesting queries.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
import uuid
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Iterator, List, Optional, Sequence

from application.ports import CursorBusyError, StoreError
from core import (
    INBOX_PROJECT_COLOR,
    INBOX_PROJECT_ID,
    INBOX_PROJECT_NAME,
    Priority,
    Project,
    Status,
    Tag,
    Task,
    TimeEntry,
    normalize_tag_name,
)

logger = logging.getLogger("klonch.store")

MEMORY_DB = ":memory:"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    color TEXT NOT NULL DEFAULT '',
    archived INTEGER NOT NULL DEFAULT 0,
    position INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    color TEXT NOT NULL DEFAULT '',
    created_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status TEXT NOT NULL DEFAULT 'pending',
    priority TEXT NOT NULL DEFAULT 'medium',
    project_id TEXT REFERENCES projects(id) ON DELETE SET NULL,
    parent_id TEXT REFERENCES tasks(id) ON DELETE CASCADE,
    due_date TEXT,
    start_date TEXT,
    completed_at TEXT,
    position INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS task_tags (
    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    tag_id TEXT NOT NULL REFERENCES tags(id) ON DELETE CASCADE,
    PRIMARY KEY (task_id, tag_id)
);
CREATE TABLE IF NOT EXISTS task_dependencies (
    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    depends_on_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    PRIMARY KEY (task_id, depends_on_id)
);
CREATE TABLE IF NOT EXISTS time_entries (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
    description TEXT NOT NULL DEFAULT '',
    started_at TEXT NOT NULL,
    ended_at TEXT,
    duration INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_tasks_parent ON tasks(parent_id);
CREATE INDEX IF NOT EXISTS idx_tasks_project ON tasks(project_id);
CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);
CREATE INDEX IF NOT EXISTS idx_time_entries_task ON time_entries(task_id);
"""

_TASK_COLUMNS = (
    "t.id, t.title, t.description, t.status, t.priority, t.project_id, t.parent_id, "
    "t.due_date, t.start_date, t.completed_at, t.position, t.created_at, t.updated_at"
)

# incomplete before done, urgent > high > medium > low, manual position, newest first
_TASK_ORDER = """
ORDER BY CASE t.status WHEN 'done' THEN 1 ELSE 0 END,
         CASE t.priority WHEN 'urgent' THEN 0 WHEN 'high' THEN 1 WHEN 'medium' THEN 2 WHEN 'low' THEN 3 ELSE 4 END,
         t.position,
         t.created_at DESC
"""

_TOP_LEVEL_SQL = f"""
SELECT {_TASK_COLUMNS} FROM tasks t
WHERE t.status != 'archived' AND t.parent_id IS NULL
{_TASK_ORDER}
"""

_SUBTASKS_SQL = f"""
SELECT {_TASK_COLUMNS} FROM tasks t
WHERE t.parent_id = ? AND t.status != 'archived'
{_TASK_ORDER}
"""


def _ts(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Unparseable timestamp in store: %r", value)
        return None


def _new_id() -> str:
    return uuid.uuid4().hex


class SqliteTaskStore:
    """SQLite task store backing the list controller and the quick-add CLI."""

    def __init__(self, db_path: str | Path = MEMORY_DB) -> None:
        self._db_path = str(db_path)
        if self._db_path != MEMORY_DB:
            Path(self._db_path).expanduser().parent.mkdir(parents=True, exist_ok=True)
            self._db_path = str(Path(self._db_path).expanduser())
        self._lock = threading.RLock()
        self._open_cursor: Optional[sqlite3.Cursor] = None
        try:
            # Effects run on a worker thread; the lock serializes access.
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open database {self._db_path}: {exc}") from exc
        self._conn.row_factory = sqlite3.Row
        self._configure_conn()
        self._ensure_schema()
        logger.info("SqliteTaskStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> str:
        return self._db_path

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ---- low-level helpers ----

    def _configure_conn(self) -> None:
        self._conn.execute("PRAGMA foreign_keys=ON")
        if self._db_path != MEMORY_DB:
            with contextlib.suppress(sqlite3.Error):
                self._conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        now = _ts(datetime.now())
        try:
            self._conn.executescript(_SCHEMA)
            self._conn.execute(
                "INSERT OR IGNORE INTO projects (id, name, color, archived, position, created_at, updated_at) "
                "VALUES (?, ?, ?, 0, 0, ?, ?)",
                (INBOX_PROJECT_ID, INBOX_PROJECT_NAME, INBOX_PROJECT_COLOR, now, now),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"schema setup failed: {exc}") from exc

    def _ensure_idle(self) -> None:
        if self._open_cursor is not None:
            raise CursorBusyError("a result cursor is still open; materialize it before issuing another query")

    def _query(self, sql: str, params: Sequence[Any] = ()) -> List[sqlite3.Row]:
        with self._lock:
            self._ensure_idle()
            try:
                return self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as exc:
                logger.warning("query failed: %s", exc)
                raise StoreError(str(exc)) from exc

    def _query_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[sqlite3.Row]:
        rows = self._query(sql, params)
        return rows[0] if rows else None

    @contextlib.contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            self._ensure_idle()
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as exc:
                self._conn.rollback()
                logger.warning("write failed: %s", exc)
                raise StoreError(str(exc)) from exc
            except Exception:
                self._conn.rollback()
                raise

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        with self._transaction() as conn:
            return conn.execute(sql, params).rowcount

    def _require_task_row(self, conn: sqlite3.Connection, task_id: str) -> sqlite3.Row:
        row = conn.execute("SELECT id, parent_id, project_id FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            raise StoreError(f"task not found: {task_id}")
        return row

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        try:
            status = Status.from_string(row["status"])
        except ValueError:
            status = Status.PENDING
        try:
            priority = Priority.from_string(row["priority"])
        except ValueError:
            priority = Priority.MEDIUM
        return Task(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            status=status,
            priority=priority,
            project_id=row["project_id"],
            parent_id=row["parent_id"],
            due_date=_parse_ts(row["due_date"]),
            start_date=_parse_ts(row["start_date"]),
            completed_at=_parse_ts(row["completed_at"]),
            position=row["position"] or 0,
            created_at=_parse_ts(row["created_at"]) or datetime.now(),
            updated_at=_parse_ts(row["updated_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_project(row: sqlite3.Row) -> Project:
        return Project(
            id=row["id"],
            name=row["name"],
            color=row["color"] or "",
            archived=bool(row["archived"]),
            position=row["position"] or 0,
            created_at=_parse_ts(row["created_at"]) or datetime.now(),
            updated_at=_parse_ts(row["updated_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_tag(row: sqlite3.Row) -> Tag:
        return Tag(
            id=row["id"],
            name=row["name"],
            color=row["color"] or "",
            created_at=_parse_ts(row["created_at"]) or datetime.now(),
        )

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> TimeEntry:
        return TimeEntry(
            id=row["id"],
            task_id=row["task_id"],
            description=row["description"] or "",
            started_at=_parse_ts(row["started_at"]) or datetime.now(),
            ended_at=_parse_ts(row["ended_at"]),
            duration=row["duration"] or 0,
            created_at=_parse_ts(row["created_at"]) or datetime.now(),
        )

    # ---- queries ----

    def list_projects(self, include_archived: bool = False) -> List[Project]:
        sql = "SELECT * FROM projects"
        if not include_archived:
            sql += " WHERE archived = 0"
        sql += " ORDER BY position, name COLLATE NOCASE"
        return [self._row_to_project(row) for row in self._query(sql)]

    def list_tags(self) -> List[Tag]:
        rows = self._query("SELECT * FROM tags ORDER BY name COLLATE NOCASE")
        return [self._row_to_tag(row) for row in rows]

    @contextlib.contextmanager
    def top_level_cursor(self) -> Iterator[Iterator[Task]]:
        """Open the single result cursor over non-archived top-level tasks.

        The cursor stays open until the `with` block exits; any other store
        call made inside the block raises CursorBusyError.
        """
        with self._lock:
            self._ensure_idle()
            try:
                cursor = self._conn.execute(_TOP_LEVEL_SQL)
            except sqlite3.Error as exc:
                raise StoreError(str(exc)) from exc
            self._open_cursor = cursor
            try:
                yield self._iter_tasks(cursor)
            finally:
                cursor.close()
                self._open_cursor = None

    def _iter_tasks(self, cursor: sqlite3.Cursor) -> Iterator[Task]:
        try:
            for row in cursor:
                yield self._row_to_task(row)
        except sqlite3.Error as exc:
            raise StoreError(f"scan failed: {exc}") from exc

    def list_top_level_tasks(self) -> List[Task]:
        with self.top_level_cursor() as rows:
            return list(rows)

    def get_task(self, task_id: str) -> Optional[Task]:
        row = self._query_one(f"SELECT {_TASK_COLUMNS} FROM tasks t WHERE t.id = ?", (task_id,))
        return self._row_to_task(row) if row else None

    def get_subtasks(self, parent_id: str) -> List[Task]:
        return [self._row_to_task(row) for row in self._query(_SUBTASKS_SQL, (parent_id,))]

    def get_task_tags(self, task_id: str) -> List[Tag]:
        rows = self._query(
            "SELECT g.* FROM tags g JOIN task_tags tt ON tt.tag_id = g.id "
            "WHERE tt.task_id = ? ORDER BY g.name COLLATE NOCASE",
            (task_id,),
        )
        return [self._row_to_tag(row) for row in rows]

    def get_dependencies(self, task_id: str) -> List[Task]:
        rows = self._query(
            f"SELECT {_TASK_COLUMNS} FROM tasks t JOIN task_dependencies d ON d.depends_on_id = t.id "
            "WHERE d.task_id = ? ORDER BY t.title COLLATE NOCASE",
            (task_id,),
        )
        return [self._row_to_task(row) for row in rows]

    def is_blocked(self, task_id: str) -> bool:
        row = self._query_one(
            "SELECT COUNT(*) AS n FROM task_dependencies d JOIN tasks t ON t.id = d.depends_on_id "
            "WHERE d.task_id = ? AND t.status != 'done'",
            (task_id,),
        )
        return bool(row and row["n"])

    # ---- tasks ----

    def create_task(
        self,
        title: str,
        *,
        task_id: Optional[str] = None,
        project_id: Optional[str] = None,
        parent_id: Optional[str] = None,
        priority: Priority = Priority.MEDIUM,
        due_date: Optional[datetime] = None,
        tag_ids: Optional[List[str]] = None,
    ) -> Task:
        title = (title or "").strip()
        if not title:
            raise StoreError("task title must not be empty")
        now = datetime.now()
        new_id = task_id or _new_id()
        with self._transaction() as conn:
            if parent_id:
                parent = self._require_task_row(conn, parent_id)
                if parent["parent_id"]:
                    raise StoreError("subtasks cannot have subtasks")
                if project_id is None:
                    project_id = parent["project_id"]
            conn.execute(
                "INSERT INTO tasks (id, title, status, priority, project_id, parent_id, due_date, "
                "position, created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?, ?)",
                (
                    new_id,
                    title,
                    Status.PENDING.code,
                    priority.code,
                    project_id or INBOX_PROJECT_ID,
                    parent_id,
                    _ts(due_date),
                    _ts(now),
                    _ts(now),
                ),
            )
            for tag_id in tag_ids or []:
                conn.execute("INSERT OR IGNORE INTO task_tags (task_id, tag_id) VALUES (?, ?)", (new_id, tag_id))
        logger.debug("created task %s", new_id)
        created = self.get_task(new_id)
        if created is None:
            raise StoreError(f"task vanished after insert: {new_id}")
        created.tags = self.get_task_tags(new_id)
        return created

    def restore_task(self, task: Task) -> None:
        """Re-insert a snapshot with its original fields, tags, subtasks and dependencies."""
        with self._transaction() as conn:
            self._insert_snapshot(conn, task)
            for sub in task.subtasks:
                self._insert_snapshot(conn, sub)
        logger.debug("restored task %s", task.id)

    def _insert_snapshot(self, conn: sqlite3.Connection, task: Task) -> None:
        completed_at = task.completed_at
        if task.status == Status.DONE and completed_at is None:
            completed_at = datetime.now()
        elif task.status != Status.DONE:
            completed_at = None
        project_id = task.project_id
        if project_id and not conn.execute("SELECT 1 FROM projects WHERE id = ?", (project_id,)).fetchone():
            project_id = INBOX_PROJECT_ID
        conn.execute(
            "INSERT OR REPLACE INTO tasks (id, title, description, status, priority, project_id, parent_id, "
            "due_date, start_date, completed_at, position, created_at, updated_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                task.id,
                task.title,
                task.description,
                task.status.code,
                task.priority.code,
                project_id,
                task.parent_id,
                _ts(task.due_date),
                _ts(task.start_date),
                _ts(completed_at),
                task.position,
                _ts(task.created_at),
                _ts(datetime.now()),
            ),
        )
        for tag in task.tags:
            conn.execute(
                "INSERT OR IGNORE INTO task_tags (task_id, tag_id) SELECT ?, id FROM tags WHERE id = ?",
                (task.id, tag.id),
            )
        for dep in task.dependencies:
            conn.execute(
                "INSERT OR IGNORE INTO task_dependencies (task_id, depends_on_id) SELECT ?, id FROM tasks WHERE id = ?",
                (task.id, dep.id),
            )

    def restore_task_state(self, task: Task) -> None:
        """Write back every scalar field of a snapshot (undo/redo of updates)."""
        completed_at = task.completed_at if task.status == Status.DONE else None
        if task.status == Status.DONE and completed_at is None:
            completed_at = datetime.now()
        updated = self._execute(
            "UPDATE tasks SET title = ?, description = ?, status = ?, priority = ?, project_id = ?, "
            "parent_id = ?, due_date = ?, start_date = ?, completed_at = ?, position = ?, updated_at = ? "
            "WHERE id = ?",
            (
                task.title,
                task.description,
                task.status.code,
                task.priority.code,
                task.project_id,
                task.parent_id,
                _ts(task.due_date),
                _ts(task.start_date),
                _ts(completed_at),
                task.position,
                _ts(datetime.now()),
                task.id,
            ),
        )
        if not updated:
            raise StoreError(f"task not found: {task.id}")

    def _update_task(self, task_id: str, assignments: str, params: Sequence[Any]) -> None:
        updated = self._execute(
            f"UPDATE tasks SET {assignments}, updated_at = ? WHERE id = ?",
            (*params, _ts(datetime.now()), task_id),
        )
        if not updated:
            raise StoreError(f"task not found: {task_id}")

    def update_title(self, task_id: str, title: str) -> None:
        title = (title or "").strip()
        if not title:
            raise StoreError("task title must not be empty")
        self._update_task(task_id, "title = ?", (title,))

    def set_priority(self, task_id: str, priority: Priority) -> None:
        self._update_task(task_id, "priority = ?", (priority.code,))

    def set_status(self, task_id: str, status: Status) -> None:
        # completed_at is set exactly when the task is done
        self._update_task(
            task_id,
            "status = ?, completed_at = CASE WHEN ? = 'done' THEN COALESCE(completed_at, ?) ELSE NULL END",
            (status.code, status.code, _ts(datetime.now())),
        )

    def set_due_date(self, task_id: str, due: Optional[datetime]) -> None:
        self._update_task(task_id, "due_date = ?", (_ts(due),))

    def set_project(self, task_id: str, project_id: str) -> None:
        if not self._query_one("SELECT 1 FROM projects WHERE id = ?", (project_id,)):
            raise StoreError(f"project not found: {project_id}")
        self._update_task(task_id, "project_id = ?", (project_id,))

    def set_parent(self, task_id: str, parent_id: Optional[str]) -> None:
        with self._transaction() as conn:
            self._require_task_row(conn, task_id)
            if parent_id:
                if parent_id == task_id:
                    raise StoreError("a task cannot be its own parent")
                parent = self._require_task_row(conn, parent_id)
                if parent["parent_id"]:
                    raise StoreError("subtasks cannot have subtasks")
                has_children = conn.execute("SELECT 1 FROM tasks WHERE parent_id = ? LIMIT 1", (task_id,)).fetchone()
                if has_children:
                    raise StoreError("a task with subtasks cannot become a subtask")
                has_deps = conn.execute(
                    "SELECT 1 FROM task_dependencies WHERE task_id = ? LIMIT 1", (task_id,)
                ).fetchone()
                if has_deps:
                    raise StoreError("a task with dependencies cannot become a subtask")
            conn.execute(
                "UPDATE tasks SET parent_id = ?, updated_at = ? WHERE id = ?",
                (parent_id, _ts(datetime.now()), task_id),
            )

    def delete_task(self, task_id: str) -> None:
        deleted = self._execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        if not deleted:
            raise StoreError(f"task not found: {task_id}")
        logger.debug("deleted task %s", task_id)

    # ---- tags ----

    def create_tag(self, name: str, color: str) -> Tag:
        name = normalize_tag_name(name)
        if not name:
            raise StoreError("tag name must not be empty")
        tag = Tag(id=name.lower(), name=name, color=color)
        try:
            self._execute(
                "INSERT INTO tags (id, name, color, created_at) VALUES (?, ?, ?, ?)",
                (tag.id, tag.name, tag.color, _ts(tag.created_at)),
            )
        except StoreError as exc:
            raise StoreError(f"tag already exists: {name}") from exc
        return tag

    def get_or_create_tag(self, name: str, color: str = "") -> Tag:
        name = normalize_tag_name(name)
        row = self._query_one("SELECT * FROM tags WHERE id = ? OR lower(name) = ?", (name.lower(), name.lower()))
        if row:
            return self._row_to_tag(row)
        return self.create_tag(name, color)

    def update_tag_color(self, tag_id: str, color: str) -> None:
        self._execute("UPDATE tags SET color = ? WHERE id = ?", (color, tag_id))

    def add_tag_to_task(self, task_id: str, tag_id: str) -> None:
        self._execute("INSERT OR IGNORE INTO task_tags (task_id, tag_id) VALUES (?, ?)", (task_id, tag_id))

    def remove_tag_from_task(self, task_id: str, tag_id: str) -> None:
        self._execute("DELETE FROM task_tags WHERE task_id = ? AND tag_id = ?", (task_id, tag_id))

    # ---- projects ----

    def create_project(self, name: str, color: str) -> Project:
        name = (name or "").strip()
        if not name:
            raise StoreError("project name must not be empty")
        position_row = self._query_one("SELECT COALESCE(MAX(position), 0) + 1 AS pos FROM projects")
        project = Project(id=_new_id(), name=name, color=color, position=position_row["pos"] if position_row else 0)
        self._execute(
            "INSERT INTO projects (id, name, color, archived, position, created_at, updated_at) "
            "VALUES (?, ?, ?, 0, ?, ?, ?)",
            (project.id, project.name, project.color, project.position, _ts(project.created_at), _ts(project.updated_at)),
        )
        return project

    def get_project_by_name(self, name: str) -> Optional[Project]:
        row = self._query_one(
            "SELECT * FROM projects WHERE archived = 0 AND lower(name) = ? ORDER BY position LIMIT 1",
            ((name or "").strip().lower(),),
        )
        return self._row_to_project(row) if row else None

    def get_or_create_project(self, name: str, color: str = "") -> Project:
        return self.get_project_by_name(name) or self.create_project(name, color)

    def update_project_color(self, project_id: str, color: str) -> None:
        self._execute(
            "UPDATE projects SET color = ?, updated_at = ? WHERE id = ?",
            (color, _ts(datetime.now()), project_id),
        )

    def archive_project(self, project_id: str) -> None:
        if project_id == INBOX_PROJECT_ID:
            raise StoreError("the inbox project cannot be archived")
        updated = self._execute(
            "UPDATE projects SET archived = 1, updated_at = ? WHERE id = ?",
            (_ts(datetime.now()), project_id),
        )
        if not updated:
            raise StoreError(f"project not found: {project_id}")

    def delete_project(self, project_id: str) -> None:
        """Delete a project; its tasks move to the inbox."""
        if project_id == INBOX_PROJECT_ID:
            raise StoreError("the inbox project cannot be deleted")
        with self._transaction() as conn:
            conn.execute(
                "UPDATE tasks SET project_id = ?, updated_at = ? WHERE project_id = ?",
                (INBOX_PROJECT_ID, _ts(datetime.now()), project_id),
            )
            deleted = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,)).rowcount
            if not deleted:
                raise StoreError(f"project not found: {project_id}")

    # ---- dependencies ----

    def add_dependency(self, task_id: str, depends_on_id: str) -> None:
        if task_id == depends_on_id:
            raise StoreError("a task cannot depend on itself")
        with self._transaction() as conn:
            task = self._require_task_row(conn, task_id)
            self._require_task_row(conn, depends_on_id)
            if task["parent_id"]:
                raise StoreError("subtasks cannot have dependencies")
            # depends_on_id must not already reach task_id
            reaches = conn.execute(
                "WITH RECURSIVE reach(id) AS ("
                " SELECT depends_on_id FROM task_dependencies WHERE task_id = ?"
                " UNION SELECT d.depends_on_id FROM task_dependencies d JOIN reach r ON d.task_id = r.id"
                ") SELECT 1 FROM reach WHERE id = ? LIMIT 1",
                (depends_on_id, task_id),
            ).fetchone()
            if reaches:
                raise StoreError("dependency would create a cycle")
            conn.execute(
                "INSERT OR IGNORE INTO task_dependencies (task_id, depends_on_id) VALUES (?, ?)",
                (task_id, depends_on_id),
            )

    def remove_dependency(self, task_id: str, depends_on_id: str) -> None:
        self._execute(
            "DELETE FROM task_dependencies WHERE task_id = ? AND depends_on_id = ?",
            (task_id, depends_on_id),
        )

    # ---- time entries ----

    def start_time_entry(self, task_id: str) -> TimeEntry:
        entry = TimeEntry(id=_new_id(), task_id=task_id, started_at=datetime.now())
        with self._transaction() as conn:
            self._require_task_row(conn, task_id)
            conn.execute(
                "INSERT INTO time_entries (id, task_id, description, started_at, duration, created_at) "
                "VALUES (?, ?, '', ?, 0, ?)",
                (entry.id, entry.task_id, _ts(entry.started_at), _ts(entry.created_at)),
            )
        return entry

    def stop_time_entry(self, entry_id: str) -> TimeEntry:
        row = self._query_one("SELECT * FROM time_entries WHERE id = ?", (entry_id,))
        if row is None:
            raise StoreError(f"time entry not found: {entry_id}")
        entry = self._row_to_entry(row)
        entry.ended_at = datetime.now()
        entry.duration = entry.elapsed_seconds() // 60
        self._execute(
            "UPDATE time_entries SET ended_at = ?, duration = ? WHERE id = ?",
            (_ts(entry.ended_at), entry.duration, entry.id),
        )
        return entry

    def add_time_entry(self, task_id: str, minutes: int, description: str = "") -> TimeEntry:
        if minutes <= 0:
            raise StoreError("duration must be positive")
        ended = datetime.now()
        entry = TimeEntry(
            id=_new_id(),
            task_id=task_id,
            started_at=ended - timedelta(minutes=minutes),
            ended_at=ended,
            duration=minutes,
            description=description,
        )
        with self._transaction() as conn:
            self._require_task_row(conn, task_id)
            conn.execute(
                "INSERT INTO time_entries (id, task_id, description, started_at, ended_at, duration, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    entry.id,
                    entry.task_id,
                    entry.description,
                    _ts(entry.started_at),
                    _ts(entry.ended_at),
                    entry.duration,
                    _ts(entry.created_at),
                ),
            )
        return entry

    def get_active_time_entry(self) -> Optional[TimeEntry]:
        row = self._query_one("SELECT * FROM time_entries WHERE ended_at IS NULL ORDER BY started_at DESC LIMIT 1")
        return self._row_to_entry(row) if row else None

    def list_time_entries(self, task_id: str) -> List[TimeEntry]:
        rows = self._query("SELECT * FROM time_entries WHERE task_id = ? ORDER BY started_at DESC", (task_id,))
        return [self._row_to_entry(row) for row in rows]


__all__ = ["SqliteTaskStore", "MEMORY_DB"]
