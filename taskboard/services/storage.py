"""
Persistence for the board collection.

The whole collection is one JSON array stored under a single key of a
key-value backend, rewritten on every mutation. Loading is fail-soft: a
missing, unreadable or malformed payload loads as an empty collection.
Saving is fail-loud: any failure raises StorageError.

Field defaults applied when loading (see ``normalize_task`` and
``normalize_board``):

    board.id         missing or duplicate   -> fresh uuid4 hex
    board.name       missing or blank       -> board skipped
    board.starred    missing or not true    -> False
    board.createdAt  missing or unparseable -> now
    board.tasks      missing or not a list  -> empty
    task.id          missing or duplicate   -> fresh id unique in its board
    task.text        missing or blank       -> task skipped
    task.status      missing or unknown     -> "todo" ("progress" -> "in-progress")
    task.priority    missing or unknown     -> "medium" (matched case-insensitively)
    task.dueDate     missing or ""          -> None
    task.starred     missing or not true    -> False
    task.createdAt   missing or unparseable -> now
"""
import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from taskboard import db
from taskboard.errors import StorageError
from taskboard.models.board import Board
from taskboard.models.storage import StoredValue
from taskboard.models.task import (
    Task, STATUSES, PRIORITIES, DEFAULT_STATUS, DEFAULT_PRIORITY, utcnow
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = 'boards'
LEGACY_STATUSES = {'progress': 'in-progress', 'in_progress': 'in-progress'}


# -------------------- key-value backends --------------------

class MemoryLocalStorage:
    """Dict-backed key-value store with the same interface as the database one."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class DatabaseLocalStorage:
    """Key-value store kept in the ``local_storage`` table."""

    def get_item(self, key: str) -> Optional[str]:
        try:
            record = db.session.get(StoredValue, key)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f'Failed to read "{key}" from storage') from e
        return record.value if record is not None else None

    def set_item(self, key: str, value: str) -> None:
        try:
            record = db.session.get(StoredValue, key)
            if record is None:
                record = StoredValue(key=key, value=value)
                db.session.add(record)
            else:
                record.value = value
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(f'Failed to write "{key}" to storage') from e


# -------------------- normalization --------------------

def new_board_id() -> str:
    return uuid.uuid4().hex


def new_task_id(taken: Iterable[Any] = ()) -> int:
    """Millisecond timestamp, bumped until it collides with no id in ``taken``."""
    taken_keys = {str(t) for t in taken}
    candidate = int(time.time() * 1000)
    while str(candidate) in taken_keys:
        candidate += 1
    return candidate


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def normalize_status(value: Any) -> str:
    if not isinstance(value, str):
        return DEFAULT_STATUS
    key = value.strip().lower()
    key = LEGACY_STATUSES.get(key, key)
    return key if key in STATUSES else DEFAULT_STATUS


def normalize_priority(value: Any) -> str:
    if not isinstance(value, str):
        return DEFAULT_PRIORITY
    key = value.strip().lower()
    return key if key in PRIORITIES else DEFAULT_PRIORITY


def normalize_task(raw: Any, taken_ids: Optional[set] = None) -> Optional[Task]:
    """Build a Task from a stored record, applying the field defaults.

    Returns None for records that cannot become a task (not an object, or no
    text). ``taken_ids`` holds the string form of ids already used in the
    board; it is updated with the id of the returned task.
    """
    if taken_ids is None:
        taken_ids = set()
    if not isinstance(raw, dict):
        logger.warning('Skipping task record that is not an object: %r', raw)
        return None
    text = raw.get('text')
    if not isinstance(text, str) or not text.strip():
        logger.warning('Skipping task record without text: %r', raw.get('id'))
        return None

    task_id = raw.get('id')
    if isinstance(task_id, bool) or not isinstance(task_id, (int, str)) or str(task_id) == '' \
            or str(task_id) in taken_ids:
        replacement = new_task_id(taken_ids)
        logger.warning('Task id %r missing or duplicated, assigned %s', task_id, replacement)
        task_id = replacement
    taken_ids.add(str(task_id))

    due_date = raw.get('dueDate')
    if not isinstance(due_date, str) or not due_date.strip():
        due_date = None

    return Task(
        id=task_id,
        text=text,
        status=normalize_status(raw.get('status')),
        priority=normalize_priority(raw.get('priority')),
        due_date=due_date,
        starred=raw.get('starred') is True,
        created_at=parse_timestamp(raw.get('createdAt')) or utcnow()
    )


def normalize_board(raw: Any, taken_ids: Optional[set] = None) -> Optional[Board]:
    """Build a Board (and its tasks) from a stored record, applying the field defaults."""
    if taken_ids is None:
        taken_ids = set()
    if not isinstance(raw, dict):
        logger.warning('Skipping board record that is not an object: %r', raw)
        return None
    name = raw.get('name')
    if not isinstance(name, str) or not name.strip():
        logger.warning('Skipping board record without name: %r', raw.get('id'))
        return None

    board_id = raw.get('id')
    if board_id is None or isinstance(board_id, bool) or str(board_id) == '' \
            or str(board_id) in taken_ids:
        replacement = new_board_id()
        logger.warning('Board id %r missing or duplicated, assigned %s', board_id, replacement)
        board_id = replacement
    board_id = str(board_id)
    taken_ids.add(board_id)

    raw_tasks = raw.get('tasks')
    if not isinstance(raw_tasks, list):
        raw_tasks = []
    task_ids: set = set()
    tasks = []
    for raw_task in raw_tasks:
        task = normalize_task(raw_task, task_ids)
        if task is not None:
            tasks.append(task)

    return Board(
        id=board_id,
        name=name,
        starred=raw.get('starred') is True,
        created_at=parse_timestamp(raw.get('createdAt')) or utcnow(),
        tasks=tuple(tasks)
    )


def normalize_boards(raw: Any) -> List[Board]:
    if not isinstance(raw, list):
        logger.warning('Stored boards payload is not a list, ignoring it')
        return []
    taken_ids: set = set()
    boards = []
    for raw_board in raw:
        board = normalize_board(raw_board, taken_ids)
        if board is not None:
            boards.append(board)
    return boards


# -------------------- accessor --------------------

class BoardStorage:
    """Loads and saves the full board collection under one storage key."""

    def __init__(self, backend, key: str = DEFAULT_STORAGE_KEY):
        self.backend = backend
        self.key = key

    def load(self) -> List[Board]:
        try:
            payload = self.backend.get_item(self.key)
        except StorageError as e:
            logger.warning('Could not read boards, starting empty: %s', e)
            return []
        if not payload:
            return []
        try:
            raw = json.loads(payload)
        except ValueError as e:
            logger.warning('Stored boards are not valid JSON, starting empty: %s', e)
            return []
        return normalize_boards(raw)

    def save(self, boards: Iterable[Board]) -> None:
        try:
            payload = json.dumps([board.to_dict() for board in boards])
        except (TypeError, ValueError) as e:
            logger.error('Could not serialize boards: %s', e)
            raise StorageError('Failed to save data') from e
        try:
            self.backend.set_item(self.key, payload)
        except StorageError as e:
            logger.error('Could not save boards: %s', e)
            raise StorageError('Failed to save data') from e
        except Exception as e:
            logger.exception('Storage backend failed while saving boards')
            raise StorageError('Failed to save data') from e
