"""
State store for the board collection.

Holds an immutable snapshot (a tuple of frozen Board values) loaded once from
storage. Every mutating operation builds a new snapshot, saves it, and only
then swaps it in, so a failed save never leaves memory and storage apart.
"""
import logging
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Mapping, Optional, Tuple

from taskboard.errors import NotFoundError, ValidationError
from taskboard.models.board import Board
from taskboard.models.task import Task, TaskDraft, STATUSES, PRIORITIES, utcnow
from taskboard.services.storage import BoardStorage, new_board_id, new_task_id

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = ('text', 'status', 'priority', 'due_date')


def _clean_text(value, message, field):
    text = value.strip() if isinstance(value, str) else ''
    if not text:
        raise ValidationError(message, field=field)
    return text


def _check_choice(value, choices, field):
    key = value.strip().lower() if isinstance(value, str) else value
    if key not in choices:
        raise ValidationError(f'Invalid {field}: {value}', field=field)
    return key


def _clean_due_date(value):
    if value is None or value == '':
        return None
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip() or None
    raise ValidationError(f'Invalid due date: {value!r}', field='due_date')


class BoardStore:
    def __init__(self, storage: BoardStorage):
        self.storage = storage
        self._boards: Tuple[Board, ...] = tuple(storage.load())

    @property
    def boards(self) -> Tuple[Board, ...]:
        return self._boards

    def get_board(self, board_id) -> Optional[Board]:
        for board in self._boards:
            if board.id == str(board_id):
                return board
        return None

    def _require_board(self, board_id) -> Board:
        board = self.get_board(board_id)
        if board is None:
            raise NotFoundError(f'Board {board_id} not found')
        return board

    def _commit(self, boards: Tuple[Board, ...]) -> None:
        # Raises StorageError; the snapshot is only replaced after a successful save.
        self.storage.save(boards)
        self._boards = boards

    def _replace_board(self, board_id, transform: Callable[[Board], Board]) -> Optional[Board]:
        updated = None
        boards = []
        for board in self._boards:
            if board.id == str(board_id):
                updated = transform(board)
                boards.append(updated)
            else:
                boards.append(board)
        if updated is None:
            return None
        self._commit(tuple(boards))
        return updated

    # -------------------- board operations --------------------
    def create_board(self, name: str) -> Board:
        name = _clean_text(name, 'Board name cannot be empty', 'name')
        taken = {board.id for board in self._boards}
        board_id = new_board_id()
        while board_id in taken:
            board_id = new_board_id()
        board = Board(id=board_id, name=name, created_at=utcnow())
        self._commit(self._boards + (board,))
        logger.info('Created board %s (%s)', board.id, board.name)
        return board

    def delete_board(self, board_id) -> None:
        if self.get_board(board_id) is None:
            return
        self._commit(tuple(b for b in self._boards if b.id != str(board_id)))
        logger.info('Deleted board %s', board_id)

    def toggle_star_board(self, board_id) -> Optional[Board]:
        return self._replace_board(board_id, lambda b: replace(b, starred=not b.starred))

    # -------------------- task operations --------------------
    def create_task(self, board_id, draft: TaskDraft) -> Task:
        text = _clean_text(draft.text, 'Task description cannot be empty', 'text')
        status = _check_choice(draft.status, STATUSES, 'status')
        priority = _check_choice(draft.priority, PRIORITIES, 'priority')
        due_date = _clean_due_date(draft.due_date)
        board = self._require_board(board_id)

        task = Task(
            id=new_task_id(t.id for t in board.tasks),
            text=text,
            status=status,
            priority=priority,
            due_date=due_date,
            starred=False,
            created_at=utcnow()
        )
        self._replace_board(board.id, lambda b: replace(b, tasks=b.tasks + (task,)))
        logger.info('Added task %s to board %s', task.id, board.id)
        return task

    def _replace_task(self, board_id, task_id, transform: Callable[[Task], Task]) -> Optional[Task]:
        board = self.get_board(board_id)
        if board is None or board.get_task(task_id) is None:
            return None
        updated = []

        def apply(b: Board) -> Board:
            tasks = []
            for task in b.tasks:
                if str(task.id) == str(task_id):
                    task = transform(task)
                    updated.append(task)
                tasks.append(task)
            return replace(b, tasks=tuple(tasks))

        self._replace_board(board_id, apply)
        return updated[0]

    def update_task(self, board_id, task_id, patch: Mapping[str, Any]) -> Task:
        unknown = set(patch) - set(PATCHABLE_FIELDS)
        if unknown:
            raise ValueError(f'Cannot update task fields: {", ".join(sorted(unknown))}')
        board = self._require_board(board_id)
        if board.get_task(task_id) is None:
            raise NotFoundError(f'Task {task_id} not found')

        changes = {}
        if 'text' in patch:
            changes['text'] = _clean_text(patch['text'], 'Task description cannot be empty', 'text')
        if 'status' in patch:
            changes['status'] = _check_choice(patch['status'], STATUSES, 'status')
        if 'priority' in patch:
            changes['priority'] = _check_choice(patch['priority'], PRIORITIES, 'priority')
        if 'due_date' in patch:
            changes['due_date'] = _clean_due_date(patch['due_date'])

        task = self._replace_task(board_id, task_id, lambda t: replace(t, **changes))
        logger.info('Updated task %s on board %s', task_id, board_id)
        return task

    def delete_task(self, board_id, task_id) -> None:
        board = self.get_board(board_id)
        if board is None or board.get_task(task_id) is None:
            return
        self._replace_board(
            board_id,
            lambda b: replace(b, tasks=tuple(t for t in b.tasks if str(t.id) != str(task_id)))
        )
        logger.info('Deleted task %s from board %s', task_id, board_id)

    def set_task_status(self, board_id, task_id, status: str) -> Optional[Task]:
        if status not in STATUSES:
            raise ValueError(f'Invalid status: {status!r}')
        return self._replace_task(board_id, task_id, lambda t: replace(t, status=status))

    def toggle_star_task(self, board_id, task_id) -> Optional[Task]:
        return self._replace_task(board_id, task_id, lambda t: replace(t, starred=not t.starred))
