from taskboard import db
from .task import Task, TaskDraft, STATUSES, PRIORITIES
from .board import Board
from .storage import StoredValue

__all__ = ['db', 'Task', 'TaskDraft', 'Board', 'StoredValue', 'STATUSES', 'PRIORITIES']
