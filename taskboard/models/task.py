from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Union

STATUSES = ('todo', 'in-progress', 'done')
STATUS_LABELS = {'todo': 'To Do', 'in-progress': 'In Progress', 'done': 'Done'}

PRIORITIES = ('low', 'medium', 'high')
PRIORITY_RANK = {'low': 1, 'medium': 2, 'high': 3}

DEFAULT_STATUS = 'todo'
DEFAULT_PRIORITY = 'medium'

TaskId = Union[int, str]


def utcnow():
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TaskDraft:
    """User input for a new task, before it has an id or timestamp."""
    text: str
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None


@dataclass(frozen=True)
class Task:
    id: TaskId
    text: str
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    due_date: Optional[str] = None  # ISO date, kept verbatim even when malformed
    starred: bool = False
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'status': self.status,
            'priority': self.priority,
            'dueDate': self.due_date,
            'starred': self.starred,
            'createdAt': self.created_at.isoformat()
        }

    def __repr__(self):
        return f'<Task {self.id} {self.text!r} [{self.status}]>'
