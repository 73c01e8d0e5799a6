from dataclasses import dataclass, field
from datetime import datetime
from typing import Tuple

from .task import Task, utcnow


@dataclass(frozen=True)
class Board:
    id: str
    name: str
    starred: bool = False
    created_at: datetime = field(default_factory=utcnow)
    tasks: Tuple[Task, ...] = ()

    @property
    def task_count(self):
        return len(self.tasks)

    def get_task(self, task_id):
        """Find a task by id; ids from URLs are strings, stored ids may be ints."""
        wanted = str(task_id)
        for task in self.tasks:
            if str(task.id) == wanted:
                return task
        return None

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'starred': self.starred,
            'createdAt': self.created_at.isoformat(),
            'tasks': [task.to_dict() for task in self.tasks]
        }

    def __repr__(self):
        return f'<Board {self.name}>'
