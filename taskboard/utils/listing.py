"""Derived views: filtered, sorted and paginated projections of boards and tasks.

All functions are pure; they never mutate their input and never store results.
"""
from dataclasses import dataclass
from datetime import datetime
from math import ceil
from typing import Dict, List, Mapping, Sequence, Tuple

from taskboard.models.board import Board
from taskboard.models.task import Task, STATUSES, PRIORITY_RANK

BOARD_SORT_KEYS = ('recent', 'name', 'tasks')
TASK_SORT_KEYS = ('dueDate', 'priority', 'createdAt')
ALL = 'all'


@dataclass(frozen=True)
class TaskFilter:
    search_term: str = ''
    status: str = ALL
    priority: str = ALL


@dataclass(frozen=True)
class TaskSort:
    key: str = 'dueDate'
    ascending: bool = True


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    page_size: int = 5


@dataclass(frozen=True)
class TaskPage:
    items: List[Task]
    page: int
    page_size: int
    total: int

    @property
    def pages(self):
        if self.page_size <= 0:
            return 0
        return ceil(self.total / self.page_size)

    @property
    def has_prev(self):
        return self.page > 0

    @property
    def has_next(self):
        return self.page + 1 < self.pages


# -------------------- boards --------------------

def filter_and_sort_boards(boards: Sequence[Board], search_term: str = '', sort_key: str = 'recent') -> List[Board]:
    needle = (search_term or '').lower()
    result = [board for board in boards if needle in board.name.lower()]
    if sort_key == 'name':
        result.sort(key=lambda board: (board.name.casefold(), board.name))
    elif sort_key == 'tasks':
        result.sort(key=lambda board: len(board.tasks), reverse=True)
    return result


def board_stats(boards: Sequence[Board]) -> Dict[str, int]:
    return {
        'boards': len(boards),
        'tasks': sum(len(board.tasks) for board in boards),
        'starred': sum(1 for board in boards if board.starred)
    }


def status_counts(tasks: Sequence[Task]) -> Dict[str, int]:
    counts = {status: 0 for status in STATUSES}
    for task in tasks:
        counts[task.status] = counts.get(task.status, 0) + 1
    return counts


# -------------------- tasks --------------------

def _due_date_value(task: Task):
    """Parsed due date, or None when absent or malformed."""
    if not task.due_date:
        return None
    try:
        return datetime.fromisoformat(task.due_date[:10]).date()
    except ValueError:
        return None


def _matches(task: Task, filters: TaskFilter) -> bool:
    needle = (filters.search_term or '').lower()
    if needle not in task.text.lower():
        return False
    if filters.status != ALL and task.status != filters.status:
        return False
    if filters.priority != ALL and task.priority != filters.priority:
        return False
    return True


def filter_tasks(tasks: Sequence[Task], filters: TaskFilter) -> List[Task]:
    return [task for task in tasks if _matches(task, filters)]


def sort_tasks(tasks: Sequence[Task], sort: TaskSort) -> List[Task]:
    """Starred tasks first, then by the sort key; absent due dates always last."""
    result = list(tasks)
    descending = not sort.ascending
    if sort.key == 'dueDate':
        dated = [t for t in result if _due_date_value(t) is not None]
        undated = [t for t in result if _due_date_value(t) is None]
        dated.sort(key=_due_date_value, reverse=descending)
        result = dated + undated
    elif sort.key == 'priority':
        result.sort(key=lambda t: PRIORITY_RANK.get(t.priority, 0), reverse=descending)
    elif sort.key == 'createdAt':
        result.sort(key=lambda t: t.created_at, reverse=descending)
    # stable, so the key order above survives inside each starred group
    result.sort(key=lambda t: not t.starred)
    return result


def paginate(tasks: Sequence[Task], page: PageRequest) -> List[Task]:
    if page.page < 0 or page.page_size <= 0:
        return []
    start = page.page * page.page_size
    return list(tasks[start:start + page.page_size])


def filter_sort_paginate_tasks(tasks: Sequence[Task], filters: TaskFilter = TaskFilter(),
                               sort: TaskSort = TaskSort(), page: PageRequest = PageRequest()) -> List[Task]:
    return paginate(sort_tasks(filter_tasks(tasks, filters), sort), page)


def parse_task_query(args: Mapping[str, str], default_page_size: int = 5,
                     page_sizes: Sequence[int] = ()) -> Tuple[TaskFilter, TaskSort, PageRequest]:
    """Read filter, sort and page from query arguments.

    ``page`` in the arguments is 1-based; the returned PageRequest is 0-based.
    Unknown values fall back to the defaults.
    """
    status = args.get('status', ALL).lower()
    if status != ALL and status not in STATUSES:
        status = ALL
    priority = args.get('priority', ALL).lower()
    if priority != ALL and priority not in PRIORITY_RANK:
        priority = ALL
    filters = TaskFilter(search_term=args.get('search', ''), status=status, priority=priority)

    key = args.get('sort', 'dueDate')
    if key not in TASK_SORT_KEYS:
        key = 'dueDate'
    sort = TaskSort(key=key, ascending=args.get('order', 'asc') != 'desc')

    try:
        page = max(int(args.get('page', 1)) - 1, 0)
    except (TypeError, ValueError):
        page = 0
    try:
        page_size = int(args.get('per_page', default_page_size))
    except (TypeError, ValueError):
        page_size = default_page_size
    if page_size <= 0 or (page_sizes and page_size not in page_sizes):
        page_size = default_page_size
    return filters, sort, PageRequest(page=page, page_size=page_size)


def paginate_tasks(tasks: Sequence[Task], filters: TaskFilter = TaskFilter(),
                   sort: TaskSort = TaskSort(), page: PageRequest = PageRequest()) -> TaskPage:
    ordered = sort_tasks(filter_tasks(tasks, filters), sort)
    return TaskPage(items=paginate(ordered, page), page=page.page,
                    page_size=page.page_size, total=len(ordered))
