from flask import current_app, g

from .board_store import BoardStore
from .storage import BoardStorage, DatabaseLocalStorage, MemoryLocalStorage

__all__ = ['BoardStore', 'BoardStorage', 'DatabaseLocalStorage', 'MemoryLocalStorage', 'get_store']


def _backend():
    if current_app.config.get('STORAGE_BACKEND') == 'memory':
        # one dict per app, so it outlives the request that filled it
        return current_app.extensions.setdefault('taskboard_memory_storage', MemoryLocalStorage())
    return DatabaseLocalStorage()


def get_store():
    """Board store for the current request, loaded from storage on first use."""
    if 'board_store' not in g:
        storage = BoardStorage(_backend(), current_app.config.get('STORAGE_KEY', 'boards'))
        g.board_store = BoardStore(storage)
    return g.board_store
