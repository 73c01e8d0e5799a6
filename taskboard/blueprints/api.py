from flask import Blueprint, jsonify, request, current_app
from taskboard.services import get_store
from taskboard.utils.dates import describe_due_date
from taskboard.utils.listing import (
    BOARD_SORT_KEYS, filter_and_sort_boards, board_stats, status_counts,
    parse_task_query, paginate_tasks
)

api_bp = Blueprint('api', __name__)


def _board_summary(board):
    return {
        'id': board.id,
        'name': board.name,
        'starred': board.starred,
        'createdAt': board.created_at.isoformat(),
        'task_count': board.task_count
    }


def _task_dict(task):
    data = task.to_dict()
    label = describe_due_date(task.due_date)
    data['due_label'] = label.label
    data['due_category'] = label.category
    return data


def _board_not_found(board_id):
    return jsonify({'error': f'Board {board_id} not found'}), 404


@api_bp.route('/boards', methods=['GET'])
def get_boards():
    sort_by = request.args.get('sort', 'recent')
    if sort_by not in BOARD_SORT_KEYS:
        sort_by = 'recent'
    boards = filter_and_sort_boards(get_store().boards, request.args.get('search', ''), sort_by)
    return jsonify([_board_summary(board) for board in boards])


@api_bp.route('/boards/<board_id>', methods=['GET'])
def get_board(board_id):
    board = get_store().get_board(board_id)
    if board is None:
        return _board_not_found(board_id)
    data = _board_summary(board)
    data['status_counts'] = status_counts(board.tasks)
    return jsonify(data)


@api_bp.route('/boards/<board_id>/tasks', methods=['GET'])
def get_tasks(board_id):
    board = get_store().get_board(board_id)
    if board is None:
        return _board_not_found(board_id)
    filters, sort, page = parse_task_query(
        request.args,
        current_app.config['TASKS_PER_PAGE'],
        current_app.config['TASKS_PER_PAGE_OPTIONS']
    )
    tasks = paginate_tasks(board.tasks, filters, sort, page)
    return jsonify({
        'items': [_task_dict(task) for task in tasks.items],
        'page': tasks.page + 1,
        'per_page': tasks.page_size,
        'total': tasks.total,
        'pages': tasks.pages
    })


@api_bp.route('/stats', methods=['GET'])
def get_stats():
    boards = get_store().boards
    stats = board_stats(boards)
    stats['status_counts'] = status_counts([task for board in boards for task in board.tasks])
    return jsonify(stats)
