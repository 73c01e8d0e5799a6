from dataclasses import replace
from datetime import datetime
from flask import Blueprint, render_template, redirect, url_for, flash, request, current_app
from flask_wtf import FlaskForm
from wtforms import StringField, DateField, SelectField, SubmitField
from wtforms.validators import DataRequired, Length, Optional
from taskboard.errors import NotFoundError, StorageError, ValidationError
from taskboard.models import TaskDraft
from taskboard.models.task import STATUS_LABELS
from taskboard.services import get_store
from taskboard.utils.dates import default_quick_due_date
from taskboard.utils.listing import parse_task_query, paginate_tasks, status_counts
from taskboard.utils.notify import SUCCESS, INFO, ERROR, SAVE_FAILED, flash_form_errors

tasks_bp = Blueprint('tasks', __name__)

STATUS_CHOICES = [(key, label) for key, label in STATUS_LABELS.items()]
PRIORITY_CHOICES = [('low', 'Low'), ('medium', 'Medium'), ('high', 'High')]
LISTING_ARGS = ('search', 'status', 'priority', 'sort', 'order', 'page', 'per_page')


class TaskForm(FlaskForm):
    text = StringField('Task', validators=[
        DataRequired(message='Task description cannot be empty'),
        Length(max=500)
    ])
    status = SelectField('Status', choices=STATUS_CHOICES, default='todo')
    priority = SelectField('Priority', choices=PRIORITY_CHOICES, default='medium')
    due_date = DateField('Due Date', format='%Y-%m-%d', validators=[Optional()])
    submit = SubmitField('Save Task')


class StatusForm(FlaskForm):
    status = SelectField('Status', choices=STATUS_CHOICES)


def _listing_args():
    """Search/filter/sort/page of the task table, carried through POST redirects."""
    return {key: request.args[key] for key in LISTING_ARGS if request.args.get(key)}


def _back_to_board(board_id):
    return redirect(url_for('tasks.board_detail', board_id=board_id, **_listing_args()))


def _form_date(value):
    if not value:
        return None
    try:
        return datetime.fromisoformat(value[:10]).date()
    except ValueError:
        return None


@tasks_bp.route('/<board_id>')
def board_detail(board_id):
    store = get_store()
    board = store.get_board(board_id)
    if board is None:
        return render_template('boards/not_found.html', board_id=board_id), 404

    filters, sort, page = parse_task_query(
        request.args,
        current_app.config['TASKS_PER_PAGE'],
        current_app.config['TASKS_PER_PAGE_OPTIONS']
    )
    tasks = paginate_tasks(board.tasks, filters, sort, page)
    if tasks.pages and tasks.page >= tasks.pages:
        # stale page after a delete; show the last one instead
        tasks = paginate_tasks(board.tasks, filters, sort, replace(page, page=tasks.pages - 1))

    form = TaskForm()
    if request.args.get('quick'):
        form.due_date.data = default_quick_due_date()

    return render_template('boards/detail.html',
        board=board,
        tasks=tasks,
        filters=filters,
        sort=sort,
        counts=status_counts(board.tasks),
        form=form,
        status_form=StatusForm(),
        status_choices=STATUS_CHOICES,
        priority_choices=PRIORITY_CHOICES,
        page_sizes=current_app.config['TASKS_PER_PAGE_OPTIONS'],
        list_args=_listing_args()
    )


@tasks_bp.route('/<board_id>/tasks', methods=['POST'])
def create_task(board_id):
    form = TaskForm()
    if form.validate_on_submit():
        draft = TaskDraft(
            text=form.text.data,
            status=form.status.data,
            priority=form.priority.data,
            due_date=form.due_date.data
        )
        try:
            get_store().create_task(board_id, draft)
        except ValidationError as e:
            flash(e.message, ERROR)
        except NotFoundError:
            return render_template('boards/not_found.html', board_id=board_id), 404
        except StorageError:
            flash(SAVE_FAILED, ERROR)
        else:
            flash('Task added successfully', SUCCESS)
    else:
        flash_form_errors(form)
    return _back_to_board(board_id)


@tasks_bp.route('/<board_id>/tasks/<task_id>/edit', methods=['GET', 'POST'])
def edit_task(board_id, task_id):
    store = get_store()
    board = store.get_board(board_id)
    if board is None:
        return render_template('boards/not_found.html', board_id=board_id), 404
    task = board.get_task(task_id)
    if task is None:
        flash('Task not found', ERROR)
        return _back_to_board(board_id)

    if request.method == 'GET':
        form = TaskForm(data={
            'text': task.text,
            'status': task.status,
            'priority': task.priority,
            'due_date': _form_date(task.due_date)
        })
        return render_template('tasks/form.html', form=form, board=board, task=task,
                               list_args=_listing_args(), title='Edit Task')

    form = TaskForm()
    if form.validate_on_submit():
        patch = {
            'text': form.text.data,
            'status': form.status.data,
            'priority': form.priority.data,
            'due_date': form.due_date.data
        }
        try:
            store.update_task(board_id, task_id, patch)
        except ValidationError as e:
            flash(e.message, ERROR)
        except NotFoundError:
            flash('Task not found', ERROR)
        except StorageError:
            flash(SAVE_FAILED, ERROR)
        else:
            flash('Task updated successfully', SUCCESS)
            return _back_to_board(board_id)
    else:
        flash_form_errors(form)
    return render_template('tasks/form.html', form=form, board=board, task=task,
                           list_args=_listing_args(), title='Edit Task')


@tasks_bp.route('/<board_id>/tasks/<task_id>/delete', methods=['POST'])
def delete_task(board_id, task_id):
    try:
        get_store().delete_task(board_id, task_id)
    except StorageError:
        flash(SAVE_FAILED, ERROR)
    else:
        flash('Task deleted successfully', INFO)
    return _back_to_board(board_id)


@tasks_bp.route('/<board_id>/tasks/<task_id>/status', methods=['POST'])
def change_status(board_id, task_id):
    form = StatusForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return _back_to_board(board_id)
    try:
        task = get_store().set_task_status(board_id, task_id, form.status.data)
    except StorageError:
        flash(SAVE_FAILED, ERROR)
    else:
        if task is not None:
            flash('Task status updated', INFO)
    return _back_to_board(board_id)


@tasks_bp.route('/<board_id>/tasks/<task_id>/star', methods=['POST'])
def toggle_star(board_id, task_id):
    try:
        task = get_store().toggle_star_task(board_id, task_id)
    except StorageError:
        flash(SAVE_FAILED, ERROR)
    else:
        if task is not None:
            flash('Task starred' if task.starred else 'Task unstarred', INFO)
    return _back_to_board(board_id)
