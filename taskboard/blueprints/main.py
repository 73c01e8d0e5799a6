from flask import Blueprint, render_template, redirect, url_for, flash, request
from flask_wtf import FlaskForm
from wtforms import StringField, SubmitField
from wtforms.validators import DataRequired, Length
from taskboard.errors import StorageError, ValidationError
from taskboard.services import get_store
from taskboard.utils.listing import BOARD_SORT_KEYS, filter_and_sort_boards, board_stats
from taskboard.utils.notify import SUCCESS, INFO, ERROR, SAVE_FAILED, flash_form_errors

main_bp = Blueprint('main', __name__)


class BoardForm(FlaskForm):
    name = StringField('Board name', validators=[
        DataRequired(message='Board name cannot be empty'),
        Length(max=100)
    ])
    submit = SubmitField('Create Board')


def _list_args():
    """Search and sort of the board list, carried through POST redirects."""
    args = {}
    if request.args.get('search'):
        args['search'] = request.args['search']
    if request.args.get('sort') in BOARD_SORT_KEYS:
        args['sort'] = request.args['sort']
    return args


@main_bp.route('/')
def index():
    """Board list with search and sorting"""
    store = get_store()
    search = request.args.get('search', '')
    sort_by = request.args.get('sort', 'recent')
    if sort_by not in BOARD_SORT_KEYS:
        sort_by = 'recent'

    boards = filter_and_sort_boards(store.boards, search, sort_by)

    return render_template('boards/list.html',
        boards=boards,
        stats=board_stats(store.boards),
        form=BoardForm(),
        search=search,
        sort_by=sort_by,
        sort_keys=BOARD_SORT_KEYS,
        list_args=_list_args()
    )


@main_bp.route('/boards', methods=['POST'])
def create_board():
    form = BoardForm()
    if form.validate_on_submit():
        try:
            get_store().create_board(form.name.data)
        except ValidationError as e:
            flash(e.message, ERROR)
        except StorageError:
            flash(SAVE_FAILED, ERROR)
        else:
            flash('Board created successfully', SUCCESS)
    else:
        flash_form_errors(form)
    return redirect(url_for('main.index', **_list_args()))


@main_bp.route('/boards/<board_id>/delete', methods=['POST'])
def delete_board(board_id):
    try:
        get_store().delete_board(board_id)
    except StorageError:
        flash(SAVE_FAILED, ERROR)
    else:
        flash('Board deleted successfully', INFO)
    return redirect(url_for('main.index', **_list_args()))


@main_bp.route('/boards/<board_id>/star', methods=['POST'])
def toggle_star(board_id):
    try:
        board = get_store().toggle_star_board(board_id)
    except StorageError:
        flash(SAVE_FAILED, ERROR)
    else:
        if board is not None:
            flash('Board starred' if board.starred else 'Board unstarred', INFO)
    return redirect(url_for('main.index', **_list_args()))
