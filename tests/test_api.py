"""Tests for the read-only JSON API."""
import pytest

from taskboard.models import TaskDraft
from taskboard.services import BoardStore, BoardStorage, DatabaseLocalStorage


@pytest.fixture
def seeded(app):
    """Two boards; the first holds three tasks."""
    with app.app_context():
        store = BoardStore(BoardStorage(DatabaseLocalStorage()))
        sprint = store.create_board('Sprint 1')
        store.create_board('Groceries')
        store.create_task(sprint.id, TaskDraft(text='Write spec', priority='high', due_date='2024-07-04'))
        store.create_task(sprint.id, TaskDraft(text='Review PR', status='done'))
        store.create_task(sprint.id, TaskDraft(text='Deploy', status='in-progress', priority='low'))
        store.toggle_star_board(sprint.id)
        return store.get_board(sprint.id)


def test_list_boards(client, seeded):
    response = client.get('/api/boards')
    assert response.status_code == 200
    data = response.get_json()
    assert [b['name'] for b in data] == ['Sprint 1', 'Groceries']
    assert data[0]['task_count'] == 3
    assert data[0]['starred'] is True


def test_list_boards_search_and_sort(client, seeded):
    data = client.get('/api/boards?search=groc').get_json()
    assert [b['name'] for b in data] == ['Groceries']
    data = client.get('/api/boards?sort=name').get_json()
    assert [b['name'] for b in data] == ['Groceries', 'Sprint 1']


def test_get_board(client, seeded):
    data = client.get(f'/api/boards/{seeded.id}').get_json()
    assert data['id'] == seeded.id
    assert data['status_counts'] == {'todo': 1, 'in-progress': 1, 'done': 1}


def test_get_unknown_board(client):
    response = client.get('/api/boards/missing')
    assert response.status_code == 404
    assert 'error' in response.get_json()
    assert client.get('/api/boards/missing/tasks').status_code == 404


def test_get_tasks_filtered_and_paginated(client, seeded):
    data = client.get(f'/api/boards/{seeded.id}/tasks?status=done').get_json()
    assert [t['text'] for t in data['items']] == ['Review PR']
    assert data['total'] == 1

    data = client.get(f'/api/boards/{seeded.id}/tasks?sort=priority&order=desc&per_page=5&page=1').get_json()
    assert [t['text'] for t in data['items']] == ['Write spec', 'Review PR', 'Deploy']
    assert data['page'] == 1
    assert data['per_page'] == 5
    assert data['pages'] == 1


def test_task_payload_includes_due_label(client, seeded):
    data = client.get(f'/api/boards/{seeded.id}/tasks').get_json()
    first = data['items'][0]
    assert first['text'] == 'Write spec'
    assert first['dueDate'] == '2024-07-04'
    assert first['due_category'] in ('neutral', 'warning', 'info', 'error')
    assert data['items'][-1]['due_label'] == 'No due date'


def test_stats(client, seeded):
    data = client.get('/api/stats').get_json()
    assert data['boards'] == 2
    assert data['tasks'] == 3
    assert data['starred'] == 1
    assert data['status_counts']['done'] == 1
