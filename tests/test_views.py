"""Testes da API JSON do board."""

import json

import pytest
from django.urls import reverse

from apps.core.models import Ticket
from apps.placement.errors import ConcurrencyConflict, DegradedConsistency

from .conftest import fill_column, live_positions


def _post(client, url, data):
    return client.post(url, data=json.dumps(data), content_type='application/json')


@pytest.fixture
def member_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def outsider_client(client, outsider):
    client.force_login(outsider)
    return client


def test_create_ticket(member_client, board, todo, user):
    response = _post(member_client, reverse('board:create_ticket', args=[board.id]), {
        'title': 'Tela de login',
        'priority': 'High',
        'column_id': todo.id,
    })

    assert response.status_code == 201
    ticket = response.json()['data']['ticket']
    assert ticket['position'] == 0
    assert ticket['status'] == 'todo'
    assert ticket['priority'] == 'High'
    assert ticket['created_by'] == user.id
    assert ticket['consistency'] == 'atomic'


@pytest.mark.parametrize('payload', [
    {'column_id': 1},
    {'title': '   ', 'column_id': 1},
    {'title': 'Sem coluna'},
    {'title': 'x' * 101, 'column_id': 1},
    {'title': 'Prioridade errada', 'column_id': 1, 'priority': 'Urgent'},
])
def test_create_ticket_validation(member_client, board, payload):
    response = _post(member_client, reverse('board:create_ticket', args=[board.id]), payload)

    assert response.status_code == 400
    assert response.json()['ok'] is False


def test_create_ticket_in_foreign_column(member_client, board, other_board):
    response = _post(member_client, reverse('board:create_ticket', args=[board.id]), {
        'title': 'Perdido',
        'column_id': other_board.columns.first().id,
    })

    assert response.status_code == 400
    assert response.json()['error']['code'] == 'invalid_target'


def test_create_ticket_requires_membership(outsider_client, board, todo):
    response = _post(outsider_client, reverse('board:create_ticket', args=[board.id]), {
        'title': 'Intruso',
        'column_id': todo.id,
    })

    assert response.status_code == 403
    assert not Ticket.objects.exists()


def test_anonymous_request_gets_401(client, board):
    response = client.get(reverse('board:state', args=[board.id]))

    assert response.status_code == 401


def test_invalid_json(member_client, board):
    response = member_client.post(
        reverse('board:create_ticket', args=[board.id]),
        data='{nope',
        content_type='application/json'
    )

    assert response.status_code == 400


def test_move_ticket(member_client, engine, todo, doing):
    t0, _ = fill_column(engine, todo, 'T0', 'T1')

    response = _post(member_client, reverse('board:move_ticket', args=[t0.id]), {
        'column_id': doing.id,
        'index': 0,
    })

    assert response.status_code == 200
    data = response.json()['data']['ticket']
    assert data['column_id'] == doing.id
    assert data['status'] == 'in_progress'
    assert live_positions(todo) == [('T1', 0)]


def test_move_ticket_requires_index(member_client, engine, todo):
    t0, = fill_column(engine, todo, 'T0')

    response = _post(member_client, reverse('board:move_ticket', args=[t0.id]), {'column_id': todo.id})

    assert response.status_code == 400


def test_move_ticket_to_missing_column(member_client, engine, todo):
    t0, = fill_column(engine, todo, 'T0')

    response = _post(member_client, reverse('board:move_ticket', args=[t0.id]), {
        'column_id': 999999,
        'index': 0,
    })

    assert response.status_code == 404
    assert response.json()['error']['code'] == 'not_found'


def test_move_missing_ticket(member_client, todo):
    response = _post(member_client, reverse('board:move_ticket', args=[999999]), {
        'column_id': todo.id,
        'index': 0,
    })

    assert response.status_code == 404


def test_move_requires_membership(outsider_client, engine, todo, doing):
    t0, = fill_column(engine, todo, 'T0')

    response = _post(outsider_client, reverse('board:move_ticket', args=[t0.id]), {
        'column_id': doing.id,
        'index': 0,
    })

    assert response.status_code == 403
    assert live_positions(todo) == [('T0', 0)]


@pytest.mark.parametrize('error, status', [
    (ConcurrencyConflict('ordenação mudou'), 409),
    (DegradedConsistency('parcial', applied=1), 503),
])
def test_move_errors_ask_client_to_refresh(member_client, engine, todo, doing, monkeypatch, error, status):
    t0, = fill_column(engine, todo, 'T0')

    def failing_move(*args, **kwargs):
        raise error

    monkeypatch.setattr('apps.board.views.placement_engine.move', failing_move)

    response = _post(member_client, reverse('board:move_ticket', args=[t0.id]), {
        'column_id': doing.id,
        'index': 0,
    })

    assert response.status_code == status
    body = response.json()
    assert body['refresh'] is True
    assert body['error']['code'] == error.code


def test_soft_delete(member_client, engine, todo):
    t0, t1 = fill_column(engine, todo, 'T0', 'T1')

    response = member_client.delete(reverse('board:delete_ticket', args=[t0.id]))

    assert response.status_code == 200
    assert response.json()['hard'] is False
    assert Ticket.objects.get(pk=t0.id).is_deleted
    assert live_positions(todo) == [('T1', 1)]


def test_hard_delete_requires_admin(member_client, engine, todo):
    t0, = fill_column(engine, todo, 'T0')

    response = member_client.delete(reverse('board:delete_ticket', args=[t0.id]) + '?hard=true')

    assert response.status_code == 403
    assert Ticket.objects.filter(pk=t0.id, deleted_at__isnull=True).exists()


def test_admin_hard_delete(client, admin_user, engine, todo):
    t0, = fill_column(engine, todo, 'T0')
    client.force_login(admin_user)

    response = client.delete(reverse('board:delete_ticket', args=[t0.id]) + '?hard=true')

    assert response.status_code == 200
    assert response.json()['hard'] is True
    assert not Ticket.objects.filter(pk=t0.id).exists()


def test_admin_hard_delete_after_soft_delete(client, admin_user, engine, todo):
    t0, = fill_column(engine, todo, 'T0')
    client.force_login(admin_user)
    url = reverse('board:delete_ticket', args=[t0.id])

    assert client.delete(url).status_code == 200
    assert client.delete(url).status_code == 404

    response = client.delete(url + '?hard=true')

    assert response.status_code == 200
    assert response.json()['hard'] is True
    assert not Ticket.objects.filter(pk=t0.id).exists()


def test_board_state(member_client, engine, board, todo):
    fill_column(engine, todo, 'T0', 'T1')

    response = member_client.get(reverse('board:state', args=[board.id]))

    assert response.status_code == 200
    data = response.json()['data']
    titles = [column['title'] for column in data['columns']]
    assert titles == ['Backlog', 'Todo', 'Doing', 'Reviewing', 'Finished']
    todo_state = data['columns'][1]
    assert todo_state['total_tickets'] == 2
    assert [t['title'] for t in todo_state['tickets']] == ['T0', 'T1']


def test_board_state_hidden_from_outsiders(outsider_client, board):
    response = outsider_client.get(reverse('board:state', args=[board.id]))

    assert response.status_code == 403
