"""Testes dos comandos de gerenciamento e do sinal de colunas padrão."""

from io import StringIO

import pytest
from django.core.management import CommandError, call_command

from apps.core.models import ActivityLog, Board, Column, Ticket
from apps.core.utils import find_gapped_columns

from .conftest import fill_column, live_positions


def _run(*args, **options):
    out = StringIO()
    call_command(*args, stdout=out, **options)
    return out.getvalue()


def test_new_board_gets_default_columns(board):
    titles = list(board.columns.values_list('title', flat=True))

    assert titles == Board.DEFAULT_COLUMNS
    assert list(board.columns.values_list('position', flat=True)) == [0, 1, 2, 3, 4]


def test_seed_creates_dense_demo_board(db):
    output = _run('seed', username='demo', board='Board Demo')

    board = Board.objects.get(title='Board Demo')
    assert 'Board Demo' in output
    assert Ticket.objects.filter(board=board).count() == 7
    assert find_gapped_columns([board]) == []
    assert ActivityLog.objects.filter(board=board, action='ticket.create').count() == 7

    doing = board.columns.get(title='Doing')
    assert set(doing.live_tickets().values_list('status', flat=True)) == {'in_progress'}


def test_seed_is_idempotent(db):
    _run('seed')
    output = _run('seed')

    assert Board.objects.count() == 1
    assert 'já existe' in output


def test_sync_ticket_status_after_column_rename(engine, todo):
    t0, = fill_column(engine, todo, 'T0')
    Column.objects.filter(pk=todo.pk).update(title='Doing')

    dry_output = _run('sync_ticket_status', dry_run=True)
    assert Ticket.objects.get(pk=t0.pk).status == 'todo'
    assert '1 ticket(s) seriam atualizados' in dry_output

    _run('sync_ticket_status')
    assert Ticket.objects.get(pk=t0.pk).status == 'in_progress'


def test_check_positions_reports_and_repairs_gaps(engine, board, todo):
    _, t1, _ = fill_column(engine, todo, 'T0', 'T1', 'T2')
    engine.remove(t1.id)

    report = _run('check_positions')
    assert 'use --repair' in report
    assert live_positions(todo) == [('T0', 0), ('T2', 2)]

    _run('check_positions', board=board.id, repair=True)
    assert live_positions(todo) == [('T0', 0), ('T2', 1)]
    assert 'densas' in _run('check_positions')


def test_check_positions_unknown_board(db):
    with pytest.raises(CommandError):
        _run('check_positions', board=999999)
