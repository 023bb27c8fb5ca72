"""Fixtures compartilhadas dos testes."""

import pytest
from django.contrib.auth import get_user_model

from apps.core.models import Board, Column, Ticket
from apps.placement.activity import ActivityRecorder
from apps.placement.engine import PlacementEngine
from apps.placement.store import TicketStore

User = get_user_model()


def live_positions(column):
    """[(title, position)] dos tickets vivos da coluna, em ordem"""
    return list(column.live_tickets().values_list('title', 'position'))


def fill_column(engine, column, *titles):
    """Insere tickets pelo motor e devolve a lista na ordem"""
    return [
        engine.insert(Ticket(title=title, board=column.board), column.id)
        for title in titles
    ]


@pytest.fixture
def user(db):
    return User.objects.create_user(username='ana', password='senha-segura-123')


@pytest.fixture
def outsider(db):
    return User.objects.create_user(username='bruno', password='senha-segura-123')


@pytest.fixture
def board(user):
    """Board com as colunas padrão: Backlog, Todo, Doing, Reviewing, Finished"""
    board = Board.objects.create(title='Sprint 1', owner=user)
    board.members.add(user)
    return board


@pytest.fixture
def other_board(outsider):
    return Board.objects.create(title='Outro time', owner=outsider)


@pytest.fixture
def columns(board):
    return {column.title: column for column in board.columns.all()}


@pytest.fixture
def todo(columns):
    return columns['Todo']


@pytest.fixture
def doing(columns):
    return columns['Doing']


@pytest.fixture
def done_column(board):
    return Column.objects.create(board=board, title='Done', position=5)


@pytest.fixture
def engine(db):
    return PlacementEngine(store=TicketStore(), recorder=ActivityRecorder(broadcast=False))
