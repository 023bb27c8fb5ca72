"""Testes do ActivityRecorder e do BoardConsumer."""

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.contrib.auth.models import AnonymousUser

from apps.board.consumers import BoardConsumer
from apps.core.models import ActivityLog
from apps.placement.activity import ActivityRecorder, PlacementEvent


def _event(board, user, **overrides):
    data = dict(
        action='ticket.move',
        actor_id=user.pk,
        entity_id=7,
        board_id=board.pk,
        entity_name='Tela de login',
        metadata={'fromColumn': 1, 'toColumn': 2, 'oldIndex': 0, 'newIndex': 3},
    )
    data.update(overrides)
    return PlacementEvent(**data)


def test_record_persists_activity(board, user):
    ActivityRecorder(broadcast=False).record(_event(board, user))

    log = ActivityLog.objects.get(board=board)
    assert log.action == 'ticket.move'
    assert log.entity_type == 'ticket'
    assert log.entity_id == 7
    assert log.user == user
    assert log.metadata['newIndex'] == 3


def test_event_without_metadata(board, user):
    event = PlacementEvent('ticket.create', user.pk, 9, board.pk)
    other = PlacementEvent('ticket.create', user.pk, 10, board.pk)

    assert event.metadata is None
    ActivityRecorder(broadcast=False).record(event)
    ActivityRecorder(broadcast=False).record(other)

    assert list(ActivityLog.objects.filter(board=board).values_list('metadata', flat=True)) == [{}, {}]


def test_record_notifies_board_group(board, user):
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(f'board_{board.pk}', channel)

    ActivityRecorder().record(_event(board, user))

    message = async_to_sync(layer.receive)(channel)
    assert message['type'] == 'ticket_moved'
    assert message['message']['ticket_id'] == 7
    assert message['message']['ticket_title'] == 'Tela de login'
    assert message['message']['metadata']['toColumn'] == 2


def test_unknown_action_is_sent_as_refresh(board, user):
    layer = get_channel_layer()
    channel = async_to_sync(layer.new_channel)()
    async_to_sync(layer.group_add)(f'board_{board.pk}', channel)

    ActivityRecorder().record(_event(board, user, action='ticket.update'))

    assert async_to_sync(layer.receive)(channel)['type'] == 'board_refresh'


def test_broadcast_failure_is_logged(board, user, monkeypatch, caplog):
    def broken_layer():
        raise RuntimeError('redis fora do ar')

    monkeypatch.setattr('apps.placement.activity.get_channel_layer', broken_layer)

    ActivityRecorder().record(_event(board, user))

    assert ActivityLog.objects.filter(board=board).count() == 1
    assert 'Erro ao notificar board' in caplog.text


def test_consumer_rejects_anonymous_user():

    async def connect():
        communicator = WebsocketCommunicator(BoardConsumer.as_asgi(), '/ws/board/1/')
        communicator.scope['user'] = AnonymousUser()
        communicator.scope['url_route'] = {'args': (), 'kwargs': {'board_id': 1}}
        connected, _ = await communicator.connect()
        return connected

    assert async_to_sync(connect)() is False
