# apps/placement/activity.py

import logging
from typing import Any, Dict, NamedTuple, Optional

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction
from django.utils import timezone

from apps.core.models import ActivityLog

logger = logging.getLogger(__name__)


class PlacementEvent(NamedTuple):
    """Evento emitido depois de uma colocação confirmada"""

    action: str
    actor_id: Optional[int]
    entity_id: int
    board_id: int
    entity_name: str = ''
    metadata: Optional[Dict[str, Any]] = None


# Nome do handler no BoardConsumer para cada ação
WEBSOCKET_EVENT_TYPES = {
    'ticket.create': 'ticket_created',
    'ticket.move': 'ticket_moved',
    'ticket.delete': 'ticket_deleted',
}


class ActivityRecorder:
    """
    Registro de auditoria - fire-and-forget

    Persiste ActivityLog e notifica o grupo WebSocket do board.
    Falhas aqui são logadas e nunca desfazem a colocação.
    """

    def __init__(self, broadcast=True):
        self._broadcast = broadcast

    def record(self, event: PlacementEvent):
        if event.metadata is None:
            event = event._replace(metadata={})

        try:
            with transaction.atomic():
                ActivityLog.objects.create(
                    action=event.action,
                    user_id=event.actor_id,
                    entity_type='ticket',
                    entity_id=event.entity_id,
                    entity_name=event.entity_name,
                    board_id=event.board_id,
                    metadata=dict(event.metadata),
                )
        except Exception:
            logger.exception(f"❌ Erro ao registrar atividade {event.action} do ticket {event.entity_id}")

        if self._broadcast:
            self._notify_board(event)

    def _notify_board(self, event: PlacementEvent):
        """Envia o evento para o grupo board_<id> (mesmo padrão do kanban)"""
        try:
            channel_layer = get_channel_layer()
            if channel_layer is None:
                return

            async_to_sync(channel_layer.group_send)(
                f'board_{event.board_id}',
                {
                    'type': WEBSOCKET_EVENT_TYPES.get(event.action, 'board_refresh'),
                    'message': {
                        'action': event.action,
                        'ticket_id': event.entity_id,
                        'ticket_title': event.entity_name,
                        'user_id': event.actor_id,
                        'metadata': dict(event.metadata),
                        'timestamp': timezone.now().isoformat()
                    }
                }
            )
        except Exception:
            logger.exception(f"❌ Erro ao notificar board {event.board_id} via WebSocket")
