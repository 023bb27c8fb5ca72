# apps/board/consumers.py

import json
import logging
from channels.generic.websocket import AsyncWebsocketConsumer
from channels.db import database_sync_to_async
from django.utils import timezone
from apps.core.models import Board
from apps.core.permissions import BoardPermissions
from apps.core.utils import board_state

logger = logging.getLogger(__name__)


class BoardConsumer(AsyncWebsocketConsumer):
    """
    Consumer WebSocket para atualizações em tempo real do board Kanban

    Funcionalidades:
    - Notificações de criação, movimentação e remoção de tickets
    - Sincronização do estado das colunas sob demanda
    """

    async def connect(self):
        """
        Conecta usuário ao grupo do board
        Verifica permissões antes de aceitar conexão
        """
        self.board_id = self.scope['url_route']['kwargs']['board_id']
        self.board_group_name = f'board_{self.board_id}'
        self.user = self.scope['user']

        # Verificar se usuário está autenticado
        if not self.user.is_authenticated:
            logger.warning("❌ Conexão WebSocket rejeitada - usuário não autenticado")
            await self.close()
            return

        # Verificar permissão de acesso ao board
        has_access = await self.check_board_access()
        if not has_access:
            logger.warning(f"❌ Conexão WebSocket rejeitada - {self.user.username} sem acesso ao board {self.board_id}")
            await self.close()
            return

        await self.channel_layer.group_add(
            self.board_group_name,
            self.channel_name
        )

        await self.accept()
        logger.info(f"✅ WebSocket conectado - {self.user.username} no board {self.board_id}")

    async def disconnect(self, close_code):
        """
        Desconecta usuário do grupo
        """
        if hasattr(self, 'board_group_name'):
            await self.channel_layer.group_discard(
                self.board_group_name,
                self.channel_name
            )

        logger.info(f"🔌 WebSocket desconectado do board {getattr(self, 'board_id', '?')}")

    async def receive(self, text_data):
        """
        Recebe mensagens do cliente WebSocket
        """
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.error(f"❌ JSON inválido recebido via WebSocket de {self.user.username}")
            return

        message_type = data.get('type')

        # Heartbeat/Ping
        if message_type == 'ping':
            await self.send(text_data=json.dumps({
                'type': 'pong',
                'timestamp': self.get_timestamp()
            }))

        # Cliente pede o estado atual (ex: depois de um 409/503 da API)
        elif message_type == 'sync_board':
            await self.send(text_data=json.dumps({
                'type': 'board_sync',
                'board_data': await self.get_board_state(),
                'timestamp': self.get_timestamp()
            }))

    # === Handlers para eventos do ActivityRecorder ===

    async def ticket_moved(self, event):
        """
        Notifica sobre movimentação de ticket
        """
        await self.send(text_data=json.dumps({
            'type': 'ticket_moved',
            'message': event['message']
        }))

    async def ticket_created(self, event):
        """
        Notifica sobre criação de novo ticket
        """
        await self.send(text_data=json.dumps({
            'type': 'ticket_created',
            'message': event['message']
        }))

    async def ticket_deleted(self, event):
        await self.send(text_data=json.dumps({
            'type': 'ticket_deleted',
            'message': event['message']
        }))

    async def board_refresh(self, event):
        """
        Força refresh do board (para grandes mudanças)
        """
        await self.send(text_data=json.dumps({
            'type': 'board_refresh',
            'message': event['message']
        }))

    # === Métodos auxiliares ===

    @database_sync_to_async
    def check_board_access(self):
        """
        Verifica se usuário tem acesso ao board
        """
        try:
            board = Board.objects.get(id=self.board_id)
            return BoardPermissions.can_view(self.user, board)
        except Board.DoesNotExist:
            return False

    @database_sync_to_async
    def get_board_state(self):
        """
        Retorna estado atual do board para sincronização
        """
        try:
            return board_state(Board.objects.get(id=self.board_id))
        except Board.DoesNotExist:
            logger.error(f"❌ Board {self.board_id} não encontrado na sincronização")
            return {}

    def get_timestamp(self):
        """
        Retorna timestamp atual em formato ISO
        """
        return timezone.now().isoformat()
