# apps/placement/engine.py

"""
Placement Engine - insert, move e remove de tickets

Orquestra Position Index, StatusResolver e TicketStore. Cada operação
vira um único MutationSet (tudo ou nada); o ActivityRecorder é chamado
depois da confirmação, fora da fronteira de consistência.

A autorização é responsabilidade de quem chama (BoardPermissions).
"""

import logging
from typing import Callable, Dict, Optional, Tuple

from django.conf import settings

from apps.core.models import Ticket

from .activity import ActivityRecorder, PlacementEvent
from .errors import ConcurrencyConflict, InvalidTarget
from .position_index import IndexPlan, plan_append, plan_reorder, plan_transfer
from .status import StatusResolver
from .store import ATOMIC, MutationSet, TicketStore

logger = logging.getLogger(__name__)


class PlacementEngine:
    """
    Motor de posicionamento de tickets

    Garante que, em toda coluna, as posições dos tickets vivos formam
    0..N-1 depois de cada operação confirmada.
    """

    def __init__(self, store: Optional[TicketStore] = None,
                 resolver: Optional[StatusResolver] = None,
                 recorder: Optional[ActivityRecorder] = None):
        config = getattr(settings, 'PLACEMENT', {})
        self._store = store or TicketStore()
        self._resolver = resolver or StatusResolver()
        self._recorder = recorder or ActivityRecorder()
        self._conflict_retries = config.get('CONFLICT_RETRIES', 1)

    def insert(self, draft: Ticket, column_id, actor=None) -> Ticket:
        """
        Coloca um ticket novo no fim da coluna

        Args:
            draft: Ticket ainda não salvo (title, priority, etc)
            column_id: Coluna de destino
            actor: Usuário que executa a ação (para auditoria)

        Returns:
            Ticket salvo com position = quantidade de tickets vivos
        """
        column = self._store.load_column(column_id)

        if draft.board_id is None:
            draft.board = column.board
        elif draft.board_id != column.board_id:
            raise InvalidTarget(
                f"Coluna {column.pk} não pertence ao board {draft.board_id}",
                column_id=column.pk
            )

        if draft.created_by_id is None and actor is not None:
            draft.created_by = actor

        status = self._resolver.resolve(column.title)

        def attempt():
            draft.pk = None
            entries = self._store.list_tickets_in_column(column.pk)
            plan = plan_append(entries)
            mutations = MutationSet(
                ticket=draft,
                column=column,
                position=plan.final_position,
                status=status,
                adjustments={column.pk: plan.adjustments},
                expected={column.pk: entries},
                create=True,
            )
            return self._store.apply_mutation_set(mutations)

        ticket = self._with_retry(attempt, f"inserir ticket na coluna {column.pk}")

        logger.info(f"✅ Ticket {ticket.pk} inserido na coluna {column.pk} posição {ticket.position}")
        self._recorder.record(PlacementEvent(
            action='ticket.create',
            actor_id=getattr(actor, 'pk', None),
            entity_id=ticket.pk,
            board_id=ticket.board_id,
            entity_name=ticket.title,
            metadata={
                'priority': ticket.priority,
                'column': column.pk,
                'position': ticket.position,
            },
        ))
        return ticket

    def move(self, ticket_id, destination_column_id, destination_index, actor=None) -> Ticket:
        """
        Move um ticket para (coluna, índice)

        O índice é relativo à visão viva da coluna de destino e é
        limitado ao tamanho dela (além do fim vira append).

        Raises:
            NotFound: ticket ou coluna inexistente
            InvalidTarget: coluna de outro board ou índice negativo
            ConcurrencyConflict: conflito persistente após o retry interno
            DegradedConsistency: modo degradado falhou no meio
        """
        if isinstance(destination_index, bool) or not isinstance(destination_index, int):
            raise InvalidTarget(f"Índice de destino inválido: {destination_index!r}")
        if destination_index < 0:
            raise InvalidTarget(f"Índice de destino não pode ser negativo: {destination_index}")

        outcome = {}

        def attempt():
            ticket, plan, source_column_id, mutations = self._plan_move(
                ticket_id, destination_column_id, destination_index
            )
            outcome.update(plan=plan, source_column_id=source_column_id, noop=mutations is None)
            if mutations is None:
                return ticket
            return self._store.apply_mutation_set(mutations)

        ticket = self._with_retry(attempt, f"mover ticket {ticket_id}")

        if outcome['noop']:
            logger.debug(f"Ticket {ticket.pk} já está na posição {ticket.position} - nada a fazer")
            return ticket

        plan = outcome['plan']
        logger.info(
            f"✅ Ticket {ticket.pk} movido: coluna {outcome['source_column_id']} -> {ticket.column_id} "
            f"posição {ticket.position} ({ticket.placement_consistency})"
        )
        self._recorder.record(PlacementEvent(
            action='ticket.move',
            actor_id=getattr(actor, 'pk', None),
            entity_id=ticket.pk,
            board_id=ticket.board_id,
            entity_name=ticket.title,
            metadata={
                'fromColumn': outcome['source_column_id'],
                'toColumn': ticket.column_id,
                'oldIndex': plan.old_index,
                'newIndex': plan.final_position,
                'status': ticket.status,
                'consistency': ticket.placement_consistency,
            },
        ))
        return ticket

    def remove(self, ticket_id, hard=False, actor=None) -> Dict:
        """
        Soft delete (padrão) ou hard delete

        Hard delete também aceita tickets que já sofreram soft delete
        (purga definitiva); soft delete repetido é NotFound.

        Nenhuma compactação: o buraco é ignorado pelo Position Index e
        fechado na próxima movimentação da coluna.
        """
        ticket = self._store.load_ticket(ticket_id, include_deleted=hard)
        self._store.remove(ticket, hard=hard)

        logger.info(f"🗑️ Ticket {ticket.pk} removido ({'hard' if hard else 'soft'} delete)")
        self._recorder.record(PlacementEvent(
            action='ticket.delete',
            actor_id=getattr(actor, 'pk', None),
            entity_id=ticket.pk,
            board_id=ticket.board_id,
            entity_name=ticket.title,
            metadata={
                'hard': hard,
                'wasDeleted': ticket.is_deleted,
                'column': ticket.column_id,
                'position': ticket.position,
            },
        ))
        return {'ok': True, 'ticket_id': ticket.pk, 'hard': hard}

    # === MÉTODOS PRIVADOS ===

    def _plan_move(self, ticket_id, destination_column_id, destination_index) -> Tuple[Ticket, IndexPlan, int, Optional[MutationSet]]:
        """Recarrega ticket e ordenação e monta o MutationSet da tentativa"""
        ticket = self._store.load_ticket(ticket_id)
        column = self._store.load_column(destination_column_id)

        if column.board_id != ticket.board_id:
            raise InvalidTarget(
                f"Coluna {column.pk} não pertence ao board do ticket {ticket.pk}",
                ticket_id=ticket.pk,
                column_id=column.pk
            )

        source_column_id = ticket.column_id

        if source_column_id == column.pk:
            entries = self._store.list_tickets_in_column(column.pk)
            try:
                plan = plan_reorder(entries, ticket.pk, destination_index)
            except ValueError:
                raise ConcurrencyConflict(
                    f"Ticket {ticket.pk} saiu da coluna {column.pk} durante a operação",
                    ticket_id=ticket.pk
                )
            if plan.is_noop:
                ticket.placement_consistency = ATOMIC
                return ticket, plan, source_column_id, None
            expected = {column.pk: entries}
            adjustments = {column.pk: plan.adjustments}
        else:
            source_entries = self._store.list_tickets_in_column(source_column_id)
            destination_entries = self._store.list_tickets_in_column(column.pk)
            plan = plan_transfer(source_entries, destination_entries, ticket.pk, destination_index)
            expected = {source_column_id: source_entries, column.pk: destination_entries}
            adjustments = {
                source_column_id: plan.source_adjustments,
                column.pk: plan.adjustments,
            }

        mutations = MutationSet(
            ticket=ticket,
            column=column,
            position=plan.final_position,
            status=self._resolver.resolve(column.title),
            adjustments=adjustments,
            expected=expected,
        )
        return ticket, plan, source_column_id, mutations

    def _with_retry(self, attempt: Callable[[], Ticket], label: str) -> Ticket:
        retries = self._conflict_retries
        while True:
            try:
                return attempt()
            except ConcurrencyConflict as exc:
                if retries <= 0:
                    logger.warning(f"⚠️ Conflito persistente ao {label}: {exc}")
                    raise
                retries -= 1
                logger.warning(f"⚠️ Conflito ao {label} - repetindo com ordenação recarregada")


# Instância global do serviço (Singleton pattern)
placement_engine = PlacementEngine()
