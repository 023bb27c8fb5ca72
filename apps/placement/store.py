# apps/placement/store.py

"""
Adaptador do ORM para o motor de posicionamento

Leitura de tickets/colunas e aplicação de um MutationSet em um de dois
níveis de consistência:

- atomic: transaction.atomic + select_for_update nas colunas afetadas,
  com verificação do snapshot que gerou o plano
- fallback: aplicação sequencial sem transação, validada por leitura
  final do ticket movido (modo degradado, explícito)
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

from django.conf import settings
from django.db import NotSupportedError, OperationalError, connection, transaction
from django.db.models import F
from django.utils import timezone

from apps.core.models import Column, Ticket

from .errors import ConcurrencyConflict, DegradedConsistency, NotFound
from .position_index import Adjustment, Entry, compaction

logger = logging.getLogger(__name__)

ATOMIC = 'atomic'
FALLBACK = 'fallback'


class MutationSet:
    """
    Conjunto de mutações de uma operação - confirma tudo ou nada

    expected guarda a ordenação viva (por coluna) sobre a qual o plano
    foi calculado; no modo atômico ela é conferida sob lock.
    """

    def __init__(self, ticket: Ticket, column: Column, position: int, status: str,
                 adjustments: Dict[int, List[Adjustment]], expected: Dict[int, List[Entry]],
                 create: bool = False):
        self.ticket = ticket
        self.column = column
        self.position = position
        self.status = status
        self.adjustments = {cid: list(adjs) for cid, adjs in adjustments.items() if adjs}
        self.expected = expected
        self.create = create

    @property
    def column_ids(self):
        return sorted(set(self.expected) | set(self.adjustments) | {self.column.pk})

    def __repr__(self):
        shifts = sum(len(adjs) for adjs in self.adjustments.values())
        return (f"<MutationSet ticket={self.ticket.pk} column={self.column.pk} "
                f"position={self.position} shifts={shifts}>")


class TicketStore:
    """Store de tickets sobre o Django ORM"""

    def __init__(self, atomic=None):
        config = getattr(settings, 'PLACEMENT', {})
        self._atomic_mode = config.get('ATOMIC', 'auto') if atomic is None else atomic

    # === LEITURA ===

    def load_ticket(self, ticket_id, include_deleted=False) -> Ticket:
        """Tickets com soft delete só são visíveis com include_deleted (hard delete)"""
        queryset = Ticket.objects.select_related('column', 'board')
        if not include_deleted:
            queryset = queryset.live()
        try:
            return queryset.get(pk=ticket_id)
        except (Ticket.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Ticket {ticket_id} não encontrado", ticket_id=ticket_id)

    def load_column(self, column_id) -> Column:
        try:
            return Column.objects.select_related('board').get(pk=column_id)
        except (Column.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"Coluna {column_id} não encontrada", column_id=column_id)

    def list_tickets_in_column(self, column_id, exclude_deleted=True) -> List[Entry]:
        """Pares (ticket_id, position) ordenados por posição"""
        queryset = Ticket.objects.filter(column_id=column_id)
        if exclude_deleted:
            queryset = queryset.live()
        return list(queryset.order_by('position', 'id').values_list('id', 'position'))

    # === ESCRITA ===

    def supports_atomic(self) -> bool:
        mode = self._atomic_mode
        if isinstance(mode, str):
            mode = mode.strip().lower()
            if mode == 'auto':
                return connection.features.supports_transactions
            return mode in ('1', 'true', 'yes', 'on')
        return bool(mode)

    def apply_mutation_set(self, mutations: MutationSet) -> Ticket:
        """
        Aplica o MutationSet e devolve o ticket confirmado

        O ticket devolvido carrega placement_consistency (atomic/fallback).
        """
        if self.supports_atomic():
            try:
                return self._apply_atomic(mutations)
            except NotSupportedError:
                logger.warning(f"⚠️ Store sem suporte a transação - usando modo degradado para {mutations!r}")
        return self._apply_fallback(mutations)

    def remove(self, ticket: Ticket, hard=False):
        """Soft delete mantém a posição (buraco tratado como ausente)"""
        if hard:
            deleted, _ = Ticket.objects.filter(pk=ticket.pk).delete()
            if not deleted:
                raise NotFound(f"Ticket {ticket.pk} não encontrado", ticket_id=ticket.pk)
            return

        updated = Ticket.objects.filter(pk=ticket.pk, deleted_at__isnull=True).update(
            deleted_at=timezone.now(),
            updated_at=timezone.now()
        )
        if not updated:
            raise NotFound(f"Ticket {ticket.pk} não encontrado", ticket_id=ticket.pk)

    def compact_column(self, column_id) -> int:
        """Fecha buracos da coluna numa transação; retorna tickets ajustados"""
        with transaction.atomic():
            list(Column.objects.select_for_update().filter(pk=column_id))
            adjustments = compaction(self.list_tickets_in_column(column_id))
            self._shift(adjustments)
        return len(adjustments)

    # === MÉTODOS PRIVADOS ===

    def _apply_atomic(self, mutations: MutationSet) -> Ticket:
        try:
            with transaction.atomic():
                # Lock em ordem de pk para evitar deadlock entre moves cruzados
                list(
                    Column.objects.select_for_update()
                    .filter(pk__in=mutations.column_ids)
                    .order_by('pk')
                )
                self._check_snapshot(mutations)
                for _, step in self._steps(mutations):
                    step()
                ticket = self._read_back(mutations)
        except OperationalError as exc:
            # deadlock / falha de serialização do banco
            raise ConcurrencyConflict(
                f"Não foi possível confirmar a movimentação do ticket {mutations.ticket.pk}",
                ticket_id=mutations.ticket.pk
            ) from exc

        ticket.placement_consistency = ATOMIC
        return ticket

    def _apply_fallback(self, mutations: MutationSet) -> Ticket:
        applied = 0
        try:
            for label, step in self._steps(mutations):
                step()
                applied += 1
                logger.debug(f"Modo degradado: passo {label} aplicado")
            ticket = self._read_back(mutations)
        except Exception as exc:
            logger.error(f"❌ Modo degradado falhou após {applied} passo(s) em {mutations!r}: {exc}")
            raise DegradedConsistency(
                "Movimentação aplicada parcialmente - recarregue o board",
                applied=applied,
                ticket_id=mutations.ticket.pk
            ) from exc

        if not self._matches(ticket, mutations):
            logger.error(f"❌ Leitura final não confere em modo degradado: {mutations!r}")
            raise DegradedConsistency(
                "Estado final do ticket não confere - recarregue o board",
                applied=applied,
                ticket_id=ticket.pk
            )

        ticket.placement_consistency = FALLBACK
        return ticket

    def _check_snapshot(self, mutations: MutationSet):
        for column_id, expected in mutations.expected.items():
            current = self.list_tickets_in_column(column_id)
            if current != list(expected):
                raise ConcurrencyConflict(
                    f"Ordenação da coluna {column_id} mudou durante a operação",
                    column_id=column_id
                )

    def _steps(self, mutations: MutationSet) -> List[Tuple[str, Callable[[], None]]]:
        """Mesma lista de passos para os dois níveis de consistência"""
        steps = []
        for column_id in sorted(mutations.adjustments):
            adjustments = mutations.adjustments[column_id]
            steps.append((f"shift:{column_id}", lambda adjs=adjustments: self._shift(adjs)))
        steps.append(('place', lambda: self._place(mutations)))
        return steps

    def _shift(self, adjustments: List[Adjustment]):
        by_delta = defaultdict(list)
        for adjustment in adjustments:
            by_delta[adjustment.delta].append(adjustment.ticket_id)

        now = timezone.now()
        for delta, ticket_ids in sorted(by_delta.items()):
            Ticket.objects.filter(pk__in=ticket_ids).update(
                position=F('position') + delta,
                updated_at=now
            )

    def _place(self, mutations: MutationSet):
        ticket = mutations.ticket
        ticket.column = mutations.column
        ticket.position = mutations.position
        ticket.status = mutations.status

        if mutations.create:
            ticket.save()
            return

        Ticket.objects.filter(pk=ticket.pk).update(
            column=mutations.column,
            position=mutations.position,
            status=mutations.status,
            updated_at=timezone.now()
        )

    def _read_back(self, mutations: MutationSet) -> Ticket:
        return Ticket.objects.select_related('column', 'board').get(pk=mutations.ticket.pk)

    @staticmethod
    def _matches(ticket: Optional[Ticket], mutations: MutationSet) -> bool:
        return (
            ticket is not None
            and ticket.deleted_at is None
            and ticket.column_id == mutations.column.pk
            and ticket.position == mutations.position
            and ticket.status == mutations.status
        )
