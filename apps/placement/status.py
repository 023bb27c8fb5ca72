# apps/placement/status.py

from typing import Dict, Optional

from django.conf import settings

from apps.core.models import TicketStatus

# Match exato e case-sensitive do título da coluna
DEFAULT_STATUS_MAP = {
    'Backlog': TicketStatus.BACKLOG,
    'Todo': TicketStatus.TODO,
    'Doing': TicketStatus.IN_PROGRESS,
    'Reviewing': TicketStatus.REVIEW,
    'Finished': TicketStatus.DONE,
    'Done': TicketStatus.DONE,
}

DEFAULT_STATUS = TicketStatus.BACKLOG


class StatusResolver:
    """
    Mapeia o título (texto livre) de uma coluna para o status de workflow

    O status é calculado só no momento em que o ticket é colocado na
    coluna; renomear a coluna depois não altera tickets já posicionados.
    """

    def __init__(self, mapping: Optional[Dict[str, str]] = None, default: Optional[str] = None):
        config = getattr(settings, 'PLACEMENT', {})
        self._mapping = dict(mapping if mapping is not None else config.get('STATUS_MAP', DEFAULT_STATUS_MAP))
        self._default = default or config.get('DEFAULT_STATUS', DEFAULT_STATUS)

    def resolve(self, column_title: str) -> str:
        return str(self._mapping.get(column_title, self._default))
