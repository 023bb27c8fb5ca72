# apps/core/utils.py

from typing import Dict, List


def board_state(board) -> Dict:
    """
    Estado atual do board: colunas em ordem com os tickets vivos ordenados
    Usado pela API JSON e pela sincronização via WebSocket
    """
    from .models import Ticket

    tickets_by_column = {}
    for ticket in Ticket.objects.live().filter(board=board).order_by('position', 'id'):
        tickets_by_column.setdefault(ticket.column_id, []).append(ticket.to_dict())

    columns = []
    for column in board.columns.order_by('position', 'id'):
        tickets = tickets_by_column.get(column.id, [])
        columns.append({
            'id': column.id,
            'title': column.title,
            'position': column.position,
            'total_tickets': len(tickets),
            'tickets': tickets,
        })

    return {
        'board_id': board.id,
        'title': board.title,
        'columns': columns,
    }


def find_gapped_columns(boards=None) -> List[Dict]:
    """
    Colunas cujas posições vivas não formam 0..N-1

    Aparecem depois de soft deletes (até a próxima movimentação) ou
    de uma falha no modo degradado.
    """
    from apps.placement.position_index import is_dense
    from .models import Column

    columns = Column.objects.select_related('board').order_by('board_id', 'position', 'id')
    if boards is not None:
        columns = columns.filter(board__in=boards)

    problems = []
    for column in columns:
        positions = list(column.live_tickets().values_list('position', flat=True))
        if not is_dense(positions):
            problems.append({
                'column': column,
                'positions': positions,
                'expected': list(range(len(positions))),
            })

    return problems
