# apps/placement/position_index.py

"""
Position Index - cálculo puro das posições de uma coluna

Sem I/O: recebe a ordenação atual (ticket_id, position) dos tickets
vivos da coluna e devolve os deslocamentos necessários para que, depois
da operação, as posições voltem a ser exatamente 0..N-1.

As posições alvo são sempre o rank de cada ticket na ordenação final.
Numa coluna densa isso gera exatamente os deslocamentos clássicos
(-1 em (old, new], +1 em [new, old), etc). Numa coluna com buracos
deixados por soft delete, os mesmos deltas também fecham os buracos.
"""

from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

Entry = Tuple[int, int]  # (ticket_id, position)


class Adjustment(NamedTuple):
    """Deslocamento de um ticket vizinho (nunca o ticket em movimento)"""

    ticket_id: int
    delta: int


class IndexPlan(NamedTuple):
    """
    Resultado do cálculo

    adjustments: deslocamentos na coluna de destino (ou na própria coluna)
    source_adjustments: deslocamentos na coluna de origem (só cross-column)
    final_position: posição final do ticket em movimento
    old_index: índice de origem do ticket na visão viva (None = novo)
    """

    adjustments: List[Adjustment]
    source_adjustments: List[Adjustment]
    final_position: int
    old_index: Optional[int]

    @property
    def is_noop(self):
        return (
            self.old_index is not None
            and self.old_index == self.final_position
            and not self.adjustments
            and not self.source_adjustments
        )


def _ordered(entries: Iterable[Entry]) -> List[Entry]:
    # sort estável: empates mantêm a ordem recebida do store
    return sorted(entries, key=lambda entry: entry[1])


def _rank_adjustments(ordered_ids: Sequence[int], positions: dict,
                      skip: Optional[int] = None) -> List[Adjustment]:
    adjustments = []
    for rank, ticket_id in enumerate(ordered_ids):
        if ticket_id == skip:
            continue
        delta = rank - positions[ticket_id]
        if delta:
            adjustments.append(Adjustment(ticket_id, delta))
    return adjustments


def clamp_index(index: int, count: int) -> int:
    """Limita o índice a [0, count] - além do fim vira append"""
    return max(0, min(index, count))


def is_dense(positions: Iterable[int]) -> bool:
    """True se as posições formam exatamente 0..N-1 sem repetição"""
    positions = list(positions)
    return sorted(positions) == list(range(len(positions)))


def compaction(entries: Iterable[Entry]) -> List[Adjustment]:
    """Deltas que levam cada ticket vivo ao seu rank atual"""
    ordered = _ordered(entries)
    positions = dict(ordered)
    return _rank_adjustments([ticket_id for ticket_id, _ in ordered], positions)


def plan_append(entries: Iterable[Entry]) -> IndexPlan:
    """
    Inserção de um ticket novo no fim da coluna

    Se a coluna tiver buracos, eles são fechados na mesma unidade
    para que a posição final (= quantidade de vivos) não colida.
    """
    ordered = _ordered(entries)
    return IndexPlan(
        adjustments=compaction(ordered),
        source_adjustments=[],
        final_position=len(ordered),
        old_index=None,
    )


def plan_reorder(entries: Iterable[Entry], mover_id: int, new_index: int) -> IndexPlan:
    """
    Movimento dentro da mesma coluna

    old < new: tickets em (old, new] descem 1
    old > new: tickets em [new, old) sobem 1
    old == new: no-op
    """
    ordered = _ordered(entries)
    ids = [ticket_id for ticket_id, _ in ordered]
    if mover_id not in ids:
        raise ValueError(f"ticket {mover_id} não está na coluna")

    old_index = ids.index(mover_id)
    ids.remove(mover_id)
    new_index = clamp_index(new_index, len(ids))

    if old_index == new_index:
        return IndexPlan([], [], new_index, old_index)

    ids.insert(new_index, mover_id)
    return IndexPlan(
        adjustments=_rank_adjustments(ids, dict(ordered), skip=mover_id),
        source_adjustments=[],
        final_position=new_index,
        old_index=old_index,
    )


def plan_transfer(source_entries: Iterable[Entry], destination_entries: Iterable[Entry],
                  mover_id: int, new_index: int) -> IndexPlan:
    """
    Movimento entre colunas - duas compactações independentes

    Origem: tickets depois do ticket movido descem 1 (fecha o buraco).
    Destino: tickets em posição >= new sobem 1 (abre o slot).
    """
    source = _ordered(source_entries)
    source_ids = [ticket_id for ticket_id, _ in source]
    old_index = source_ids.index(mover_id) if mover_id in source_ids else None
    if old_index is not None:
        source_ids.remove(mover_id)

    destination = [entry for entry in _ordered(destination_entries) if entry[0] != mover_id]
    destination_ids = [ticket_id for ticket_id, _ in destination]
    new_index = clamp_index(new_index, len(destination_ids))
    destination_ids.insert(new_index, mover_id)

    return IndexPlan(
        adjustments=_rank_adjustments(destination_ids, dict(destination), skip=mover_id),
        source_adjustments=_rank_adjustments(source_ids, dict(source)),
        final_position=new_index,
        old_index=old_index,
    )
