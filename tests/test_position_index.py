"""Testes do Position Index (cálculo puro, sem banco)."""

import pytest

from apps.placement.position_index import (
    Adjustment,
    clamp_index,
    compaction,
    is_dense,
    plan_append,
    plan_reorder,
    plan_transfer,
)


def _apply(entries, adjustments, mover_id=None, final_position=None):
    positions = dict(entries)
    for ticket_id, delta in adjustments:
        positions[ticket_id] += delta
    if mover_id is not None:
        positions[mover_id] = final_position
    return positions


def test_reorder_forward_shifts_range_down():
    entries = [(1, 0), (2, 1), (3, 2)]
    plan = plan_reorder(entries, 1, 2)
    assert plan.adjustments == [Adjustment(2, -1), Adjustment(3, -1)]
    assert plan.final_position == 2
    assert plan.old_index == 0
    assert plan.source_adjustments == []


def test_reorder_backward_shifts_range_up():
    entries = [(1, 0), (2, 1), (3, 2), (4, 3)]
    plan = plan_reorder(entries, 4, 1)
    assert plan.adjustments == [Adjustment(2, 1), Adjustment(3, 1)]
    assert plan.final_position == 1


def test_reorder_same_index_is_noop():
    plan = plan_reorder([(1, 0), (2, 1)], 2, 1)
    assert plan.is_noop
    assert plan.adjustments == []


def test_reorder_clamps_past_the_end():
    plan = plan_reorder([(1, 0), (2, 1), (3, 2)], 1, 99)
    assert plan.final_position == 2


def test_reorder_unknown_mover_raises():
    with pytest.raises(ValueError):
        plan_reorder([(1, 0)], 7, 0)


def test_reorder_ignores_soft_delete_gap():
    # T1 (id 11) com soft delete na posição 1: visão viva é [T0@0, T2@2]
    plan = plan_reorder([(10, 0), (12, 2)], 12, 0)
    assert plan.final_position == 0
    assert plan.adjustments == [Adjustment(10, 1)]


def test_reorder_heals_gaps_it_passes_over():
    entries = [(1, 0), (2, 2), (3, 3)]
    plan = plan_reorder(entries, 1, 1)
    positions = _apply(entries, plan.adjustments, 1, plan.final_position)
    assert positions == {2: 0, 1: 1, 3: 2}


@pytest.mark.parametrize('size', [1, 2, 5])
def test_reorder_always_yields_dense_column(size):
    entries = [(ticket_id, ticket_id) for ticket_id in range(size)]
    for mover in range(size):
        for target in range(size + 1):
            plan = plan_reorder(entries, mover, target)
            positions = _apply(entries, plan.adjustments, mover, plan.final_position)
            assert is_dense(positions.values())
            assert positions[mover] == min(target, size - 1)


def test_transfer_closes_source_and_opens_destination():
    plan = plan_transfer([(1, 0), (2, 1)], [(3, 0)], 1, 0)
    assert plan.source_adjustments == [Adjustment(2, -1)]
    assert plan.adjustments == [Adjustment(3, 1)]
    assert plan.final_position == 0
    assert plan.old_index == 0


def test_transfer_clamps_to_destination_length():
    plan = plan_transfer([(1, 0)], [(3, 0)], 1, 10)
    assert plan.final_position == 1
    assert plan.adjustments == []
    assert plan.source_adjustments == []


def test_transfer_into_empty_column():
    plan = plan_transfer([(1, 0), (2, 1), (3, 2)], [], 2, 0)
    assert plan.final_position == 0
    assert plan.source_adjustments == [Adjustment(3, -1)]


def test_transfer_conserves_sizes():
    source = [(1, 0), (2, 1), (3, 2)]
    destination = [(4, 0), (5, 1)]
    plan = plan_transfer(source, destination, 2, 1)

    remaining = _apply(source, plan.source_adjustments)
    del remaining[2]
    assert sorted(remaining.values()) == [0, 1]

    received = _apply(destination, plan.adjustments, 2, plan.final_position)
    assert sorted(received.values()) == [0, 1, 2]
    assert received == {4: 0, 2: 1, 5: 2}


def test_append_to_empty_column():
    plan = plan_append([])
    assert plan.final_position == 0
    assert plan.adjustments == []
    assert plan.old_index is None


def test_append_after_gap_compacts_first():
    plan = plan_append([(1, 0), (3, 2)])
    assert plan.adjustments == [Adjustment(3, -1)]
    assert plan.final_position == 2


def test_compaction_of_dense_column_is_empty():
    assert compaction([(1, 0), (2, 1)]) == []


def test_clamp_index():
    assert clamp_index(-3, 4) == 0
    assert clamp_index(2, 4) == 2
    assert clamp_index(9, 4) == 4


def test_is_dense():
    assert is_dense([])
    assert is_dense([2, 0, 1])
    assert not is_dense([0, 2])
    assert not is_dense([0, 0, 1])
