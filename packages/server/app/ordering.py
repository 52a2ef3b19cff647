"""Task ordering within a kanban column.

Both the server's move endpoint and the client-side board projection call
``reorder`` so that a drop computes the same arrangement on either side.
Nothing in here touches the database or the network.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping


@dataclass(frozen=True)
class Slot:
    """A task's position inside one column."""

    id: str
    order: int


def next_order(orders: Iterable[int]) -> int:
    """Order value for an item appended after ``orders`` (0 when empty)."""
    orders = list(orders)
    if not orders:
        return 0
    return max(orders) + 1


def reorder(siblings: Iterable[Slot], moved_id: str, target_order: int) -> list[Slot]:
    """Insert ``moved_id`` at ``target_order`` among ``siblings``.

    Siblings are sorted by order (stable, so equal orders keep their input
    sequence). Every sibling whose order is at or after the insertion point is
    shifted to ``target_order + 1 + rank`` where ``rank`` counts the shifted
    siblings ahead of it; siblings before the insertion point keep their
    order. The moved slot takes ``target_order``.

    ``siblings`` may or may not contain the moved slot already (same-column
    versus cross-column moves); either way it is excluded from shifting.

    Returns every slot of the column, moved one included, sorted by order.
    """
    if target_order < 0:
        raise ValueError(f"target_order must be >= 0, got {target_order}")

    others = sorted((s for s in siblings if s.id != moved_id), key=lambda s: s.order)

    arranged: list[Slot] = []
    shifted = 0
    for slot in others:
        if slot.order >= target_order:
            arranged.append(Slot(slot.id, target_order + 1 + shifted))
            shifted += 1
        else:
            arranged.append(slot)
    arranged.append(Slot(moved_id, target_order))

    return sorted(arranged, key=lambda s: s.order)


def changed_orders(before: Iterable[Slot], after: Iterable[Slot]) -> Mapping[str, int]:
    """Map of id -> new order for slots whose order differs between two layouts."""
    previous = {s.id: s.order for s in before}
    return {s.id: s.order for s in after if previous.get(s.id) != s.order}
