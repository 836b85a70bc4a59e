"""
Top-N instruction selection.

Totals are accumulated in a single pass over the series. Each instruction
has one entry in a max-heap keyed by its running total; entries remember
their heap position so a total can be raised and the heap repaired in
place.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Set, Tuple


@dataclass
class InstructionTotal:
    """Running invocation total for one instruction"""

    instruction_name: str
    count: int
    index: int = -1


class InstructionHeap:
    """Max-heap of instruction totals with positional updates"""

    def __init__(self):
        self._items: List[InstructionTotal] = []

    def __len__(self) -> int:
        return len(self._items)

    def push(self, item: InstructionTotal) -> None:
        item.index = len(self._items)
        self._items.append(item)
        self._sift_up(item.index)

    def pop(self) -> InstructionTotal:
        """Remove and return the entry with the largest total"""
        if not self._items:
            raise IndexError("pop from empty heap")
        last = len(self._items) - 1
        self._swap(0, last)
        item = self._items.pop()
        item.index = -1
        if self._items:
            self._sift_down(0)
        return item

    def update(self, item: InstructionTotal, delta: int) -> None:
        """Add ``delta`` to an entry's total and restore heap order"""
        item.count += delta
        self._fix(item.index)

    def _fix(self, i: int) -> None:
        if not self._sift_down(i):
            self._sift_up(i)

    def _less(self, i: int, j: int) -> bool:
        return self._items[i].count > self._items[j].count

    def _swap(self, i: int, j: int) -> None:
        items = self._items
        items[i], items[j] = items[j], items[i]
        items[i].index = i
        items[j].index = j

    def _sift_up(self, i: int) -> None:
        while i > 0:
            parent = (i - 1) // 2
            if not self._less(i, parent):
                break
            self._swap(i, parent)
            i = parent

    def _sift_down(self, i0: int) -> bool:
        n = len(self._items)
        i = i0
        while True:
            left = 2 * i + 1
            if left >= n:
                break
            child = left
            right = left + 1
            if right < n and self._less(right, left):
                child = right
            if not self._less(child, i):
                break
            self._swap(i, child)
            i = child
        return i > i0


class InstructionRanking:
    """Accumulates per-instruction totals for one query"""

    def __init__(self):
        self._heap = InstructionHeap()
        self._seen: Dict[str, InstructionTotal] = {}

    def __len__(self) -> int:
        return len(self._seen)

    def add(self, instruction_name: str, count: int) -> None:
        item = self._seen.get(instruction_name)
        if item is None:
            item = InstructionTotal(instruction_name=instruction_name, count=count)
            self._seen[instruction_name] = item
            self._heap.push(item)
        else:
            self._heap.update(item, count)

    def top(self, n: int) -> Set[str]:
        """
        Names of the ``n`` instructions with the largest totals.

        Consumes the ranking; ties between equal totals are broken arbitrarily.
        """
        top: Set[str] = set()
        n = min(n, len(self._heap))
        for _ in range(max(n, 0)):
            top.add(self._heap.pop().instruction_name)
        return top


def select_top_n(pairs: Iterable[Tuple[str, int]], n: int) -> Set[str]:
    """
    Names of the top ``n`` instructions by summed count.

    Args:
        pairs: (instructionName, count) pairs, consumed once
        n: Number of instructions to keep; n <= 0 selects nothing
    """
    if n <= 0:
        return set()
    ranking = InstructionRanking()
    for instruction_name, count in pairs:
        ranking.add(instruction_name, count)
    return ranking.top(n)
