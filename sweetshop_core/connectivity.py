from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, FrozenSet, List, Set

from .board import Board, CellPos, category_at
from .rules import CELL_GRID_SIZE, CONNECTOR


@dataclass(frozen=True)
class Region:
    """Cells reached from a start cell: same-category cells plus the register cells passed through."""
    category: str
    matching: FrozenSet[CellPos]
    connectors: FrozenSet[CellPos]

    def __len__(self) -> int:
        return len(self.matching)


def cell_neighbors(cell: CellPos) -> List[CellPos]:
    """Gets the orthogonal neighbors of a cell that lie on the 8x8 grid."""
    r, c = cell
    out: List[CellPos] = []
    for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
        if 0 <= nr < CELL_GRID_SIZE and 0 <= nc < CELL_GRID_SIZE:
            out.append((nr, nc))
    return out


def find_region(board: Board, start: CellPos, category: str) -> Region:
    """
    Breadth-first search over the cell grid from start.
    A cell is entered when it holds the target category (a matching cell) or a register
    (a connector cell, traversed but not matched). Empty cells and other categories stop
    the search along that edge, so categories only meet through registers.
    """
    if category == CONNECTOR or category is None:
        raise ValueError("find_region needs a real category, not the register")

    matching: Set[CellPos] = set()
    connectors: Set[CellPos] = set()

    def enter(cell: CellPos) -> bool:
        cat = category_at(board, *cell)
        if cat == category:
            matching.add(cell)
            return True
        if cat == CONNECTOR:
            connectors.add(cell)
            return True
        return False

    if not enter(start):
        return Region(category, frozenset(), frozenset())

    queue: Deque[CellPos] = deque([start])
    while queue:
        current = queue.popleft()
        for nxt in cell_neighbors(current):
            if nxt in matching or nxt in connectors:
                continue
            if enter(nxt):
                queue.append(nxt)
    return Region(category, frozenset(matching), frozenset(connectors))
