from __future__ import annotations

from typing import FrozenSet, List

from .board import Board, Coord, in_grid, tile_neighbors


def is_valid_position(board: Board, pos: Coord) -> bool:
    """A slot is playable when it is on the grid, empty, and next to an occupied slot."""
    r, c = pos
    if not in_grid(r, c):
        return False
    if board.at(r, c) is not None:
        return False
    if not board.occupied():
        # Degraded path: nothing placed yet (setup normally pre-places the starter).
        return True
    return any(board.at(*n) is not None for n in tile_neighbors(pos))


def valid_positions(board: Board) -> FrozenSet[Coord]:
    """All playable slots. Uses the frontier the board maintains across placements."""
    return board.frontier


def sorted_positions(board: Board) -> List[Coord]:
    return sorted(valid_positions(board))
