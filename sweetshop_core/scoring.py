from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from .board import Board, CellPos, Coord, Tile, category_at, cell_to_slot, in_grid, tile_cells
from .connectivity import cell_neighbors, find_region
from .rules import CELL_COUNT, CONNECTOR, ScoringRule
from .state import PlayerState


@dataclass(frozen=True)
class RegionScore:
    category: str
    magnitude: int
    cells: int  # matching cells in the region
    tiles: int  # distinct tiles contributing matching cells


@dataclass(frozen=True)
class ScoreResult:
    total: int
    regions: Tuple[RegionScore, ...] = ()
    floor_applied: bool = False

    @property
    def is_multi_combo(self) -> bool:
        return len(self.categories()) >= 2

    def categories(self) -> Tuple[str, ...]:
        seen: List[str] = []
        for region in self.regions:
            if region.category not in seen:
                seen.append(region.category)
        return tuple(seen)


def touches_connector(board: Board, position: Coord) -> bool:
    """True when a cell of the slot at position borders a register cell already on the board."""
    own = set(tile_cells(position))
    for cell in own:
        for nxt in cell_neighbors(cell):
            if nxt not in own and category_at(board, *nxt) == CONNECTOR:
                return True
    return False


def score(board: Board, tile: Tile, position: Coord, rule: Optional[ScoringRule] = None) -> ScoreResult:
    """
    Scores placing tile at position without touching board.

    Every colored block of the tile is resolved into its region on a working copy that holds
    the tile. Cells already claimed by an earlier region of this placement are skipped, so a
    region joined by several blocks is counted once. A region scores only when it reaches at
    least one matching cell outside the new tile.
    """
    rule = rule or CELL_COUNT
    r, c = position
    if not in_grid(r, c):
        raise ValueError(f"position off the grid: {position}")
    if board.at(r, c) is not None:
        raise ValueError(f"slot {position} is already occupied")

    working = board.with_tile(position, tile)
    own_cells = tile_cells(position)
    own = set(own_cells)
    scored: Set[CellPos] = set()
    regions: List[RegionScore] = []

    for block in tile.blocks:
        if block.category is None:
            continue
        for index in block.cells:
            cell = own_cells[index]
            if cell in scored:
                continue
            region = find_region(working, cell, block.category)
            scored |= region.matching
            if not (region.matching - own):
                continue
            tiles = {cell_to_slot(*m)[0] for m in region.matching}
            magnitude = rule.magnitude(len(region.matching), len(tiles))
            if magnitude > 0:
                regions.append(RegionScore(block.category, magnitude, len(region.matching), len(tiles)))

    total = sum(region.magnitude for region in regions)
    if total == 0 and rule.connector_floor and touches_connector(board, position):
        return ScoreResult(total=1, regions=(), floor_applied=True)
    return ScoreResult(total=total, regions=tuple(regions))


def exchange(coins: int, tokens: int, threshold: int) -> Tuple[int, int]:
    """Converts each full threshold of coins into one token. Returns (coins, tokens)."""
    extra, coins = divmod(coins, threshold)
    return coins, tokens + extra


def earn(player: PlayerState, amount: int, threshold: int) -> PlayerState:
    coins, tokens = exchange(player.coins + int(amount), player.tokens, threshold)
    return player.with_purse(coins, tokens)


def final_score(player: PlayerState, threshold: int) -> int:
    """Coins plus token value plus every award's value."""
    return player.wealth(threshold) + sum(award.value for award in player.awards)
