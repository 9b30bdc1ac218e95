from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Tuple

from .rules import CELLS_PER_TILE_SIDE, CELL_GRID_SIZE, CONNECTOR, GRID_SIZE

Coord = Tuple[int, int]    # tile-grid position (row, col), 0..3
CellPos = Tuple[int, int]  # cell-grid position (row, col), 0..7

LAYOUT_FULL = "full"
LAYOUT_TWO_HALVES = "two_halves"
LAYOUT_HALF_TWO_QUARTERS = "half_two_quarters"
LAYOUT_FOUR_QUARTERS = "four_quarters"
LAYOUTS = (LAYOUT_FULL, LAYOUT_TWO_HALVES, LAYOUT_HALF_TWO_QUARTERS, LAYOUT_FOUR_QUARTERS)

# Block sizes each layout is made of, largest first.
LAYOUT_SHAPES = {
    LAYOUT_FULL: (4,),
    LAYOUT_TWO_HALVES: (2, 2),
    LAYOUT_HALF_TWO_QUARTERS: (2, 1, 1),
    LAYOUT_FOUR_QUARTERS: (1, 1, 1, 1),
}

# A half is a top/bottom row or a left/right column, never a diagonal.
HALF_PAIRS = frozenset({(0, 1), (2, 3), (0, 2), (1, 3)})

ALL_CELL_INDICES = frozenset(range(CELLS_PER_TILE_SIDE * CELLS_PER_TILE_SIDE))


@dataclass(frozen=True)
class Block:
    """A colored part of a tile: 1, 2 or 4 cell indices, a category (None = register) and an item."""
    cells: Tuple[int, ...]
    category: Optional[str]
    item: str

    @property
    def is_connector(self) -> bool:
        return self.category is None


@dataclass(frozen=True)
class Tile:
    """A placeable 2x2 tile; its blocks partition the four cell indices exactly."""
    id: str
    layout: str
    blocks: Tuple[Block, ...]
    is_starter: bool = False

    def __post_init__(self) -> None:
        if self.layout not in LAYOUTS:
            raise ValueError(f"unknown tile layout: {self.layout}")
        seen: List[int] = []
        for block in self.blocks:
            if len(block.cells) not in (1, 2, 4):
                raise ValueError(f"tile {self.id}: block must cover 1, 2 or 4 cells")
            seen.extend(block.cells)
        if len(seen) != len(set(seen)) or set(seen) != ALL_CELL_INDICES:
            raise ValueError(f"tile {self.id}: blocks must partition cells 0..3")
        sizes = tuple(sorted((len(b.cells) for b in self.blocks), reverse=True))
        if sizes != LAYOUT_SHAPES[self.layout]:
            raise ValueError(f"tile {self.id}: blocks do not match layout {self.layout}")
        for block in self.blocks:
            if len(block.cells) == 2 and tuple(sorted(block.cells)) not in HALF_PAIRS:
                raise ValueError(f"tile {self.id}: half block must be a row or a column, got {block.cells}")

    def block_at(self, cell_index: int) -> Optional[Block]:
        for block in self.blocks:
            if cell_index in block.cells:
                return block
        return None


def in_grid(r: int, c: int) -> bool:
    return 0 <= r < GRID_SIZE and 0 <= c < GRID_SIZE


def tile_neighbors(pos: Coord) -> List[Coord]:
    """Gets the in-grid orthogonal neighbors of a tile slot."""
    r, c = pos
    out: List[Coord] = []
    for nr, nc in ((r - 1, c), (r + 1, c), (r, c - 1), (r, c + 1)):
        if in_grid(nr, nc):
            out.append((nr, nc))
    return out


def tile_cells(pos: Coord) -> Tuple[CellPos, ...]:
    """The four cell positions covered by the tile slot at pos, in cell-index order."""
    r, c = pos
    base_r, base_c = r * CELLS_PER_TILE_SIDE, c * CELLS_PER_TILE_SIDE
    return tuple(
        (base_r + i // CELLS_PER_TILE_SIDE, base_c + i % CELLS_PER_TILE_SIDE)
        for i in range(CELLS_PER_TILE_SIDE * CELLS_PER_TILE_SIDE)
    )


def cell_to_slot(cell_row: int, cell_col: int) -> Tuple[Coord, int]:
    """Maps a cell position to its tile slot and the cell index within that tile."""
    slot = (cell_row // CELLS_PER_TILE_SIDE, cell_col // CELLS_PER_TILE_SIDE)
    index = (cell_row % CELLS_PER_TILE_SIDE) * CELLS_PER_TILE_SIDE + (cell_col % CELLS_PER_TILE_SIDE)
    return slot, index


def _scan_frontier(slots: Tuple[Optional[Tile], ...]) -> FrozenSet[Coord]:
    occupied = [divmod(i, GRID_SIZE) for i, t in enumerate(slots) if t is not None]
    if not occupied:
        return frozenset(divmod(i, GRID_SIZE) for i in range(len(slots)))
    out = set()
    for pos in occupied:
        for n in tile_neighbors(pos):
            if slots[n[0] * GRID_SIZE + n[1]] is None:
                out.add(n)
    return frozenset(out)


@dataclass(frozen=True)
class Board:
    """A 4x4 grid of optional tiles. Placement produces a new Board; the old one is untouched."""
    slots: Tuple[Optional[Tile], ...]
    frontier: FrozenSet[Coord] = field(default=None, compare=False, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if len(self.slots) != GRID_SIZE * GRID_SIZE:
            raise ValueError(f"board needs {GRID_SIZE * GRID_SIZE} slots, got {len(self.slots)}")
        if self.frontier is None:
            object.__setattr__(self, "frontier", _scan_frontier(self.slots))

    @classmethod
    def empty(cls) -> 'Board':
        return cls(slots=(None,) * (GRID_SIZE * GRID_SIZE))

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Optional[Tile]]]) -> 'Board':
        flat: List[Optional[Tile]] = []
        for row in rows:
            flat.extend(row)
        return cls(slots=tuple(flat))

    def index(self, r: int, c: int) -> int:
        """Calculates the 1D slot index for a given row and column."""
        return r * GRID_SIZE + c

    def at(self, r: int, c: int) -> Optional[Tile]:
        """Gets the tile at a slot; None when empty or off the grid."""
        if not in_grid(r, c):
            return None
        return self.slots[self.index(r, c)]

    def coords(self) -> Iterable[Coord]:
        for r in range(GRID_SIZE):
            for c in range(GRID_SIZE):
                yield (r, c)

    def occupied(self) -> List[Coord]:
        return [pos for pos in self.coords() if self.at(*pos) is not None]

    def is_full(self) -> bool:
        return all(t is not None for t in self.slots)

    def tiles(self) -> Iterable[Tuple[Coord, Tile]]:
        for pos in self.coords():
            tile = self.at(*pos)
            if tile is not None:
                yield pos, tile

    def with_tile(self, pos: Coord, tile: Tile) -> 'Board':
        """Returns a new board with tile at pos, sharing every other slot."""
        r, c = pos
        if not in_grid(r, c):
            raise ValueError(f"position off the grid: {pos}")
        idx = self.index(r, c)
        slots = self.slots[:idx] + (tile,) + self.slots[idx + 1:]
        if self.slots[idx] is not None or all(t is None for t in self.slots):
            # Replacing a tile or leaving the degraded empty-board state: rescan.
            return Board(slots=slots)
        frontier = set(self.frontier)
        frontier.discard(pos)
        for n in tile_neighbors(pos):
            if slots[self.index(*n)] is None:
                frontier.add(n)
        return Board(slots=slots, frontier=frozenset(frontier))

    def pretty(self) -> str:
        """Renders the 8x8 cell grid: category initial, '#' for register cells, '.' when empty."""
        lines: List[str] = []
        for cr in range(CELL_GRID_SIZE):
            row: List[str] = []
            for cc in range(CELL_GRID_SIZE):
                cat = category_at(self, cr, cc)
                if cat is None:
                    row.append(".")
                elif cat == CONNECTOR:
                    row.append("#")
                else:
                    row.append(cat[0].upper())
                if cc % CELLS_PER_TILE_SIDE == 1 and cc != CELL_GRID_SIZE - 1:
                    row.append("|")
            lines.append(" ".join(row))
            if cr % CELLS_PER_TILE_SIDE == 1 and cr != CELL_GRID_SIZE - 1:
                lines.append("-" * len(lines[-1]))
        return "\n".join(lines)


def block_at_cell(board: Board, cell_row: int, cell_col: int) -> Optional[Block]:
    if not (0 <= cell_row < CELL_GRID_SIZE and 0 <= cell_col < CELL_GRID_SIZE):
        return None
    (r, c), index = cell_to_slot(cell_row, cell_col)
    tile = board.at(r, c)
    if tile is None:
        return None
    return tile.block_at(index)


def category_at(board: Board, cell_row: int, cell_col: int) -> Optional[str]:
    """
    Category of the cell at (cell_row, cell_col).
    Returns the block category, CONNECTOR for register blocks, or None when no tile covers
    the cell (including coordinates off the board).
    """
    block = block_at_cell(board, cell_row, cell_col)
    if block is None:
        return None
    if block.category is None:
        return CONNECTOR
    return block.category
