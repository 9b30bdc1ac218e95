from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Protocol, Tuple

# Sentinel category reported for connector (register) cells.
CONNECTOR = "connector"

GRID_SIZE = 4           # tiles per side
CELLS_PER_TILE_SIDE = 2
CELL_GRID_SIZE = GRID_SIZE * CELLS_PER_TILE_SIDE
STARTER_POS = (1, 1)


class ScoringRule(Protocol):
    """Turns a resolved region into a score magnitude."""
    name: str
    connector_floor: bool

    def magnitude(self, cell_count: int, tile_count: int) -> int:
        ...


@dataclass(frozen=True)
class CellCountRule:
    """Region scores one coin per matching cell; touching the register alone scores 1."""
    name: str = "cells"
    connector_floor: bool = True

    def magnitude(self, cell_count: int, tile_count: int) -> int:
        return cell_count


@dataclass(frozen=True)
class TileCountRule:
    """Region scores per distinct tile, and only once it spans two or more tiles."""
    multiplier: int = 2
    name: str = "tiles"
    connector_floor: bool = False

    def magnitude(self, cell_count: int, tile_count: int) -> int:
        if tile_count < 2:
            return 0
        return tile_count * self.multiplier


CELL_COUNT = CellCountRule()
TILE_COUNT = TileCountRule()

SCORING_RULES: Dict[str, ScoringRule] = {
    CELL_COUNT.name: CELL_COUNT,
    TILE_COUNT.name: TILE_COUNT,
}


@dataclass(frozen=True)
class Ruleset:
    """Game-rule data: categories with their collectible items plus numeric constants."""
    name: str
    categories: Tuple[Tuple[str, Tuple[str, ...]], ...]
    coin_threshold: int = 10
    award_value: int = 5
    market_size: int = 4
    deck_size: int = 64
    scoring: ScoringRule = field(default=CELL_COUNT)

    def __post_init__(self) -> None:
        names = [cat for cat, _ in self.categories]
        if CONNECTOR in names:
            raise ValueError(f"'{CONNECTOR}' is reserved for register cells")
        if len(set(names)) != len(names):
            raise ValueError("duplicate category names")
        if self.coin_threshold <= 0:
            raise ValueError("coin_threshold must be positive")

    def category_names(self) -> Tuple[str, ...]:
        return tuple(cat for cat, _ in self.categories)

    def items(self, category: str) -> Tuple[str, ...]:
        for cat, items in self.categories:
            if cat == category:
                return items
        raise ValueError(f"unknown category: {category}")

    def diversity_target(self, category: str) -> int:
        """Number of distinct items needed for the category's diversity award."""
        return len(self.items(category))

    def with_scoring(self, rule: ScoringRule) -> 'Ruleset':
        return replace(self, scoring=rule)


SWEETS = Ruleset(
    name="sweets",
    categories=(
        ("bakery", ("waffle", "croissant", "donut", "pancake")),
        ("ice_cream", ("shaved_ice", "ice_cream", "soft_serve", "dango")),
        ("pies", ("cupcake", "pie", "cake", "birthday_cake")),
        ("candy", ("lollipop", "candy", "chocolate", "popcorn")),
    ),
)

TOYS = Ruleset(
    name="toys",
    categories=(
        ("plush", ("puppy", "bunny", "cat", "unicorn", "bear")),
        ("dolls", ("robot", "princess", "astronaut", "clown", "knight")),
        ("vehicles", ("car", "train", "plane", "boat", "rocket")),
        ("sports", ("ball", "racket", "skates", "kite", "frisbee")),
    ),
)

RULESETS: Dict[str, Ruleset] = {SWEETS.name: SWEETS, TOYS.name: TOYS}


def get_ruleset(name: str, scoring: Optional[str] = None) -> Ruleset:
    """Looks up a built-in ruleset, optionally swapping its scoring rule."""
    try:
        rules = RULESETS[name]
    except KeyError:
        raise ValueError(f"unknown ruleset: {name}") from None
    if scoring is None or scoring == rules.scoring.name:
        return rules
    try:
        rule = SCORING_RULES[scoring]
    except KeyError:
        raise ValueError(f"unknown scoring rule: {scoring}") from None
    return rules.with_scoring(rule)
