from __future__ import annotations

import random
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .board import (
    LAYOUT_FOUR_QUARTERS,
    LAYOUT_FULL,
    LAYOUT_HALF_TWO_QUARTERS,
    LAYOUT_TWO_HALVES,
    Block,
    Tile,
)
from .rules import Ruleset, SWEETS

REGISTER_ITEM = "register"

# Two halves: top/bottom rows or left/right columns.
HALF_SPLITS: Tuple[Tuple[Tuple[int, ...], Tuple[int, ...]], ...] = (
    ((0, 1), (2, 3)),
    ((0, 2), (1, 3)),
)

# One half plus the two remaining cells as quarters.
HALF_QUARTER_SPLITS: Tuple[Tuple[Tuple[int, ...], Tuple[int, ...], Tuple[int, ...]], ...] = (
    ((0, 1), (2,), (3,)),
    ((2, 3), (0,), (1,)),
    ((0, 2), (1,), (3,)),
    ((1, 3), (0,), (2,)),
)

BlockSpec = Tuple[Sequence[int], Optional[str], str]


def make_tile(tile_id: str, layout: str, blocks: Iterable[BlockSpec], is_starter: bool = False) -> Tile:
    """Builds a tile from (cells, category, item) triples; category None makes a register block."""
    return Tile(
        id=tile_id,
        layout=layout,
        blocks=tuple(Block(tuple(cells), category, item) for cells, category, item in blocks),
        is_starter=is_starter,
    )


def make_starter_tile(tile_id: str = "starter") -> Tile:
    """The register tile every board starts with: one connector block over the whole tile."""
    return make_tile(tile_id, LAYOUT_FULL, [((0, 1, 2, 3), None, REGISTER_ITEM)], is_starter=True)


def _random_item(rng: random.Random, rules: Ruleset, category: str) -> str:
    return rng.choice(rules.items(category))


def _full_tile(rng: random.Random, rules: Ruleset, tile_id: str) -> Tile:
    cat = rng.choice(rules.category_names())
    return make_tile(tile_id, LAYOUT_FULL, [((0, 1, 2, 3), cat, _random_item(rng, rules, cat))])


def _two_halves_tile(rng: random.Random, rules: Ruleset, tile_id: str) -> Tile:
    first, second = rng.choice(HALF_SPLITS)
    # Two different categories, otherwise it is just a full tile.
    cat1, cat2 = rng.sample(rules.category_names(), 2)
    return make_tile(tile_id, LAYOUT_TWO_HALVES, [
        (first, cat1, _random_item(rng, rules, cat1)),
        (second, cat2, _random_item(rng, rules, cat2)),
    ])


def _half_two_quarters_tile(rng: random.Random, rules: Ruleset, tile_id: str) -> Tile:
    half, q1, q2 = rng.choice(HALF_QUARTER_SPLITS)
    cats = [rng.choice(rules.category_names()) for _ in range(3)]
    return make_tile(tile_id, LAYOUT_HALF_TWO_QUARTERS, [
        (cells, cat, _random_item(rng, rules, cat)) for cells, cat in zip((half, q1, q2), cats)
    ])


def _four_quarters_tile(rng: random.Random, rules: Ruleset, tile_id: str) -> Tile:
    blocks: List[BlockSpec] = []
    for index in range(4):
        cat = rng.choice(rules.category_names())
        blocks.append(((index,), cat, _random_item(rng, rules, cat)))
    return make_tile(tile_id, LAYOUT_FOUR_QUARTERS, blocks)


LAYOUT_WEIGHTS: Tuple[Tuple[Callable[[random.Random, Ruleset, str], Tile], int], ...] = (
    (_full_tile, 8),
    (_two_halves_tile, 20),
    (_half_two_quarters_tile, 20),
    (_four_quarters_tile, 16),
)


def random_tile(rng: random.Random, rules: Ruleset, tile_id: str) -> Tile:
    generators = [gen for gen, _ in LAYOUT_WEIGHTS]
    weights = [weight for _, weight in LAYOUT_WEIGHTS]
    generator = rng.choices(generators, weights=weights, k=1)[0]
    return generator(rng, rules, tile_id)


def generate_deck(rng: random.Random, rules: Ruleset = SWEETS, size: Optional[int] = None) -> List[Tile]:
    """Creates a shuffled deck of random tiles with ids t01, t02, ..."""
    count = rules.deck_size if size is None else int(size)
    deck = [random_tile(rng, rules, f"t{i + 1:02d}") for i in range(count)]
    rng.shuffle(deck)
    return deck


def deal(seed: Optional[int] = None, rules: Ruleset = SWEETS) -> Tuple[List[Tile], List[Tile]]:
    """Shuffles a fresh deck and splits off the face-up market. Returns (market, deck)."""
    rng = random.Random(seed)
    deck = generate_deck(rng, rules)
    return deck[:rules.market_size], deck[rules.market_size:]


def _scripted(rules: Ruleset, tile_id: str, layout: str, spec: Sequence[Tuple[Sequence[int], int, int]]) -> Tile:
    # spec entries are (cells, category index, item index) into the ruleset tables.
    names = rules.category_names()
    blocks: List[BlockSpec] = []
    for cells, cat_index, item_index in spec:
        cat = names[cat_index % len(names)]
        items = rules.items(cat)
        blocks.append((cells, cat, items[item_index % len(items)]))
    return make_tile(tile_id, layout, blocks)


def tutorial_market(rules: Ruleset = SWEETS) -> List[Tile]:
    """
    Scripted first market. Tile 0 is a full tile of the first category: placed next to the
    register it earns the 1-coin floor, and the following tiles extend that chain.
    """
    return [
        _scripted(rules, "tut1", LAYOUT_FULL, [((0, 1, 2, 3), 0, 2)]),
        _scripted(rules, "tut2", LAYOUT_TWO_HALVES, [((0, 1), 1, 2), ((2, 3), 3, 0)]),
        _scripted(rules, "tut3", LAYOUT_TWO_HALVES, [((0, 2), 0, 1), ((1, 3), 2, 0)]),
        _scripted(rules, "tut4", LAYOUT_FOUR_QUARTERS, [((0,), 0, 0), ((1,), 1, 1), ((2,), 2, 2), ((3,), 3, 2)]),
    ]


def tutorial_deck(rng: random.Random, rules: Ruleset = SWEETS) -> List[Tile]:
    """A few scripted combo-friendly tiles followed by a shuffled random remainder."""
    scripted = [
        _scripted(rules, "tut5", LAYOUT_TWO_HALVES, [((0, 1), 0, 3), ((2, 3), 1, 3)]),
        _scripted(rules, "tut6", LAYOUT_HALF_TWO_QUARTERS, [((0, 1), 3, 1), ((2,), 0, 0), ((3,), 2, 1)]),
        _scripted(rules, "tut7", LAYOUT_FULL, [((0, 1, 2, 3), 1, 0)]),
    ]
    remainder = rules.deck_size - rules.market_size - len(scripted)
    rest = [random_tile(rng, rules, f"t{i + 1:02d}") for i in range(max(0, remainder))]
    rng.shuffle(rest)
    return scripted + rest
