from __future__ import annotations

# Facade module that re-exports the Sweetshop core API.
# The Flask app, the tools and the tests import from here.
# Single-responsibility modules live under sweetshop_core/*.

from sweetshop_core.rules import (  # noqa: F401
    CELL_COUNT,
    CONNECTOR,
    GRID_SIZE,
    RULESETS,
    STARTER_POS,
    SWEETS,
    TILE_COUNT,
    TOYS,
    CellCountRule,
    Ruleset,
    TileCountRule,
    get_ruleset,
)
from sweetshop_core.board import (  # noqa: F401
    Block,
    Board,
    CellPos,
    Coord,
    Tile,
    category_at,
    tile_cells,
)
from sweetshop_core.placement import is_valid_position, sorted_positions, valid_positions  # noqa: F401
from sweetshop_core.connectivity import Region, cell_neighbors, find_region  # noqa: F401
from sweetshop_core.scoring import (  # noqa: F401
    RegionScore,
    ScoreResult,
    earn,
    exchange,
    final_score,
    score,
)
from sweetshop_core.awards import (  # noqa: F401
    apply_diversity_awards,
    collected_items,
    evaluate_majority,
    has_diversity,
    item_cell_counts,
)
from sweetshop_core.state import (  # noqa: F401
    AWARD_DIVERSITY,
    AWARD_MAJORITY,
    Award,
    GameState,
    Phase,
    PlayerState,
    TurnStep,
)
from sweetshop_core.actions import GameAction, acknowledge, pick, place  # noqa: F401
from sweetshop_core.engine import advance_phase, is_finished, legal_actions, new_game  # noqa: F401
from sweetshop_core.deal import (  # noqa: F401
    deal,
    generate_deck,
    make_starter_tile,
    make_tile,
    tutorial_deck,
    tutorial_market,
)
from sweetshop_core.ai import Suggestion, best_placement, rank_placements  # noqa: F401


def main() -> None:
    # CLI driver delegated to sweetshop_core.cli
    from sweetshop_core.cli import main as _main
    _main()


if __name__ == '__main__':
    main()
