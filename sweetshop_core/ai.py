from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .board import Coord
from .placement import sorted_positions
from .scoring import ScoreResult, score
from .state import GameState, Phase, TurnStep


@dataclass(frozen=True)
class Suggestion:
    market_index: int
    position: Coord
    result: ScoreResult


def rank_placements(state: GameState) -> List[Suggestion]:
    """Previews every market tile on every playable slot, best score first."""
    if state.phase is Phase.ENDED or state.step is TurnStep.SCORE_SHOWN:
        return []
    board = state.player().board
    positions = sorted_positions(board)
    out: List[Suggestion] = []
    for index, tile in enumerate(state.market):
        for pos in positions:
            out.append(Suggestion(index, pos, score(board, tile, pos, state.rules.scoring)))
    # Stable sort keeps market order, then row-major slot order, among equal totals.
    out.sort(key=lambda s: -s.result.total)
    return out


def best_placement(state: GameState) -> Optional[Suggestion]:
    """Greedy pick: the single placement with the highest immediate score."""
    ranked = rank_placements(state)
    return ranked[0] if ranked else None
