from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Dict, FrozenSet, List, Sequence

from .board import Board
from .rules import Ruleset
from .state import AWARD_DIVERSITY, AWARD_MAJORITY, Award, GameState, PlayerState


def collected_items(board: Board, category: str) -> FrozenSet[str]:
    """Distinct item ids placed on the board under category."""
    return frozenset(
        block.item
        for _, tile in board.tiles()
        for block in tile.blocks
        if block.category == category
    )


def item_cell_counts(board: Board, category: str) -> Counter:
    """Cells covered by each item of category (a full-tile block counts 4)."""
    counts: Counter = Counter()
    for _, tile in board.tiles():
        for block in tile.blocks:
            if block.category == category:
                counts[block.item] += len(block.cells)
    return counts


def has_diversity(player: PlayerState, category: str, rules: Ruleset) -> bool:
    """True once the board holds every item the ruleset defines for category."""
    return len(collected_items(player.board, category)) >= rules.diversity_target(category)


def apply_diversity_awards(state: GameState, player_index: int) -> GameState:
    """Grants diversity awards to one player for each category nobody has taken yet."""
    player = state.player(player_index)
    taken = set(state.diversity_taken)
    granted: List[Award] = []
    for category in state.rules.category_names():
        if category in taken:
            continue
        if has_diversity(player, category, state.rules):
            granted.append(Award(AWARD_DIVERSITY, category, state.rules.award_value))
            taken.add(category)
    if not granted:
        return state
    next_state = state.with_player(player_index, player.with_awards(*granted))
    return replace(next_state, diversity_taken=tuple(sorted(taken)))


def evaluate_majority(players: Sequence[PlayerState], rules: Ruleset) -> Dict[str, List[Award]]:
    """
    End-of-game majority awards.
    For each category every player's best single-item cell count is compared; all players
    tied at the highest count receive the award. A highest count of 0 awards nobody.
    """
    result: Dict[str, List[Award]] = {player.player_id: [] for player in players}
    for category in rules.category_names():
        best: Dict[str, int] = {}
        for player in players:
            counts = item_cell_counts(player.board, category)
            best[player.player_id] = max(counts.values()) if counts else 0
        if not best:
            continue
        top = max(best.values())
        if top <= 0:
            continue
        for player_id, count in best.items():
            if count == top:
                result[player_id].append(Award(AWARD_MAJORITY, category, rules.award_value))
    return result


def apply_majority_awards(state: GameState) -> GameState:
    awards = evaluate_majority(state.players, state.rules)
    players = tuple(p.with_awards(*awards.get(p.player_id, [])) for p in state.players)
    return replace(state, players=players)
