from __future__ import annotations

import os
import random
from dataclasses import replace
from typing import List, Optional, Sequence

from .actions import ACTION_ACKNOWLEDGE, ACTION_PICK, ACTION_PLACE, GameAction, acknowledge, pick, place
from .awards import apply_diversity_awards, apply_majority_awards
from .board import Board, in_grid
from .deal import generate_deck, make_starter_tile, tutorial_deck, tutorial_market
from .placement import sorted_positions, valid_positions
from .rules import STARTER_POS, Ruleset, SWEETS
from .scoring import earn, score
from .state import GameState, Phase, PlayerState, TurnStep


def _debug(msg: str) -> None:
    if os.getenv('SWEETSHOP_DEBUG', '0').lower() in ('1', 'true', 'yes', 'on'):
        print(f"[engine] {msg}")


def new_game(
    player_count: int = 1,
    seed: Optional[int] = None,
    rules: Ruleset = SWEETS,
    tutorial: bool = False,
    names: Optional[Sequence[str]] = None,
) -> GameState:
    """Deals a new match: every player gets a board holding only the register at STARTER_POS."""
    if player_count < 1:
        raise ValueError('player_count must be at least 1')
    rng = random.Random(seed)
    if tutorial:
        market = tutorial_market(rules)
        deck = tutorial_deck(rng, rules)
    else:
        shuffled = generate_deck(rng, rules)
        market, deck = shuffled[:rules.market_size], shuffled[rules.market_size:]
    players = []
    for i in range(player_count):
        board = Board.empty().with_tile(STARTER_POS, make_starter_tile(f"starter{i + 1}"))
        name = names[i] if names and i < len(names) else f"Player {i + 1}"
        players.append(PlayerState(player_id=f"p{i + 1}", name=name, board=board))
    return GameState(players=tuple(players), deck=tuple(deck), market=tuple(market), rules=rules)


def is_finished(state: GameState) -> bool:
    return state.phase is Phase.ENDED


def _game_should_end(state: GameState) -> bool:
    return state.player().board.is_full() or state.supply_exhausted()


def _pick(state: GameState, index: Optional[int]) -> GameState:
    if state.step not in (TurnStep.PICK_TILE, TurnStep.PLACE_TILE):
        return state
    if index is None or not (0 <= index < len(state.market)):
        _debug(f"rejected pick of market index {index}")
        return state
    return replace(state, selected=index, step=TurnStep.PLACE_TILE)


def _place(state: GameState, position) -> GameState:
    if state.step is not TurnStep.PLACE_TILE:
        return state
    tile = state.selected_tile()
    if tile is None or position is None:
        return state
    r, c = position
    if not in_grid(r, c):
        # A caller bug, not a player choice.
        raise ValueError(f"position off the grid: {position}")
    player = state.player()
    if (r, c) not in valid_positions(player.board):
        _debug(f"rejected placement at {(r, c)} for {player.player_id}")
        return state

    result = score(player.board, tile, (r, c), state.rules.scoring)
    player = earn(player.with_board(player.board.with_tile((r, c), tile)), result.total, state.rules.coin_threshold)

    market = list(state.market)
    market.pop(state.selected)
    deck = list(state.deck)
    if deck:
        market.append(deck.pop(0))

    next_state = replace(
        state.with_player(state.current_player, player),
        market=tuple(market),
        deck=tuple(deck),
        selected=None,
        last_score=result,
        step=TurnStep.SCORE_SHOWN,
        turn_number=state.turn_number + 1,
    )
    _debug(f"{player.player_id} placed {tile.id} at {(r, c)} for {result.total}")
    return apply_diversity_awards(next_state, state.current_player)


def _acknowledge(state: GameState) -> GameState:
    if state.step is not TurnStep.SCORE_SHOWN:
        return state
    if _game_should_end(state):
        _debug(f"game over after turn {state.turn_number}")
        ended = replace(state, phase=Phase.ENDED, selected=None)
        return apply_majority_awards(ended)
    next_player = (state.current_player + 1) % len(state.players)
    return replace(state, current_player=next_player, step=TurnStep.PICK_TILE, last_score=None)


def advance_phase(state: GameState, action: GameAction) -> GameState:
    """
    Applies one action and returns the resulting state.
    Rejected actions (wrong step, missing market tile, illegal slot, finished game) return the
    same state object, so callers can detect a rejection with `is`.
    """
    if state.phase is Phase.ENDED:
        return state
    if action.kind == ACTION_PICK:
        return _pick(state, action.tile_index)
    if action.kind == ACTION_PLACE:
        return _place(state, action.position)
    if action.kind == ACTION_ACKNOWLEDGE:
        return _acknowledge(state)
    return state


def legal_actions(state: GameState) -> List[GameAction]:
    """Actions advance_phase would accept in this state."""
    if state.phase is Phase.ENDED:
        return []
    if state.step is TurnStep.SCORE_SHOWN:
        return [acknowledge()]
    actions: List[GameAction] = [pick(i) for i in range(len(state.market)) if i != state.selected]
    if state.step is TurnStep.PLACE_TILE:
        actions.extend(place(pos) for pos in sorted_positions(state.player().board))
    return actions
