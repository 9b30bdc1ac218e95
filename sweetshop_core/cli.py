from __future__ import annotations

import argparse
import os
from typing import List, Optional

from .actions import acknowledge, pick, place
from .ai import best_placement
from .board import Tile
from .engine import advance_phase, is_finished, new_game
from .placement import sorted_positions
from .rules import RULESETS, SCORING_RULES, get_ruleset
from .scoring import ScoreResult, final_score
from .state import GameState


def describe_tile(tile: Tile) -> str:
    parts = []
    for block in tile.blocks:
        cells = ",".join(str(c) for c in block.cells)
        parts.append(f"{block.category or 'register'}:{block.item}[{cells}]")
    return f"{tile.id} ({tile.layout}) " + " ".join(parts)


def describe_score(result: ScoreResult) -> str:
    if result.floor_applied:
        return "+1 (reached the register)"
    if not result.regions:
        return "+0"
    lines = [f"+{result.total}" + (" combo!" if result.is_multi_combo else "")]
    for region in result.regions:
        lines.append(f"  {region.category}: {region.magnitude} ({region.cells} cells, {region.tiles} tiles)")
    return "\n".join(lines)


def print_state(state: GameState) -> None:
    player = state.player()
    print(f"\n{player.name}: {player.coins} coins, {player.tokens} tokens, deck {len(state.deck)}")
    print(player.board.pretty())
    print('Market:')
    for i, tile in enumerate(state.market):
        print(f"  [{i}] {describe_tile(tile)}")


def _parse_ints(text: str) -> Optional[List[int]]:
    try:
        return [int(t) for t in text.replace(',', ' ').split()]
    except ValueError:
        return None


def play_turn_interactive(state: GameState) -> GameState:
    print_state(state)
    while True:
        text = input('Pick a market tile and a slot as "i r c": ').strip()
        parts = _parse_ints(text)
        if not parts or len(parts) != 3:
            print('Could not parse. Try again.')
            continue
        index, r, c = parts
        picked = advance_phase(state, pick(index))
        if picked is state:
            print('No such market tile. Try again.')
            continue
        try:
            placed = advance_phase(picked, place((r, c)))
        except ValueError:
            placed = picked
        if placed is picked:
            print('Illegal slot. Legal slots:', sorted_positions(state.player().board))
            continue
        return placed


def play_turn_auto(state: GameState) -> GameState:
    suggestion = best_placement(state)
    if suggestion is None:
        raise RuntimeError('No legal placement available')
    state = advance_phase(state, pick(suggestion.market_index))
    return advance_phase(state, place(suggestion.position))


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description='Sweetshop tile-placement puzzle')
    parser.add_argument('--players', type=int, default=1, help='Number of hot-seat players')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deck')
    parser.add_argument('--ruleset', choices=sorted(RULESETS), default=os.getenv('SWEETSHOP_RULESET', 'sweets'))
    parser.add_argument('--scoring', choices=sorted(SCORING_RULES), default=os.getenv('SWEETSHOP_SCORING'))
    parser.add_argument('--tutorial', action='store_true', help='Start from the scripted tutorial market')
    parser.add_argument('--auto', action='store_true', help='Let the greedy advisor play every turn')
    args = parser.parse_args(argv)

    rules = get_ruleset(args.ruleset, args.scoring)
    state = new_game(player_count=args.players, seed=args.seed, rules=rules, tutorial=args.tutorial)

    while not is_finished(state):
        mover = state.player()
        state = play_turn_auto(state) if args.auto else play_turn_interactive(state)
        print(f"{mover.name} placed a tile: {describe_score(state.last_score)}")
        state = advance_phase(state, acknowledge())

    print('\nGame over.')
    for player in state.players:
        print(player.board.pretty())
        awards = ", ".join(f"{a.kind}:{a.category}" for a in player.awards) or "none"
        print(f"{player.name}: {final_score(player, rules.coin_threshold)} points (awards: {awards})\n")


if __name__ == '__main__':
    main()
