from __future__ import annotations

import argparse
import os
import statistics
import sys
import time
from typing import List

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from game import (  # type: ignore
    acknowledge,
    advance_phase,
    best_placement,
    final_score,
    get_ruleset,
    is_finished,
    new_game,
    pick,
    place,
)


def play_one(seed: int, players: int, ruleset: str, scoring: str | None) -> List[int]:
    """Plays a seeded match with the greedy advisor and checks the purse invariant each turn."""
    rules = get_ruleset(ruleset, scoring)
    state = new_game(player_count=players, seed=seed, rules=rules)
    earned = {p.player_id: 0 for p in state.players}
    while not is_finished(state):
        suggestion = best_placement(state)
        if suggestion is None:
            raise RuntimeError(f"seed {seed}: no placement on turn {state.turn_number}")
        mover = state.player().player_id
        state = advance_phase(state, pick(suggestion.market_index))
        state = advance_phase(state, place(suggestion.position))
        earned[mover] += state.last_score.total
        for p in state.players:
            if p.wealth(rules.coin_threshold) != earned[p.player_id]:
                raise AssertionError(f"seed {seed}: purse of {p.player_id} drifted from earned coins")
        state = advance_phase(state, acknowledge())
    return [final_score(p, rules.coin_threshold) for p in state.players]


def main() -> None:
    ap = argparse.ArgumentParser(description="Autoplay seeded matches with the greedy advisor")
    ap.add_argument("--games", type=int, default=100)
    ap.add_argument("--start-seed", type=int, default=0)
    ap.add_argument("--players", type=int, default=1)
    ap.add_argument("--ruleset", default=os.getenv("SWEETSHOP_RULESET", "sweets"))
    ap.add_argument("--scoring", default=os.getenv("SWEETSHOP_SCORING"))
    args = ap.parse_args()

    t0 = time.time()
    finals: List[int] = []
    for seed in range(args.start_seed, args.start_seed + args.games):
        finals.extend(play_one(seed, args.players, args.ruleset, args.scoring))
    dt = time.time() - t0
    print(f"games={args.games} players={args.players} ruleset={args.ruleset} elapsed={dt:.2f}s")
    print(f"final score: min={min(finals)} max={max(finals)} mean={statistics.mean(finals):.1f}")


if __name__ == "__main__":
    main()
