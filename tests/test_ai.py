import unittest
from dataclasses import replace

from game import (
    Board,
    GameState,
    Phase,
    PlayerState,
    TurnStep,
    advance_phase,
    best_placement,
    make_starter_tile,
    make_tile,
    pick,
    place,
    rank_placements,
)


def full_tile(tid, category):
    return make_tile(tid, "full", [((0, 1, 2, 3), category, "x")])


class TestGreedyAdvisor(unittest.TestCase):
    def setUp(self):
        board = Board.empty().with_tile((1, 1), make_starter_tile()).with_tile((0, 1), full_tile("b", "bakery"))
        player = PlayerState(player_id="p1", name="p1", board=board)
        self.state = GameState(players=(player,), deck=(), market=(full_tile("c", "candy"), full_tile("k", "bakery")))

    def test_given_matching_market_tile_when_ranking_then_it_comes_first(self):
        ranked = rank_placements(self.state)
        # Five playable slots for each of the two market tiles.
        self.assertEqual(len(ranked), 10)
        totals = [s.result.total for s in ranked]
        self.assertEqual(totals, sorted(totals, reverse=True))
        best = best_placement(self.state)
        self.assertEqual((best.market_index, best.position), (1, (0, 0)))
        self.assertEqual(best.result.total, 8)

    def test_given_no_market_or_ended_game_when_asking_then_nothing(self):
        self.assertIsNone(best_placement(replace(self.state, market=())))
        self.assertEqual(rank_placements(replace(self.state, phase=Phase.ENDED)), [])

    def test_given_score_shown_step_when_ranking_then_nothing_to_play(self):
        placed = advance_phase(advance_phase(self.state, pick(1)), place((0, 0)))
        self.assertEqual(placed.step, TurnStep.SCORE_SHOWN)
        self.assertEqual(rank_placements(placed), [])
        self.assertIsNone(best_placement(placed))


if __name__ == "__main__":
    unittest.main()
