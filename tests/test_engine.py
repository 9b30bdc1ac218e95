import unittest

from game import (
    AWARD_DIVERSITY,
    AWARD_MAJORITY,
    Board,
    GameState,
    Phase,
    PlayerState,
    TurnStep,
    acknowledge,
    advance_phase,
    best_placement,
    is_finished,
    legal_actions,
    make_starter_tile,
    make_tile,
    new_game,
    pick,
    place,
)


def full_tile(tid, category, item="waffle"):
    return make_tile(tid, "full", [((0, 1, 2, 3), category, item)])


def single_player_state(board, market, deck=()):
    player = PlayerState(player_id="p1", name="Player 1", board=board)
    return GameState(players=(player,), deck=tuple(deck), market=tuple(market))


class TestNewGame(unittest.TestCase):
    def test_given_seed_when_new_game_then_register_only_and_market_dealt(self):
        s = new_game(seed=7)
        self.assertEqual(len(s.players), 1)
        self.assertEqual(len(s.market), 4)
        self.assertEqual(len(s.deck), 60)
        self.assertEqual(s.phase, Phase.PLAYING)
        self.assertEqual(s.step, TurnStep.PICK_TILE)
        board = s.player().board
        self.assertEqual(board.occupied(), [(1, 1)])
        self.assertTrue(board.at(1, 1).is_starter)
        self.assertEqual((s.player().coins, s.player().tokens), (0, 0))

    def test_given_three_players_when_new_game_then_each_gets_own_board(self):
        s = new_game(player_count=3, seed=1)
        self.assertEqual([p.player_id for p in s.players], ["p1", "p2", "p3"])
        self.assertEqual([p.name for p in s.players], ["Player 1", "Player 2", "Player 3"])
        self.assertEqual(len({p.board.at(1, 1).id for p in s.players}), 3)

    def test_given_zero_players_when_new_game_then_value_error(self):
        with self.assertRaises(ValueError):
            new_game(player_count=0)


class TestTurnFlow(unittest.TestCase):
    def setUp(self):
        self.s = new_game(seed=7)

    def test_given_pick_step_when_place_or_ack_then_same_state(self):
        self.assertIs(advance_phase(self.s, place((0, 1))), self.s)
        self.assertIs(advance_phase(self.s, acknowledge()), self.s)

    def test_given_bad_market_index_when_pick_then_same_state(self):
        self.assertIs(advance_phase(self.s, pick(4)), self.s)
        self.assertIs(advance_phase(self.s, pick(-1)), self.s)

    def test_given_pick_when_applied_then_tile_held_and_market_unchanged(self):
        s1 = advance_phase(self.s, pick(1))
        self.assertEqual(s1.step, TurnStep.PLACE_TILE)
        self.assertEqual(s1.selected, 1)
        self.assertEqual(s1.market, self.s.market)
        s2 = advance_phase(s1, pick(2))
        self.assertEqual(s2.selected, 2)
        self.assertEqual(s2.step, TurnStep.PLACE_TILE)

    def test_given_held_tile_when_place_on_illegal_slot_then_same_state(self):
        s1 = advance_phase(self.s, pick(0))
        self.assertIs(advance_phase(s1, place((3, 3))), s1)
        self.assertIs(advance_phase(s1, place((1, 1))), s1)
        self.assertIs(advance_phase(s1, acknowledge()), s1)

    def test_given_held_tile_when_place_off_grid_then_value_error(self):
        s1 = advance_phase(self.s, pick(0))
        with self.assertRaises(ValueError):
            advance_phase(s1, place((9, 9)))

    def test_given_legal_place_when_applied_then_scored_and_market_refilled(self):
        s1 = advance_phase(self.s, pick(1))
        s2 = advance_phase(s1, place((0, 1)))
        tile = self.s.market[1]
        self.assertEqual(s2.step, TurnStep.SCORE_SHOWN)
        self.assertEqual(s2.player().board.at(0, 1), tile)
        self.assertEqual(len(s2.market), 4)
        self.assertNotIn(tile, s2.market)
        self.assertEqual(s2.market[-1], self.s.deck[0])
        self.assertEqual(len(s2.deck), 59)
        self.assertIsNone(s2.selected)
        self.assertEqual(s2.turn_number, 1)
        # Only the register is adjacent: the floor pays one coin.
        self.assertEqual(s2.last_score.total, 1)
        self.assertTrue(s2.last_score.floor_applied)
        self.assertEqual(s2.player().coins, 1)
        # The input state is untouched.
        self.assertEqual(self.s.player().board.occupied(), [(1, 1)])

    def test_given_score_shown_when_ack_then_next_turn_starts(self):
        s = advance_phase(advance_phase(self.s, pick(0)), place((1, 0)))
        self.assertIs(advance_phase(s, pick(0)), s)
        s = advance_phase(s, acknowledge())
        self.assertEqual(s.step, TurnStep.PICK_TILE)
        self.assertEqual(s.current_player, 0)
        self.assertIsNone(s.last_score)
        self.assertEqual(s.phase, Phase.PLAYING)


class TestGameEnd(unittest.TestCase):
    def test_given_last_tile_in_supply_when_placed_and_ack_then_ended(self):
        board = Board.empty().with_tile((1, 1), make_starter_tile())
        s = single_player_state(board, [full_tile("t1", "candy", "popcorn")])
        s = advance_phase(advance_phase(s, pick(0)), place((1, 2)))
        self.assertEqual(s.market, ())
        self.assertTrue(s.supply_exhausted())
        self.assertFalse(is_finished(s))
        s = advance_phase(s, acknowledge())
        self.assertTrue(is_finished(s))
        self.assertTrue(s.player().has_award(AWARD_MAJORITY, "candy"))

    def test_given_ended_game_when_any_action_then_no_op(self):
        board = Board.empty().with_tile((1, 1), make_starter_tile())
        s = single_player_state(board, [full_tile("t1", "candy")])
        s = advance_phase(advance_phase(advance_phase(s, pick(0)), place((1, 2))), acknowledge())
        self.assertEqual(s.phase, Phase.ENDED)
        for action in (pick(0), place((0, 0)), acknowledge()):
            self.assertIs(advance_phase(s, action), s)
        self.assertEqual(legal_actions(s), [])

    def test_given_one_empty_slot_when_filled_and_ack_then_ended(self):
        board = Board.empty().with_tile((1, 1), make_starter_tile())
        n = 0
        for r in range(4):
            for c in range(4):
                if (r, c) in ((1, 1), (3, 3)):
                    continue
                n += 1
                board = board.with_tile((r, c), full_tile(f"b{n}", "bakery"))
        market = [full_tile("x1", "bakery"), full_tile("x2", "pies"), full_tile("x3", "candy")]
        s = single_player_state(board, market, deck=[full_tile("x4", "candy")])
        s = advance_phase(advance_phase(s, pick(0)), place((3, 3)))
        self.assertTrue(s.player().board.is_full())
        # Fourteen bakery tiles plus the new one form a single region.
        self.assertEqual(s.last_score.total, 60)
        self.assertEqual((s.player().coins, s.player().tokens), (0, 6))
        s = advance_phase(s, acknowledge())
        self.assertEqual(s.phase, Phase.ENDED)
        self.assertEqual(len(s.deck), 0)
        self.assertTrue(s.player().has_award(AWARD_MAJORITY, "bakery"))
        self.assertFalse(s.player().has_award(AWARD_MAJORITY, "pies"))


class TestMultiplayer(unittest.TestCase):
    def test_given_two_players_when_turns_ack_then_rotation_and_separate_boards(self):
        s = new_game(player_count=2, seed=3)
        s = advance_phase(advance_phase(s, pick(0)), place((0, 1)))
        self.assertEqual(s.current_player, 0)
        s = advance_phase(s, acknowledge())
        self.assertEqual(s.current_player, 1)
        self.assertEqual(s.player().board.occupied(), [(1, 1)])
        self.assertEqual(s.player(0).board.occupied(), [(0, 1), (1, 1)])
        s = advance_phase(advance_phase(s, pick(3)), place((2, 1)))
        self.assertEqual(s.player().board.occupied(), [(1, 1), (2, 1)])
        s = advance_phase(s, acknowledge())
        self.assertEqual(s.current_player, 0)
        self.assertEqual(s.turn_number, 2)


class TestLegalActions(unittest.TestCase):
    def test_given_each_step_when_listing_then_matches_accepted_actions(self):
        s = new_game(seed=5)
        actions = legal_actions(s)
        self.assertEqual(actions, [pick(i) for i in range(4)])
        s = advance_phase(s, pick(0))
        actions = legal_actions(s)
        self.assertEqual(len(actions), 3 + 4)
        for action in actions:
            self.assertIsNot(advance_phase(s, action), s)
        s = advance_phase(s, place((2, 1)))
        self.assertEqual(legal_actions(s), [acknowledge()])


class TestEngineAwards(unittest.TestCase):
    def test_given_tile_completing_category_when_placed_then_diversity_granted_once(self):
        all_bakery = make_tile("q", "four_quarters", [
            ((0,), "bakery", "waffle"), ((1,), "bakery", "croissant"),
            ((2,), "bakery", "donut"), ((3,), "bakery", "pancake"),
        ])
        board = Board.empty().with_tile((1, 1), make_starter_tile())
        s = single_player_state(board, [all_bakery, full_tile("t2", "bakery")], deck=[full_tile("t3", "pies")])
        s = advance_phase(advance_phase(s, pick(0)), place((0, 1)))
        self.assertEqual(s.diversity_taken, ("bakery",))
        self.assertTrue(s.player().has_award(AWARD_DIVERSITY, "bakery"))
        s = advance_phase(s, acknowledge())
        s = advance_phase(advance_phase(s, pick(0)), place((0, 0)))
        awards = [a for a in s.player().awards if a.kind == AWARD_DIVERSITY]
        self.assertEqual(len(awards), 1)


class TestGreedyMatch(unittest.TestCase):
    def test_given_seeded_match_when_greedy_plays_then_purse_tracks_earned_and_board_fills(self):
        s = new_game(seed=11)
        earned = 0
        threshold = s.rules.coin_threshold
        while not is_finished(s):
            suggestion = best_placement(s)
            s = advance_phase(advance_phase(s, pick(suggestion.market_index)), place(suggestion.position))
            earned += s.last_score.total
            self.assertEqual(s.player().wealth(threshold), earned)
            self.assertLess(s.player().coins, threshold)
            s = advance_phase(s, acknowledge())
        self.assertTrue(s.player().board.is_full())
        self.assertEqual(s.turn_number, 15)


if __name__ == "__main__":
    unittest.main()
