from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from .board import Board, Tile
from .rules import Ruleset, SWEETS

if TYPE_CHECKING:
    from .scoring import ScoreResult

AWARD_DIVERSITY = "diversity"
AWARD_MAJORITY = "majority"


class Phase(str, Enum):
    PLAYING = "playing"
    ENDED = "ended"


class TurnStep(str, Enum):
    PICK_TILE = "pick_tile"
    PLACE_TILE = "place_tile"
    SCORE_SHOWN = "score_shown"


@dataclass(frozen=True)
class Award:
    kind: str  # AWARD_DIVERSITY or AWARD_MAJORITY
    category: str
    value: int


@dataclass(frozen=True)
class PlayerState:
    """One player's board, purse and awards."""
    player_id: str
    name: str
    board: Board
    coins: int = 0
    tokens: int = 0
    awards: Tuple[Award, ...] = ()

    def with_board(self, board: Board) -> 'PlayerState':
        return replace(self, board=board)

    def with_purse(self, coins: int, tokens: int) -> 'PlayerState':
        return replace(self, coins=coins, tokens=tokens)

    def with_awards(self, *awards: Award) -> 'PlayerState':
        return replace(self, awards=self.awards + tuple(awards))

    def wealth(self, threshold: int) -> int:
        return self.coins + self.tokens * threshold

    def has_award(self, kind: str, category: str) -> bool:
        return any(a.kind == kind and a.category == category for a in self.awards)


@dataclass(frozen=True)
class GameState:
    """Represents a whole match. Every transition returns a new GameState."""
    players: Tuple[PlayerState, ...]
    deck: Tuple[Tile, ...]
    market: Tuple[Tile, ...]
    rules: Ruleset = SWEETS
    phase: Phase = Phase.PLAYING
    current_player: int = 0
    step: TurnStep = TurnStep.PICK_TILE
    diversity_taken: Tuple[str, ...] = ()  # sorted category names
    selected: Optional[int] = None         # market index held in hand
    last_score: Optional['ScoreResult'] = field(default=None, compare=False)
    turn_number: int = 0

    def player(self, index: Optional[int] = None) -> PlayerState:
        return self.players[self.current_player if index is None else index]

    def selected_tile(self) -> Optional[Tile]:
        if self.selected is None or not (0 <= self.selected < len(self.market)):
            return None
        return self.market[self.selected]

    def is_diversity_taken(self, category: str) -> bool:
        return category in self.diversity_taken

    def diversity_flags(self) -> Dict[str, bool]:
        return {cat: cat in self.diversity_taken for cat in self.rules.category_names()}

    def with_player(self, index: int, player: PlayerState) -> 'GameState':
        players = self.players[:index] + (player,) + self.players[index + 1:]
        return replace(self, players=players)

    def supply_exhausted(self) -> bool:
        return not self.market and not self.deck
