from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import Coord

ACTION_PICK = "pick"
ACTION_PLACE = "place"
ACTION_ACKNOWLEDGE = "acknowledge"

ACTION_KINDS = (ACTION_PICK, ACTION_PLACE, ACTION_ACKNOWLEDGE)


@dataclass(frozen=True)
class GameAction:
    kind: str
    tile_index: Optional[int] = None
    position: Optional[Coord] = None

    def __post_init__(self) -> None:
        if self.kind not in ACTION_KINDS:
            raise ValueError(f"unknown action kind: {self.kind}")


def pick(tile_index: int) -> GameAction:
    return GameAction(ACTION_PICK, tile_index=int(tile_index))


def place(position: Coord) -> GameAction:
    return GameAction(ACTION_PLACE, position=(int(position[0]), int(position[1])))


def acknowledge() -> GameAction:
    return GameAction(ACTION_ACKNOWLEDGE)
