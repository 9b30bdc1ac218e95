from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from game import (
    Award,
    Block,
    Board,
    GameState,
    Phase,
    PlayerState,
    RegionScore,
    ScoreResult,
    Tile,
    TurnStep,
    acknowledge,
    advance_phase,
    best_placement,
    final_score,
    get_ruleset,
    new_game,
    pick,
    place,
    score,
    sorted_positions,
)

DEFAULT_RULESET = os.getenv("SWEETSHOP_RULESET", "sweets")
DEFAULT_SCORING = os.getenv("SWEETSHOP_SCORING") or None

app = Flask(__name__)


# ---------- JSON snapshot encoding ----------

def tile_to_json(t: Tile) -> Dict[str, Any]:
    return {
        "id": t.id,
        "layout": t.layout,
        "isStarter": bool(t.is_starter),
        "blocks": [
            {"cells": list(b.cells), "category": b.category, "item": b.item}
            for b in t.blocks
        ],
    }


def tile_from_json(obj: Dict[str, Any]) -> Tile:
    blocks = tuple(
        Block(
            cells=tuple(int(c) for c in b["cells"]),
            category=(None if b.get("category") is None else str(b["category"])),
            item=str(b["item"]),
        )
        for b in obj["blocks"]
    )
    return Tile(id=str(obj["id"]), layout=str(obj["layout"]), blocks=blocks, is_starter=bool(obj.get("isStarter", False)))


def board_to_json(b: Board) -> List[Optional[Dict[str, Any]]]:
    return [tile_to_json(t) if t is not None else None for t in b.slots]


def board_from_json(slots: List[Optional[Dict[str, Any]]]) -> Board:
    return Board(slots=tuple(tile_from_json(t) if t is not None else None for t in slots))


def score_to_json(res: Optional[ScoreResult]) -> Optional[Dict[str, Any]]:
    if res is None:
        return None
    return {
        "total": int(res.total),
        "floorApplied": bool(res.floor_applied),
        "multiCombo": bool(res.is_multi_combo),
        "regions": [
            {"category": r.category, "magnitude": r.magnitude, "cells": r.cells, "tiles": r.tiles}
            for r in res.regions
        ],
    }


def score_from_json(obj: Optional[Dict[str, Any]]) -> Optional[ScoreResult]:
    if obj is None:
        return None
    regions = tuple(
        RegionScore(str(r["category"]), int(r["magnitude"]), int(r["cells"]), int(r["tiles"]))
        for r in obj.get("regions", [])
    )
    return ScoreResult(total=int(obj["total"]), regions=regions, floor_applied=bool(obj.get("floorApplied", False)))


def player_to_json(p: PlayerState) -> Dict[str, Any]:
    return {
        "id": p.player_id,
        "name": p.name,
        "coins": int(p.coins),
        "tokens": int(p.tokens),
        "awards": [{"kind": a.kind, "category": a.category, "value": a.value} for a in p.awards],
        "board": board_to_json(p.board),
    }


def player_from_json(obj: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        player_id=str(obj["id"]),
        name=str(obj.get("name", obj["id"])),
        board=board_from_json(obj["board"]),
        coins=int(obj.get("coins", 0)),
        tokens=int(obj.get("tokens", 0)),
        awards=tuple(Award(str(a["kind"]), str(a["category"]), int(a["value"])) for a in obj.get("awards", [])),
    )


def state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "rules": {"name": s.rules.name, "scoring": s.rules.scoring.name},
        "phase": s.phase.value,
        "step": s.step.value,
        "players": [player_to_json(p) for p in s.players],
        "currentPlayer": int(s.current_player),
        "deck": [tile_to_json(t) for t in s.deck],
        "market": [tile_to_json(t) for t in s.market],
        "diversityTaken": list(s.diversity_taken),
        "selected": s.selected,
        "lastScore": score_to_json(s.last_score),
        "turnNumber": int(s.turn_number),
    }


def json_to_state(obj: Dict[str, Any]) -> GameState:
    rules_in = obj.get("rules") or {}
    if not isinstance(rules_in, dict):
        raise ValueError("rules must be an object")
    rules = get_ruleset(str(rules_in.get("name", DEFAULT_RULESET)), rules_in.get("scoring"))
    players = tuple(player_from_json(p) for p in obj["players"])
    if not players:
        raise ValueError("at least one player required")
    current = int(obj.get("currentPlayer", 0))
    if not 0 <= current < len(players):
        raise ValueError(f"currentPlayer out of range: {current}")
    selected = obj.get("selected")
    return GameState(
        players=players,
        deck=tuple(tile_from_json(t) for t in obj.get("deck", [])),
        market=tuple(tile_from_json(t) for t in obj.get("market", [])),
        rules=rules,
        phase=Phase(obj.get("phase", Phase.PLAYING.value)),
        current_player=current,
        step=TurnStep(obj.get("step", TurnStep.PICK_TILE.value)),
        diversity_taken=tuple(sorted(str(c) for c in obj.get("diversityTaken", []))),
        selected=(None if selected is None else int(selected)),
        last_score=score_from_json(obj.get("lastScore")),
        turn_number=int(obj.get("turnNumber", 0)),
    )


def _positions(s: GameState) -> List[List[int]]:
    if s.phase is Phase.ENDED:
        return []
    return [[r, c] for (r, c) in sorted_positions(s.player().board)]


def _ok_state(s: GameState, **extra: Any) -> Any:
    payload = {"ok": True, "state": state_to_json(s), "validPositions": _positions(s)}
    payload.update(extra)
    return jsonify(payload)


def _read_state() -> Tuple[Optional[GameState], Any]:
    body = request.get_json(force=True, silent=True) or {}
    s_in = body.get("state")
    if not isinstance(s_in, dict):
        return None, (jsonify({"ok": False, "error": "state required"}), 400)
    try:
        return json_to_state(s_in), None
    except (KeyError, TypeError, ValueError) as e:
        return None, (jsonify({"ok": False, "error": f"bad state: {e}"}), 400)


def _read_position(body: Dict[str, Any]) -> Optional[Tuple[int, int]]:
    pos = body.get("position")
    if not isinstance(pos, (list, tuple)) or len(pos) != 2:
        return None
    try:
        return int(pos[0]), int(pos[1])
    except (TypeError, ValueError):
        return None


# ---------- Core Game API ----------

@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        rules = get_ruleset(str(body.get("ruleset", DEFAULT_RULESET)), body.get("scoring", DEFAULT_SCORING))
        players = int(body.get("players", 1))
        seed = body.get("seed", None)
        state = new_game(
            player_count=players,
            seed=(None if seed is None else int(seed)),
            rules=rules,
            tutorial=bool(body.get("tutorial", False)),
        )
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    return _ok_state(state)


@app.post("/api/legal")
def api_legal() -> Any:
    state, err = _read_state()
    if err:
        return err
    return jsonify({"ok": True, "validPositions": _positions(state)})


@app.post("/api/score")
def api_score() -> Any:
    """Preview a market tile on a slot without changing the game."""
    state, err = _read_state()
    if err:
        return err
    body = request.get_json(force=True, silent=True) or {}
    pos = _read_position(body)
    index = body.get("marketIndex")
    if pos is None or not isinstance(index, int) or not 0 <= index < len(state.market):
        return jsonify({"ok": False, "error": "marketIndex and position required"}), 400
    if list(pos) not in _positions(state):
        return jsonify({"ok": False, "error": "Illegal position", "validPositions": _positions(state)}), 400
    res = score(state.player().board, state.market[index], pos, state.rules.scoring)
    return jsonify({"ok": True, "score": score_to_json(res)})


@app.post("/api/pick")
def api_pick() -> Any:
    state, err = _read_state()
    if err:
        return err
    body = request.get_json(force=True, silent=True) or {}
    index = body.get("index")
    if not isinstance(index, int):
        return jsonify({"ok": False, "error": "index required"}), 400
    next_state = advance_phase(state, pick(index))
    if next_state is state:
        return jsonify({"ok": False, "error": "Illegal pick", "state": state_to_json(state)}), 400
    return _ok_state(next_state)


@app.post("/api/place")
def api_place() -> Any:
    state, err = _read_state()
    if err:
        return err
    body = request.get_json(force=True, silent=True) or {}
    pos = _read_position(body)
    if pos is None:
        return jsonify({"ok": False, "error": "position required"}), 400
    try:
        next_state = advance_phase(state, place(pos))
    except ValueError as e:
        return jsonify({"ok": False, "error": f"bad position: {e}", "validPositions": _positions(state)}), 400
    if next_state is state:
        return jsonify({"ok": False, "error": "Illegal placement", "validPositions": _positions(state)}), 400
    return _ok_state(next_state, score=score_to_json(next_state.last_score))


@app.post("/api/ack")
def api_ack() -> Any:
    state, err = _read_state()
    if err:
        return err
    next_state = advance_phase(state, acknowledge())
    if next_state is state:
        return jsonify({"ok": False, "error": "Nothing to acknowledge", "state": state_to_json(state)}), 400
    return _ok_state(next_state, ended=next_state.phase is Phase.ENDED)


@app.post("/api/ai")
def api_ai() -> Any:
    state, err = _read_state()
    if err:
        return err
    suggestion = best_placement(state)
    if suggestion is None:
        return jsonify({"ok": False, "error": "Nothing to play", "state": state_to_json(state)}), 400
    picked = advance_phase(state, pick(suggestion.market_index))
    next_state = advance_phase(picked, place(suggestion.position))
    if next_state is picked:
        return jsonify({"ok": False, "error": "Advisor suggested an illegal move"}), 500
    return _ok_state(
        next_state,
        marketIndex=suggestion.market_index,
        position=list(suggestion.position),
        score=score_to_json(next_state.last_score),
    )


@app.post("/api/final")
def api_final() -> Any:
    state, err = _read_state()
    if err:
        return err
    threshold = state.rules.coin_threshold
    return jsonify({
        "ok": True,
        "ended": state.phase is Phase.ENDED,
        "scores": {p.player_id: final_score(p, threshold) for p in state.players},
    })


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    port = int(os.getenv("PORT", "5000"))
    app.run(host="0.0.0.0", port=port, debug=debug)
