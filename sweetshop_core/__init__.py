"""
Sweetshop core Python package.

Pure game logic for the tile-placement puzzle, kept free of any presentation code so the
CLI, the Flask adapter and the tests all drive the same engine.
Modules:
- rules.py: Ruleset tables, scoring rules, grid constants
- board.py: Block, Tile, Board, category_at
- placement.py: valid_positions
- connectivity.py: find_region
- scoring.py: score, ScoreResult, currency exchange, final_score
- awards.py: diversity and majority awards
- state.py: PlayerState, GameState
- actions.py / engine.py: the turn state machine
- deal.py: tile supply; ai.py: greedy advisor; cli.py: terminal driver
"""
