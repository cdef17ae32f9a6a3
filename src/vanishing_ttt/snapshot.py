"""
Game state snapshots: the JSON-compatible form a session transport stores.

Layout (camelCase keys, O/X symbols)::

    {
      "board": ["O", null, "X", ...],
      "metadata": [{"owner": "O", "sequenceNumber": 0}, null, ...],
      "currentPlayer": "O",
      "winner": null,            # or "O", "X", "draw"
      "moveCount": 3
    }

``from_dict`` refuses anything the engine could not have produced, so a
corrupted remote document fails here instead of deep inside ``apply_move``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from .engine import GameState, PieceMeta
from .game_basics import (
    BOARD_CELLS,
    DRAW,
    EMPTY,
    MAX_PIECES,
    PLAYERS_BY_SYMBOL,
    SYMBOLS,
)

DRAW_TOKEN = "draw"


class SnapshotError(ValueError):
    """Snapshot is malformed or describes an impossible state."""


def to_dict(state: GameState) -> Dict[str, Any]:
    if state.winner is None:
        winner = None
    elif state.winner == DRAW:
        winner = DRAW_TOKEN
    else:
        winner = SYMBOLS[state.winner]
    return {
        "board": [None if v == EMPTY else SYMBOLS[v] for v in state.board],
        "metadata": [
            None if m is None else {"owner": SYMBOLS[m.owner], "sequenceNumber": m.sequence_number}
            for m in state.metadata
        ],
        "currentPlayer": SYMBOLS[state.current_player],
        "winner": winner,
        "moveCount": state.move_count,
    }


def _player(token: Any, what: str) -> int:
    if not isinstance(token, str) or token not in PLAYERS_BY_SYMBOL:
        raise SnapshotError(f"{what}: unknown player {token!r}")
    return PLAYERS_BY_SYMBOL[token]


def _cells(data: Dict[str, Any], key: str) -> List[Any]:
    cells = data.get(key)
    if not isinstance(cells, list) or len(cells) != BOARD_CELLS:
        raise SnapshotError(f"{key} must be a list of {BOARD_CELLS} entries")
    return cells


def from_dict(data: Dict[str, Any]) -> GameState:
    if not isinstance(data, dict):
        raise SnapshotError("snapshot must be a JSON object")

    board = [EMPTY if c is None else _player(c, f"board[{i}]") for i, c in enumerate(_cells(data, "board"))]

    metadata: List[Optional[PieceMeta]] = []
    for i, entry in enumerate(_cells(data, "metadata")):
        if entry is None:
            metadata.append(None)
            continue
        if not isinstance(entry, dict):
            raise SnapshotError(f"metadata[{i}] must be an object or null")
        seq = entry.get("sequenceNumber")
        if not isinstance(seq, int) or isinstance(seq, bool) or seq < 0:
            raise SnapshotError(f"metadata[{i}].sequenceNumber must be a non-negative integer")
        metadata.append(PieceMeta(_player(entry.get("owner"), f"metadata[{i}].owner"), seq))

    move_count = data.get("moveCount")
    if not isinstance(move_count, int) or isinstance(move_count, bool) or move_count < 0:
        raise SnapshotError("moveCount must be a non-negative integer")

    current = _player(data.get("currentPlayer"), "currentPlayer")

    raw_winner = data.get("winner")
    if raw_winner is None:
        winner = None
    elif raw_winner == DRAW_TOKEN:
        winner = DRAW
    else:
        winner = _player(raw_winner, "winner")

    for i, (cell, meta) in enumerate(zip(board, metadata)):
        if (cell == EMPTY) != (meta is None):
            raise SnapshotError(f"board and metadata disagree at cell {i}")
        if meta is not None and meta.owner != cell:
            raise SnapshotError(f"metadata owner differs from board at cell {i}")

    seqs = [m.sequence_number for m in metadata if m is not None]
    if len(set(seqs)) != len(seqs):
        raise SnapshotError("sequence numbers must be unique")
    if seqs and max(seqs) >= move_count:
        raise SnapshotError("sequence numbers must be below moveCount")
    for player, sym in SYMBOLS.items():
        if sum(1 for m in metadata if m is not None and m.owner == player) > MAX_PIECES:
            raise SnapshotError(f"player {sym} owns more than {MAX_PIECES} pieces")

    return GameState(
        board=tuple(board),
        metadata=tuple(metadata),
        current_player=current,
        winner=winner,
        move_count=move_count,
    )


def dumps(state: GameState, indent: Optional[int] = None) -> str:
    return json.dumps(to_dict(state), indent=indent)


def loads(text: str) -> GameState:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"invalid JSON: {e}") from e
    return from_dict(data)


def save(state: GameState, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(state, indent=2))
    return path


def load(path: Path) -> GameState:
    return loads(path.read_text())
