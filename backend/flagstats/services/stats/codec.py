"""Tracker document encoding and decoding.

The document is the persisted and exported shape of a ``TrackerState``::

    {"players": [...], "games": [{..., "events": [...]}], "ui": {...}}

``decode_document`` accepts anything. Each field that is missing or of
the wrong type is replaced by a safe default and reported in
``DecodeResult.issues``; an entry that cannot be identified (no usable
id) is dropped. Event type strings this version does not recognise are
kept verbatim so they survive a round trip.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from .events import StatEvent
from .rules import DEFAULT_RULE_SET, RuleSet
from .state import Game, Player, TrackerState, UiState

logger = logging.getLogger(__name__)


@dataclass
class DecodeResult:
    state: TrackerState
    issues: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


def _is_number(value) -> bool:
    """Finite JSON number. Rejects bools, NaN and the infinities json.loads lets through."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _opt_str(value) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _opt_label(value) -> Optional[str]:
    # Jerseys are often typed as numbers
    if _is_number(value):
        return str(value)
    return _opt_str(value)


def _list_field(raw: dict, key: str, where: str, issues: List[str]) -> list:
    value = raw.get(key)
    if isinstance(value, list):
        return value
    if value is not None:
        issues.append(f"{where}{key}: expected a list, got {type(value).__name__}")
    elif key != 'events':
        issues.append(f"{where}{key}: missing")
    return []


def _decode_player(raw, index: int, issues: List[str]) -> Optional[Player]:
    if not isinstance(raw, dict) or not _opt_str(raw.get('id')):
        issues.append(f"players[{index}]: dropped, no id")
        return None
    name = raw.get('name')
    if not isinstance(name, str):
        issues.append(f"players[{index}].name: not a string")
        name = ''
    return Player(
        id=raw['id'],
        name=name,
        jersey=_opt_label(raw.get('jersey')),
        position=_opt_label(raw.get('position')),
    )


def _decode_event(raw, where: str, issues: List[str]) -> Optional[StatEvent]:
    if not isinstance(raw, dict):
        issues.append(f"{where}: dropped, not an object")
        return None
    if not _opt_str(raw.get('id')) or not _opt_str(raw.get('playerId')) or not _opt_str(raw.get('type')):
        issues.append(f"{where}: dropped, needs id, type and playerId")
        return None
    timestamp = next((raw[k] for k in ('timestamp', 'ts') if _is_number(raw.get(k))), 0)
    yards = raw.get('yards')
    return StatEvent(
        id=raw['id'],
        timestamp=int(timestamp),
        type=raw['type'],
        player_id=raw['playerId'],
        receiver_id=_opt_str(raw.get('receiverId')),
        yards=yards if _is_number(yards) else None,
        note=_opt_str(raw.get('note')),
    )


def _decode_game(raw, index: int, issues: List[str]) -> Optional[Game]:
    where = f"games[{index}]"
    if not isinstance(raw, dict) or not _opt_str(raw.get('id')):
        issues.append(f"{where}: dropped, no id")
        return None
    rule_set = RuleSet.parse(raw.get('ruleSet'))
    if rule_set is None:
        issues.append(f"{where}.ruleSet: {raw.get('ruleSet')!r} replaced by {DEFAULT_RULE_SET.value}")
        rule_set = DEFAULT_RULE_SET
    date = raw.get('date', raw.get('dateISO'))
    events = []
    for i, item in enumerate(_list_field(raw, 'events', f"{where}.", issues)):
        event = _decode_event(item, f"{where}.events[{i}]", issues)
        if event is not None:
            events.append(event)
    opponent = raw.get('opponent')
    return Game(
        id=raw['id'],
        opponent=opponent if isinstance(opponent, str) else '',
        date=date if isinstance(date, str) else '',
        rule_set=rule_set,
        notes=_opt_str(raw.get('notes')),
        events=tuple(events),
    )


def decode_document(raw) -> DecodeResult:
    if not isinstance(raw, dict):
        logger.warning("Unrecognized tracker document (%s); starting empty", type(raw).__name__)
        return DecodeResult(TrackerState(), [f"document: expected an object, got {type(raw).__name__}"])

    issues: List[str] = []
    players = [
        p for p in (
            _decode_player(item, i, issues) for i, item in enumerate(_list_field(raw, 'players', '', issues))
        ) if p is not None
    ]
    games = [
        g for g in (
            _decode_game(item, i, issues) for i, item in enumerate(_list_field(raw, 'games', '', issues))
        ) if g is not None
    ]
    ui_raw = raw.get('ui')
    ui = UiState(selected_game_id=_opt_str(ui_raw.get('selectedGameId'))) if isinstance(ui_raw, dict) else UiState()

    if issues:
        logger.info("Tracker document decoded with %d issue(s)", len(issues))
    return DecodeResult(TrackerState(players=tuple(players), games=tuple(games), ui=ui), issues)


def _compact(data: dict) -> dict:
    return {k: v for k, v in data.items() if v is not None}


def encode_player(player: Player) -> dict:
    return _compact({
        'id': player.id,
        'name': player.name,
        'jersey': player.jersey,
        'position': player.position,
    })


def encode_event(event: StatEvent) -> dict:
    return _compact({
        'id': event.id,
        'timestamp': event.timestamp,
        'type': event.type,
        'playerId': event.player_id,
        'receiverId': event.receiver_id,
        'yards': event.yards,
        'note': event.note,
    })


def encode_game(game: Game, include_events: bool = True) -> dict:
    data = _compact({
        'id': game.id,
        'opponent': game.opponent,
        'date': game.date,
        'ruleSet': game.rule_set.value,
        'notes': game.notes,
    })
    if include_events:
        data['events'] = [encode_event(e) for e in game.events]
    return data


def encode_document(state: TrackerState) -> dict:
    return {
        'players': [encode_player(p) for p in state.players],
        'games': [encode_game(g) for g in state.games],
        'ui': _compact({'selectedGameId': state.ui.selected_game_id}),
    }
