"""Play events and the fixed per-type stat deltas.

Every recognised event type credits a fixed set of counters on its
primary player and, for completed passes, on the receiver. Points are
not a counter: they follow from the scoring counters (see
``POINT_VALUES``), so an event's point contribution is derived from the
same table that drives aggregation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

from .ids import new_id, now_ms


class EventType(str, Enum):
    PASS_ATT = 'PASS_ATT'
    PASS_COMP = 'PASS_COMP'
    PASS_TD = 'PASS_TD'
    INT_THROWN = 'INT_THROWN'
    RUSH_ATT = 'RUSH_ATT'
    RUSH_TD = 'RUSH_TD'
    REC = 'REC'
    REC_TD = 'REC_TD'
    DEF_INT = 'DEF_INT'
    SACK = 'SACK'
    FLAG_PULL = 'FLAG_PULL'
    DEF_TD = 'DEF_TD'
    XP_1 = 'XP_1'
    XP_2 = 'XP_2'
    PAT_RET_2 = 'PAT_RET_2'

    @classmethod
    def parse(cls, tag) -> Optional['EventType']:
        if isinstance(tag, cls):
            return tag
        try:
            return cls(tag)
        except ValueError:
            return None


# Only these types credit a receiver.
PASS_COMPLETION_FAMILY = frozenset({EventType.PASS_COMP, EventType.PASS_TD})


@dataclass(frozen=True)
class StatDelta:
    primary: Tuple[str, ...]
    receiver: Tuple[str, ...] = ()


DELTAS: Dict[EventType, StatDelta] = {
    EventType.PASS_ATT: StatDelta(('pass_attempts',)),
    EventType.PASS_COMP: StatDelta(('pass_attempts', 'pass_completions'), ('receptions',)),
    EventType.PASS_TD: StatDelta(
        ('pass_attempts', 'pass_completions', 'pass_tds'),
        ('receptions', 'receiving_tds'),
    ),
    EventType.INT_THROWN: StatDelta(('pass_attempts', 'interceptions_thrown')),
    EventType.RUSH_ATT: StatDelta(('rush_attempts',)),
    EventType.RUSH_TD: StatDelta(('rush_attempts', 'rush_tds')),
    EventType.REC: StatDelta(('receptions',)),
    EventType.REC_TD: StatDelta(('receptions', 'receiving_tds')),
    EventType.DEF_INT: StatDelta(('defensive_interceptions',)),
    EventType.SACK: StatDelta(('sacks',)),
    EventType.FLAG_PULL: StatDelta(('flag_pulls',)),
    EventType.DEF_TD: StatDelta(('defensive_tds',)),
    EventType.XP_1: StatDelta(('conversions_1pt',)),
    EventType.XP_2: StatDelta(('conversions_2pt',)),
    EventType.PAT_RET_2: StatDelta(('defensive_pat_returns',)),
}

POINT_VALUES: Dict[str, int] = {
    'pass_tds': 6,
    'rush_tds': 6,
    'receiving_tds': 6,
    'defensive_tds': 6,
    'conversions_1pt': 1,
    'conversions_2pt': 2,
    'defensive_pat_returns': 2,
}

EVENT_LABELS: Dict[EventType, str] = {
    EventType.PASS_ATT: 'Pass attempt',
    EventType.PASS_COMP: 'Completion',
    EventType.PASS_TD: 'Pass TD',
    EventType.INT_THROWN: 'Interception thrown',
    EventType.RUSH_ATT: 'Rush attempt',
    EventType.RUSH_TD: 'Rush TD',
    EventType.REC: 'Reception',
    EventType.REC_TD: 'Receiving TD',
    EventType.DEF_INT: 'Interception',
    EventType.SACK: 'Sack',
    EventType.FLAG_PULL: 'Flag pull',
    EventType.DEF_TD: 'Defensive TD',
    EventType.XP_1: 'PAT +1',
    EventType.XP_2: 'PAT +2',
    EventType.PAT_RET_2: 'PAT return +2',
}


@dataclass(frozen=True)
class StatEvent:
    id: str
    timestamp: int
    type: str
    player_id: str
    receiver_id: Optional[str] = None
    yards: Optional[Union[int, float]] = None
    note: Optional[str] = None

    @property
    def kind(self) -> Optional[EventType]:
        """Recognised event type, or None for tags this version does not know."""
        return EventType.parse(self.type)

    @property
    def credited_receiver(self) -> Optional[str]:
        if self.receiver_id and self.kind in PASS_COMPLETION_FAMILY:
            return self.receiver_id
        return None

    def involves(self, player_id: str) -> bool:
        return self.player_id == player_id or self.receiver_id == player_id


def new_event(event_type: EventType, player_id: str, receiver_id: Optional[str] = None,
              yards=None, note: Optional[str] = None) -> StatEvent:
    note = (note or '').strip() or None
    if event_type not in PASS_COMPLETION_FAMILY:
        receiver_id = None
    return StatEvent(
        id=new_id('e'),
        timestamp=now_ms(),
        type=event_type.value,
        player_id=player_id,
        receiver_id=receiver_id or None,
        yards=yards,
        note=note,
    )


def _delta_points(fields) -> int:
    return sum(POINT_VALUES.get(f, 0) for f in fields)


def event_points(event: StatEvent) -> int:
    kind = event.kind
    if kind is None:
        return 0
    delta = DELTAS[kind]
    points = _delta_points(delta.primary)
    if event.credited_receiver:
        points += _delta_points(delta.receiver)
    return points


def describe_event(event: StatEvent, players_by_id=None) -> str:
    """Log line label, e.g. ``Pass TD → Bob``."""
    kind = event.kind
    if kind is None:
        return event.type
    label = EVENT_LABELS[kind]
    receiver = (players_by_id or {}).get(event.credited_receiver) if event.credited_receiver else None
    if receiver is not None:
        label = f"{label} → {receiver.name}"
    return label
