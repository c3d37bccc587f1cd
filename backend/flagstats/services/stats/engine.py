"""Box score aggregation.

Totals are always re-derived from the full event log; nothing is cached
or persisted. The engine honours every recognised event regardless of
the game's rule set.
"""
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List

from .events import DELTAS, POINT_VALUES, StatEvent, event_points
from .state import Game, Player


@dataclass
class PlayerStats:
    # Passing
    pass_attempts: int = 0
    pass_completions: int = 0
    pass_tds: int = 0
    interceptions_thrown: int = 0
    # Rushing
    rush_attempts: int = 0
    rush_tds: int = 0
    # Receiving
    receptions: int = 0
    receiving_tds: int = 0
    # Defense
    defensive_interceptions: int = 0
    sacks: int = 0
    flag_pulls: int = 0
    defensive_tds: int = 0
    # Scoring
    conversions_1pt: int = 0
    conversions_2pt: int = 0
    defensive_pat_returns: int = 0

    @property
    def points(self) -> int:
        return sum(getattr(self, name) * value for name, value in POINT_VALUES.items())

    def credit(self, fields: Iterable[str]) -> None:
        for name in fields:
            setattr(self, name, getattr(self, name) + 1)

    def to_dict(self):
        data = {_camel(k): v for k, v in asdict(self).items()}
        data['points'] = self.points
        return data


def _camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.upper() if part in ('td', 'tds') else part.capitalize() for part in rest)


def compute(players: Iterable[Player], events: Iterable[StatEvent]) -> Dict[str, PlayerStats]:
    """Map every player id (roster first, then dangling references) to its stats."""
    by_id: Dict[str, PlayerStats] = {p.id: PlayerStats() for p in players}

    def ensure(player_id: str) -> PlayerStats:
        if player_id not in by_id:
            by_id[player_id] = PlayerStats()
        return by_id[player_id]

    for event in events:
        stats = ensure(event.player_id)
        kind = event.kind
        if kind is None:
            continue
        delta = DELTAS[kind]
        stats.credit(delta.primary)
        receiver_id = event.credited_receiver
        if receiver_id:
            ensure(receiver_id).credit(delta.receiver)

    return by_id


def team_points(events: Iterable[StatEvent]) -> int:
    return sum(event_points(e) for e in events)


def box_score(players: Iterable[Player], game: Game) -> List[dict]:
    """Rows for the stats table: roster order, then ids the roster no longer has."""
    players = list(players)
    known = {p.id: p for p in players}
    rows = []
    for player_id, stats in compute(players, game.events).items():
        player = known.get(player_id)
        rows.append({
            'playerId': player_id,
            'name': player.name if player else None,
            'jersey': player.jersey if player else None,
            'onRoster': player is not None,
            'stats': stats.to_dict(),
        })
    return rows
