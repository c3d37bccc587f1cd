"""Tracker state and its transitions.

The whole tracker (roster, games with their event logs, UI selection) is
one immutable ``TrackerState`` value. Every mutation is an action applied
by ``reduce(state, action)``, which returns a new state and leaves the old
one untouched. Persisting the result is the caller's job.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from .events import StatEvent
from .exceptions import EventNotFound, GameNotFound, PlayerNotFound, ValidationError
from .ids import new_id
from .rules import RuleSet


@dataclass(frozen=True)
class Player:
    id: str
    name: str
    jersey: Optional[str] = None
    position: Optional[str] = None


@dataclass(frozen=True)
class Game:
    id: str
    opponent: str
    date: str
    rule_set: RuleSet
    notes: Optional[str] = None
    events: Tuple[StatEvent, ...] = ()

    def find_event(self, event_id: str) -> Optional[StatEvent]:
        return next((e for e in self.events if e.id == event_id), None)

    def events_latest_first(self) -> Tuple[StatEvent, ...]:
        # Stored newest first; the stable sort keeps that order for equal timestamps
        return tuple(sorted(self.events, key=lambda e: -e.timestamp))


@dataclass(frozen=True)
class UiState:
    selected_game_id: Optional[str] = None


@dataclass(frozen=True)
class TrackerState:
    players: Tuple[Player, ...] = ()
    games: Tuple[Game, ...] = ()
    ui: UiState = field(default_factory=UiState)

    def players_by_id(self):
        return {p.id: p for p in self.players}

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def find_game(self, game_id: str) -> Optional[Game]:
        return next((g for g in self.games if g.id == game_id), None)

    def require_player(self, player_id: str) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise PlayerNotFound(player_id)
        return player

    def require_game(self, game_id: str) -> Game:
        game = self.find_game(game_id)
        if game is None:
            raise GameNotFound(game_id)
        return game

    @property
    def selected_game(self) -> Optional[Game]:
        if not self.ui.selected_game_id:
            return None
        return self.find_game(self.ui.selected_game_id)


# ---- Actions ----

@dataclass(frozen=True)
class AddPlayer:
    player: Player


@dataclass(frozen=True)
class UpdatePlayer:
    player_id: str
    name: Optional[str] = None
    jersey: Optional[str] = None
    position: Optional[str] = None


@dataclass(frozen=True)
class DeletePlayer:
    player_id: str


@dataclass(frozen=True)
class AddGame:
    game: Game


@dataclass(frozen=True)
class DeleteGame:
    game_id: str


@dataclass(frozen=True)
class SelectGame:
    game_id: Optional[str]


@dataclass(frozen=True)
class LogEvent:
    game_id: str
    event: StatEvent


@dataclass(frozen=True)
class RemoveEvent:
    game_id: str
    event_id: str


@dataclass(frozen=True)
class ClearEvents:
    game_id: str


@dataclass(frozen=True)
class ReplaceState:
    state: TrackerState


def new_player(name: str, jersey: Optional[str] = None, position: Optional[str] = None) -> Player:
    name = (name or '').strip()
    if not name:
        raise ValidationError('Player name is required')
    return Player(
        id=new_id('p'),
        name=name,
        jersey=(jersey or '').strip() or None,
        position=(position or '').strip() or None,
    )


def new_game(opponent: str, date: str, rule_set: RuleSet, notes: Optional[str] = None) -> Game:
    opponent = (opponent or '').strip()
    if not opponent:
        raise ValidationError('Opponent is required')
    return Game(
        id=new_id('g'),
        opponent=opponent,
        date=date,
        rule_set=rule_set,
        notes=(notes or '').strip() or None,
    )


def _replace_game(state: TrackerState, game: Game) -> TrackerState:
    return replace(state, games=tuple(game if g.id == game.id else g for g in state.games))


def _update_player(state: TrackerState, action: UpdatePlayer) -> TrackerState:
    player = state.require_player(action.player_id)
    changes = {}
    if action.name is not None:
        name = action.name.strip()
        if not name:
            raise ValidationError('Player name is required')
        changes['name'] = name
    # Empty strings clear the optional display fields
    if action.jersey is not None:
        changes['jersey'] = action.jersey.strip() or None
    if action.position is not None:
        changes['position'] = action.position.strip() or None
    updated = replace(player, **changes)
    return replace(state, players=tuple(updated if p.id == player.id else p for p in state.players))


def _delete_player(state: TrackerState, player_id: str) -> TrackerState:
    state.require_player(player_id)
    games = tuple(
        replace(g, events=tuple(e for e in g.events if not e.involves(player_id)))
        for g in state.games
    )
    return replace(state, players=tuple(p for p in state.players if p.id != player_id), games=games)


def _delete_game(state: TrackerState, game_id: str) -> TrackerState:
    state.require_game(game_id)
    ui = state.ui
    if ui.selected_game_id == game_id:
        ui = replace(ui, selected_game_id=None)
    return replace(state, games=tuple(g for g in state.games if g.id != game_id), ui=ui)


def _remove_event(state: TrackerState, action: RemoveEvent) -> TrackerState:
    game = state.require_game(action.game_id)
    if game.find_event(action.event_id) is None:
        raise EventNotFound(action.event_id)
    return _replace_game(state, replace(game, events=tuple(e for e in game.events if e.id != action.event_id)))


def reduce(state: TrackerState, action) -> TrackerState:
    """Apply one action and return the resulting state."""
    if isinstance(action, AddPlayer):
        return replace(state, players=state.players + (action.player,))
    if isinstance(action, UpdatePlayer):
        return _update_player(state, action)
    if isinstance(action, DeletePlayer):
        return _delete_player(state, action.player_id)
    if isinstance(action, AddGame):
        # Newest game first, and it becomes the open game
        return replace(
            state,
            games=(action.game,) + state.games,
            ui=replace(state.ui, selected_game_id=action.game.id),
        )
    if isinstance(action, DeleteGame):
        return _delete_game(state, action.game_id)
    if isinstance(action, SelectGame):
        if action.game_id is not None:
            state.require_game(action.game_id)
        return replace(state, ui=replace(state.ui, selected_game_id=action.game_id))
    if isinstance(action, LogEvent):
        game = state.require_game(action.game_id)
        return _replace_game(state, replace(game, events=(action.event,) + game.events))
    if isinstance(action, RemoveEvent):
        return _remove_event(state, action)
    if isinstance(action, ClearEvents):
        game = state.require_game(action.game_id)
        return _replace_game(state, replace(game, events=()))
    if isinstance(action, ReplaceState):
        return action.state
    raise TypeError(f"Unsupported action {type(action).__name__}")
