from flask import Blueprint, jsonify, request, current_app
from datetime import date
import math
from flagstats.store import dispatch, load_state
from flagstats.services.stats.codec import encode_event, encode_game
from flagstats.services.stats.engine import box_score, team_points
from flagstats.services.stats.events import EventType, PASS_COMPLETION_FAMILY, describe_event, new_event
from flagstats.services.stats.exceptions import InvalidEventType, InvalidRuleSet, ValidationError
from flagstats.services.stats.gate import ensure_event_allowed
from flagstats.services.stats.rules import DEFAULT_RULE_SET, RuleSet
from flagstats.services.stats.state import AddGame, ClearEvents, DeleteGame, LogEvent, RemoveEvent, SelectGame, new_game


games = Blueprint('games', __name__)


def _game_summary(game):
    payload = encode_game(game, include_events=False)
    payload['ruleSetLabel'] = game.rule_set.label
    payload['eventCount'] = len(game.events)
    payload['teamPoints'] = team_points(game.events)
    return payload


def _game_detail(state, game):
    players_by_id = state.players_by_id()
    payload = _game_summary(game)
    payload['rules'] = game.rule_set.config.to_dict()
    payload['selected'] = state.ui.selected_game_id == game.id
    # Latest first for the log view; aggregation does not depend on order
    payload['events'] = [
        dict(encode_event(e), label=describe_event(e, players_by_id))
        for e in game.events_latest_first()
    ]
    payload['boxScore'] = box_score(state.players, game)
    return payload


@games.route('', methods=['GET'])
def list_games():
    state = load_state()
    return jsonify({
        'games': [_game_summary(g) for g in state.games],
        'selectedGameId': state.ui.selected_game_id,
    })


@games.route('', methods=['POST'])
def create_game():
    data = request.get_json(silent=True) or {}
    default = RuleSet.parse(current_app.config.get('DEFAULT_RULE_SET'), DEFAULT_RULE_SET)
    tag = data.get('ruleSet')
    rule_set = RuleSet.parse(tag) if tag else default
    if rule_set is None:
        raise InvalidRuleSet(tag)
    game_date = data.get('date') or date.today().isoformat()
    try:
        date.fromisoformat(game_date)
    except (TypeError, ValueError):
        raise ValidationError('date must be YYYY-MM-DD')
    opponent = data.get('opponent')
    notes = data.get('notes')
    if not isinstance(opponent, str) or (notes is not None and not isinstance(notes, str)):
        raise ValidationError('opponent and notes must be strings')
    game = new_game(opponent, game_date, rule_set, notes=notes)
    state = dispatch(AddGame(game))
    current_app.logger.info(f"[game-create] game={game.id} opponent={game.opponent} rules={rule_set.value}")
    return jsonify(_game_detail(state, game)), 201


@games.route('/<string:game_id>', methods=['GET'])
def get_game(game_id):
    state = load_state()
    return jsonify(_game_detail(state, state.require_game(game_id)))


@games.route('/<string:game_id>', methods=['DELETE'])
def delete_game(game_id):
    dispatch(DeleteGame(game_id))
    current_app.logger.info(f"[game-delete] game={game_id}")
    return jsonify({'deleted': game_id})


@games.route('/<string:game_id>/select', methods=['POST'])
def select_game(game_id):
    state = dispatch(SelectGame(game_id))
    return jsonify(_game_detail(state, state.require_game(game_id)))


@games.route('/<string:game_id>/stats', methods=['GET'])
def get_stats(game_id):
    state = load_state()
    game = state.require_game(game_id)
    return jsonify({
        'gameId': game.id,
        'teamPoints': team_points(game.events),
        'boxScore': box_score(state.players, game),
    })


@games.route('/<string:game_id>/events', methods=['POST'])
def log_event(game_id):
    data = request.get_json(silent=True) or {}
    state = load_state()
    game = state.require_game(game_id)

    event_type = EventType.parse(data.get('type'))
    if event_type is None:
        raise InvalidEventType(data.get('type'))
    ensure_event_allowed(game.rule_set, event_type)

    player_id = data.get('playerId')
    if not state.find_player(player_id):
        raise ValidationError(f"Unknown player {player_id!r}")
    receiver_id = data.get('receiverId') if event_type in PASS_COMPLETION_FAMILY else None
    if receiver_id and not state.find_player(receiver_id):
        raise ValidationError(f"Unknown receiver {receiver_id!r}")

    yards = data.get('yards')
    if yards is not None and (
        isinstance(yards, bool) or not isinstance(yards, (int, float))
        or (isinstance(yards, float) and not math.isfinite(yards))
    ):
        raise ValidationError('yards must be a finite number')
    note = data.get('note')
    if note is not None and not isinstance(note, str):
        raise ValidationError('note must be a string')

    event = new_event(event_type, player_id, receiver_id=receiver_id, yards=yards, note=note)
    state = dispatch(LogEvent(game.id, event))
    current_app.logger.info(
        f"[event-log] game={game.id} type={event.type} player={event.player_id} receiver={event.receiver_id}"
    )
    payload = dict(encode_event(event), label=describe_event(event, state.players_by_id()))
    return jsonify(payload), 201


@games.route('/<string:game_id>/events/<string:event_id>', methods=['DELETE'])
def remove_event(game_id, event_id):
    dispatch(RemoveEvent(game_id, event_id))
    current_app.logger.info(f"[event-remove] game={game_id} event={event_id}")
    return jsonify({'deleted': event_id})


@games.route('/<string:game_id>/events', methods=['DELETE'])
def clear_events(game_id):
    before = load_state().require_game(game_id)
    dispatch(ClearEvents(game_id))
    current_app.logger.info(f"[event-clear] game={game_id} removed={len(before.events)}")
    return jsonify({'cleared': len(before.events)})
