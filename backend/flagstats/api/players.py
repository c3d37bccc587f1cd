from flask import Blueprint, jsonify, request, current_app
from flagstats.store import dispatch, load_state
from flagstats.services.stats.codec import encode_player
from flagstats.services.stats.exceptions import ValidationError
from flagstats.services.stats.state import AddPlayer, DeletePlayer, UpdatePlayer, new_player


players = Blueprint('players', __name__)


def _text_field(data: dict, key: str):
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str):
        raise ValidationError(f'{key} must be a string')
    return value


@players.route('', methods=['GET'])
def list_players():
    state = load_state()
    return jsonify([encode_player(p) for p in state.players])


@players.route('', methods=['POST'])
def add_player():
    data = request.get_json(silent=True) or {}
    player = new_player(
        _text_field(data, 'name'),
        jersey=_text_field(data, 'jersey'),
        position=_text_field(data, 'position'),
    )
    dispatch(AddPlayer(player))
    current_app.logger.info(f"[roster-add] player={player.id} name={player.name}")
    return jsonify(encode_player(player)), 201


@players.route('/<string:player_id>', methods=['PATCH'])
def update_player(player_id):
    data = request.get_json(silent=True) or {}
    state = dispatch(UpdatePlayer(
        player_id,
        name=_text_field(data, 'name'),
        jersey=_text_field(data, 'jersey'),
        position=_text_field(data, 'position'),
    ))
    return jsonify(encode_player(state.require_player(player_id)))


@players.route('/<string:player_id>', methods=['DELETE'])
def delete_player(player_id):
    before = load_state()
    before.require_player(player_id)
    removed = sum(1 for g in before.games for e in g.events if e.involves(player_id))
    dispatch(DeletePlayer(player_id))
    current_app.logger.info(f"[roster-delete] player={player_id} events_removed={removed}")
    return jsonify({'deleted': player_id, 'events_removed': removed})
