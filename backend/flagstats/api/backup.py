from flask import Blueprint, jsonify, request, current_app, Response
import json
from flagstats.store import export_document, import_document


backup = Blueprint('backup', __name__)


@backup.route('', methods=['GET'])
def get_store():
    return jsonify(export_document())


@backup.route('/export', methods=['GET'])
def export_store():
    filename = current_app.config.get('EXPORT_FILENAME', 'flag5v5-stats.json')
    body = json.dumps(export_document(), indent=2)
    return Response(
        body,
        mimetype='application/json',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@backup.route('/import', methods=['POST'])
def import_store():
    upload = request.files.get('file')
    try:
        if upload is not None:
            raw = json.loads(upload.read().decode('utf-8'))
        else:
            raw = json.loads(request.get_data(as_text=True) or 'null')
    except (UnicodeDecodeError, ValueError) as exc:
        current_app.logger.info(f"[store-import] unreadable upload: {exc}")
        return jsonify({'error': 'Import must be a JSON document'}), 400

    result = import_document(raw)
    state = result.state
    return jsonify({
        'ok': result.ok,
        'issues': result.issues,
        'players': len(state.players),
        'games': len(state.games),
        'events': sum(len(g.events) for g in state.games),
    })
