"""Persistence boundary for the tracker state.

The state is stored as one JSON document. Every mutation loads it, applies
a pure transition, writes the result back and tells connected viewers to
refetch. Reads decode the stored document with the same lenient decoder
used for imports.
"""
import json
import time

from flask import current_app

from flagstats import db, socketio
from flagstats.models import StoreDocument
from flagstats.services.stats.codec import DecodeResult, decode_document, encode_document
from flagstats.services.stats.state import (
    ClearEvents,
    LogEvent,
    RemoveEvent,
    ReplaceState,
    TrackerState,
    reduce,
)

# Actions that only touch one game's log; their updates go to that game's room
_GAME_SCOPED = (LogEvent, RemoveEvent, ClearEvents)


def _store_key() -> str:
    return current_app.config.get('STORE_KEY', 'flag_5v5_stat_tracker_v1')


def load_state() -> TrackerState:
    row = db.session.get(StoreDocument, _store_key())
    if row is None:
        return TrackerState()
    try:
        raw = json.loads(row.document)
    except ValueError as exc:
        current_app.logger.warning(f"[store-load] key={row.key} unreadable document: {exc}")
        return TrackerState()
    result = decode_document(raw)
    if not result.ok:
        current_app.logger.warning(f"[store-load] key={row.key} issues={len(result.issues)}")
    return result.state


def save_state(state: TrackerState) -> None:
    key = _store_key()
    row = db.session.get(StoreDocument, key) or StoreDocument(key=key)
    row.document = json.dumps(encode_document(state))
    row.updated_at = time.time()
    db.session.add(row)
    try:
        db.session.commit()
    except Exception as exc:
        current_app.logger.error(f"[store-save] key={key} failed: {exc}", exc_info=True)
        db.session.rollback()
        raise


def notify(game_id=None) -> None:
    if game_id:
        socketio.emit('state_update', {'game_id': game_id}, to=f"game:{game_id}", namespace='/ws')
    else:
        socketio.emit('state_update', {'game_id': None}, namespace='/ws')


def dispatch(action) -> TrackerState:
    """Apply one action to the stored state, persist it and notify viewers."""
    state = reduce(load_state(), action)
    save_state(state)
    notify(action.game_id if isinstance(action, _GAME_SCOPED) else None)
    return state


def export_document() -> dict:
    return encode_document(load_state())


def import_document(raw) -> DecodeResult:
    """Replace the whole tracker with a decoded document. Never rejects the shape."""
    result = decode_document(raw)
    dispatch(ReplaceState(result.state))
    current_app.logger.info(
        f"[store-import] players={len(result.state.players)} games={len(result.state.games)} issues={len(result.issues)}"
    )
    return result
