def test_socket_connect_and_join(sio_client):
    # Ensure we are connected to /ws
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')

    # Flush any initial events
    try:
        sio_client.get_received('/ws')
    except Exception:
        pass

    sio_client.emit('join_game', {'game_id': 'g_abc'}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' for pkt in received)


def test_join_requires_game_id(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_game', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'error' for pkt in received)


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'pong' and pkt['args'][0] == {'n': 1} for pkt in received)


def test_logging_event_notifies_game_room(sio_client, client):
    player = client.post('/api/players', json={'name': 'Alice'}).get_json()
    game = client.post('/api/games', json={'opponent': 'Tigers'}).get_json()

    sio_client.emit('join_game', {'game_id': game['id']}, namespace='/ws')
    sio_client.get_received('/ws')  # flush

    res = client.post(f"/api/games/{game['id']}/events", json={'type': 'FLAG_PULL', 'playerId': player['id']})
    assert res.status_code == 201
    updates = [e for e in sio_client.get_received('/ws') if e['name'] == 'state_update']
    assert updates
    assert updates[-1]['args'][0] == {'game_id': game['id']}


def test_roster_change_broadcasts(sio_client, client):
    sio_client.get_received('/ws')
    client.post('/api/players', json={'name': 'Bob'})
    updates = [e for e in sio_client.get_received('/ws') if e['name'] == 'state_update']
    assert updates
    assert updates[-1]['args'][0] == {'game_id': None}
