import json


def _create_game(client, **overrides):
    body = {'opponent': 'Tigers', 'date': '2026-10-17'}
    body.update(overrides)
    res = client.post('/api/games', json=body)
    assert res.status_code == 201
    return res.get_json()


def _log(client, game_id, event_type, player_id, **extra):
    body = {'type': event_type, 'playerId': player_id}
    body.update(extra)
    return client.post(f'/api/games/{game_id}/events', json=body)


def _stats_by_player(client, game_id):
    res = client.get(f'/api/games/{game_id}/stats')
    assert res.status_code == 200
    return {row['playerId']: row['stats'] for row in res.get_json()['boxScore']}


def test_index_and_rulesets(client):
    assert client.get('/').status_code == 200
    res = client.get('/api/rulesets')
    data = res.get_json()
    assert data['default'] == 'NFL_FLAG'
    by_id = {r['id']: r for r in data['rulesets']}
    assert set(by_id) == {'NEXT_LEVEL', 'NFL_FLAG', 'FARM_LEAGUE'}
    assert by_id['FARM_LEAGUE']['allowPatReturn'] is True
    assert by_id['FARM_LEAGUE']['patReturnPoints'] == 2
    assert by_id['NFL_FLAG']['allowPatReturn'] is False


def test_add_update_and_list_players(client):
    res = client.post('/api/players', json={'name': '  Alice  ', 'jersey': 7})
    assert res.status_code == 201
    alice = res.get_json()
    assert alice['name'] == 'Alice'
    assert alice['jersey'] == '7'
    assert 'position' not in alice

    res = client.patch(f"/api/players/{alice['id']}", json={'position': 'QB'})
    assert res.status_code == 200
    assert res.get_json()['position'] == 'QB'

    players = client.get('/api/players').get_json()
    assert [p['name'] for p in players] == ['Alice']


def test_blank_player_name_rejected(client):
    res = client.post('/api/players', json={'name': '   '})
    assert res.status_code == 400
    assert 'error' in res.get_json()
    assert client.get('/api/players').get_json() == []


def test_create_game_defaults_and_selection(client):
    game = _create_game(client)
    assert game['ruleSet'] == 'NFL_FLAG'
    assert game['ruleSetLabel'] == 'NFL FLAG'
    assert game['selected'] is True
    assert game['events'] == []

    second = _create_game(client, opponent='Bears', ruleSet='FARM_LEAGUE')
    listing = client.get('/api/games').get_json()
    # Newest game first, and it is the open one
    assert [g['id'] for g in listing['games']] == [second['id'], game['id']]
    assert listing['selectedGameId'] == second['id']

    res = client.post(f"/api/games/{game['id']}/select")
    assert res.status_code == 200
    assert client.get('/api/games').get_json()['selectedGameId'] == game['id']


def test_create_game_validation(client):
    assert client.post('/api/games', json={'opponent': ''}).status_code == 400
    assert client.post('/api/games', json={'opponent': 'X', 'ruleSet': 'BOGUS'}).status_code == 400
    assert client.post('/api/games', json={'opponent': 'X', 'date': 'tomorrow'}).status_code == 400


def test_pass_td_and_conversion_box_score(client, roster):
    game = _create_game(client)
    a, b = roster['Alice']['id'], roster['Bob']['id']
    res = _log(client, game['id'], 'PASS_TD', a, receiverId=b, yards=25)
    assert res.status_code == 201
    assert res.get_json()['label'] == 'Pass TD → Bob'
    assert _log(client, game['id'], 'XP_2', a).status_code == 201

    stats = _stats_by_player(client, game['id'])
    assert stats[a]['passAttempts'] == 1
    assert stats[a]['passCompletions'] == 1
    assert stats[a]['passTDs'] == 1
    assert stats[a]['conversions2pt'] == 1
    assert stats[a]['points'] == 8
    assert stats[b]['receptions'] == 1
    assert stats[b]['receivingTDs'] == 1
    assert stats[b]['points'] == 6

    detail = client.get(f"/api/games/{game['id']}").get_json()
    assert detail['teamPoints'] == 14
    # Log view is latest first
    assert [e['type'] for e in detail['events']] == ['XP_2', 'PASS_TD']


def test_receiver_dropped_for_non_pass_events(client, roster):
    game = _create_game(client)
    a, b = roster['Alice']['id'], roster['Bob']['id']
    event = _log(client, game['id'], 'RUSH_TD', a, receiverId=b).get_json()
    assert 'receiverId' not in event
    stats = _stats_by_player(client, game['id'])
    assert stats[b]['receptions'] == 0


def test_log_event_validation(client, roster):
    game = _create_game(client)
    a = roster['Alice']['id']
    assert _log(client, game['id'], 'TOUCHBACK', a).status_code == 400
    assert _log(client, game['id'], 'SACK', 'p_nobody').status_code == 400
    assert _log(client, game['id'], 'PASS_COMP', a, receiverId='p_nobody').status_code == 400
    assert _log(client, game['id'], 'SACK', a, yards='far').status_code == 400
    assert _log(client, 'g_missing', 'SACK', a).status_code == 404


def test_pat_return_gated_by_rule_set_on_creation(client, roster):
    c = roster['Cara']['id']
    nfl = _create_game(client, ruleSet='NFL_FLAG')
    res = _log(client, nfl['id'], 'PAT_RET_2', c)
    assert res.status_code == 400

    farm = _create_game(client, ruleSet='FARM_LEAGUE')
    assert _log(client, farm['id'], 'PAT_RET_2', c).status_code == 201
    stats = _stats_by_player(client, farm['id'])
    assert stats[c]['defensivePatReturns'] == 1
    assert stats[c]['points'] == 2


def test_imported_pat_return_aggregates_under_any_rule_set(client):
    doc = {
        'players': [{'id': 'p_c', 'name': 'Cara'}],
        'games': [{
            'id': 'g_1', 'opponent': 'Tigers', 'date': '2026-10-17', 'ruleSet': 'NFL_FLAG',
            'events': [{'id': 'e_1', 'timestamp': 1, 'type': 'PAT_RET_2', 'playerId': 'p_c'}],
        }],
        'ui': {},
    }
    assert client.post('/api/store/import', json=doc).status_code == 200
    stats = _stats_by_player(client, 'g_1')
    assert stats['p_c']['points'] == 2


def test_remove_and_clear_events(client, roster):
    game = _create_game(client)
    a = roster['Alice']['id']
    first = _log(client, game['id'], 'FLAG_PULL', a).get_json()
    _log(client, game['id'], 'SACK', a)
    _log(client, game['id'], 'DEF_INT', a)

    res = client.delete(f"/api/games/{game['id']}/events/{first['id']}")
    assert res.status_code == 200
    assert _stats_by_player(client, game['id'])[a]['flagPulls'] == 0
    assert client.delete(f"/api/games/{game['id']}/events/{first['id']}").status_code == 404

    res = client.delete(f"/api/games/{game['id']}/events")
    assert res.get_json()['cleared'] == 2
    assert client.get(f"/api/games/{game['id']}").get_json()['events'] == []


def test_delete_player_cascades_across_games(client, roster):
    a, b = roster['Alice']['id'], roster['Bob']['id']
    g1 = _create_game(client)
    g2 = _create_game(client, opponent='Bears')
    _log(client, g1['id'], 'PASS_COMP', a, receiverId=b)
    _log(client, g1['id'], 'RUSH_ATT', a)
    _log(client, g2['id'], 'REC', b)

    res = client.delete(f'/api/players/{b}')
    assert res.status_code == 200
    assert res.get_json()['events_removed'] == 2

    s1 = _stats_by_player(client, g1['id'])
    s2 = _stats_by_player(client, g2['id'])
    assert b not in s1 and b not in s2
    assert s1[a]['rushAttempts'] == 1
    assert s1[a]['passAttempts'] == 0
    assert client.delete(f'/api/players/{b}').status_code == 404


def test_delete_game_clears_selection(client):
    game = _create_game(client)
    assert client.delete(f"/api/games/{game['id']}").status_code == 200
    listing = client.get('/api/games').get_json()
    assert listing['games'] == []
    assert listing['selectedGameId'] is None
    assert client.get(f"/api/games/{game['id']}").status_code == 404


def test_export_import_round_trip(client, roster):
    game = _create_game(client, notes='Week 3')
    _log(client, game['id'], 'PASS_TD', roster['Alice']['id'], receiverId=roster['Bob']['id'], note='  deep ball ')
    res = client.get('/api/store/export')
    assert res.status_code == 200
    assert 'attachment; filename=flag5v5-stats.json' in res.headers['Content-Disposition']
    exported = json.loads(res.get_data(as_text=True))
    assert exported['games'][0]['events'][0]['note'] == 'deep ball'

    client.post('/api/store/import', json={})
    assert client.get('/api/store').get_json()['players'] == []

    res = client.post('/api/store/import', json=exported)
    assert res.get_json()['ok'] is True
    assert client.get('/api/store').get_json() == exported


def test_import_accepts_malformed_document(client):
    res = client.post('/api/store/import', json={
        'players': 'nope',
        'games': [{'id': 'g_1', 'opponent': 'Tigers', 'dateISO': '2026-10-17', 'ruleSet': 'CANADIAN',
                   'events': [{'id': 'e_1', 'ts': 5, 'type': 'FUTURE_PLAY', 'playerId': 'p_x'}]}],
    })
    assert res.status_code == 200
    data = res.get_json()
    assert data['ok'] is False
    assert data['issues']
    assert data['games'] == 1

    game = client.get('/api/games/g_1').get_json()
    assert game['ruleSet'] == 'NFL_FLAG'
    assert game['date'] == '2026-10-17'
    assert game['events'][0]['type'] == 'FUTURE_PLAY'
    assert game['events'][0]['label'] == 'FUTURE_PLAY'
    # Unknown play is kept but scores nothing; its player still gets a row
    rows = {r['playerId']: r for r in game['boxScore']}
    assert rows['p_x']['onRoster'] is False
    assert rows['p_x']['stats']['points'] == 0


def test_import_non_object_document_gives_empty_store(client, roster):
    res = client.post('/api/store/import', json=[1, 2, 3])
    assert res.status_code == 200
    assert res.get_json()['players'] == 0
    assert client.get('/api/players').get_json() == []


def test_import_rejects_non_json_upload(client):
    res = client.post('/api/store/import', data='{not json', content_type='application/json')
    assert res.status_code == 400


def test_log_event_rejects_non_finite_yards(client, roster):
    game = _create_game(client)
    a = roster['Alice']['id']
    for literal in ('NaN', 'Infinity', '-Infinity'):
        res = client.post(
            f"/api/games/{game['id']}/events",
            data=f'{{"type": "SACK", "playerId": "{a}", "yards": {literal}}}',
            content_type='application/json',
        )
        assert res.status_code == 400
    assert client.get(f"/api/games/{game['id']}").get_json()['events'] == []


def test_import_with_non_finite_numbers_loads(client):
    body = (
        '{"players": [{"id": "p_a", "name": "Alice"}], "games": [{"id": "g_1", "opponent": "Tigers",'
        ' "date": "2026-10-17", "ruleSet": "NFL_FLAG", "events": ['
        '{"id": "e_1", "timestamp": Infinity, "type": "RUSH_ATT", "playerId": "p_a", "yards": NaN},'
        '{"id": "e_2", "ts": -Infinity, "type": "RUSH_TD", "playerId": "p_a", "yards": Infinity}]}]}'
    )
    res = client.post('/api/store/import', data=body, content_type='application/json')
    assert res.status_code == 200
    assert res.get_json()['events'] == 2

    game = client.get('/api/games/g_1').get_json()
    assert {e['id'] for e in game['events']} == {'e_1', 'e_2'}
    for event in game['events']:
        assert event['timestamp'] == 0
        assert 'yards' not in event
    assert game['teamPoints'] == 6


def test_import_original_newest_first_log_displays_latest_first(client):
    res = client.post('/api/store/import', json={
        'players': [{'id': 'p_a', 'name': 'Alice'}],
        'games': [
            {'id': 'g_new', 'opponent': 'Tigers', 'dateISO': '2026-10-17', 'ruleSet': 'NFL_FLAG', 'events': [
                {'id': 'e_new', 'ts': 2000, 'type': 'RUSH_TD', 'playerId': 'p_a'},
                {'id': 'e_old', 'ts': 1000, 'type': 'RUSH_ATT', 'playerId': 'p_a'},
            ]},
            {'id': 'g_old', 'opponent': 'Bears', 'dateISO': '2026-10-10', 'ruleSet': 'NFL_FLAG', 'events': [
                {'id': 'e_old', 'ts': 1000, 'type': 'RUSH_ATT', 'playerId': 'p_a'},
                {'id': 'e_new', 'ts': 2000, 'type': 'RUSH_TD', 'playerId': 'p_a'},
            ]},
        ],
    })
    assert res.get_json()['ok'] is True
    for game_id in ('g_new', 'g_old'):
        events = client.get(f'/api/games/{game_id}').get_json()['events']
        assert [e['id'] for e in events] == ['e_new', 'e_old']


def test_logged_event_lands_on_top_of_imported_log(client):
    client.post('/api/store/import', json={
        'players': [{'id': 'p_a', 'name': 'Alice'}],
        'games': [{'id': 'g_1', 'opponent': 'Tigers', 'dateISO': '2026-10-17', 'ruleSet': 'NFL_FLAG', 'events': [
            {'id': 'e_old', 'ts': 1000, 'type': 'RUSH_ATT', 'playerId': 'p_a'},
        ]}],
    })
    logged = _log(client, 'g_1', 'SACK', 'p_a').get_json()
    events = client.get('/api/games/g_1').get_json()['events']
    assert [e['id'] for e in events] == [logged['id'], 'e_old']
    exported = client.get('/api/store').get_json()
    assert [e['id'] for e in exported['games'][0]['events']] == [logged['id'], 'e_old']
