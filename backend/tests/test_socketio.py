from turnclock import socketio


def _events(test_client, name):
    return [pkt['args'][0] if pkt['args'] else None
            for pkt in test_client.get_received('/ws') if pkt['name'] == name]


def _connect(flask_app):
    c = socketio.test_client(flask_app, namespace='/ws')
    c.get_received('/ws')  # flush connect greeting
    return c


def test_socket_connect_receives_state(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    received = sio_client.get_received('/ws')
    names = [pkt['name'] for pkt in received]
    assert 'connected' in names
    assert 'players_data' in names
    status = next(pkt['args'][0] for pkt in received if pkt['name'] == 'game_status')
    assert status == {'phase': 'idle', 'activePlayerId': None}


def test_register_broadcasts_roster(flask_app):
    alice = _connect(flask_app)
    bob = _connect(flask_app)
    alice.emit('register_player', 'Alice', namespace='/ws')
    bob.emit('register_player', {'name': 'Bob', 'initialMs': 5000}, namespace='/ws')

    snapshots = _events(alice, 'players_data')
    latest = snapshots[-1]
    assert [p['name'] for p in latest] == ['Alice', 'Bob']
    assert latest[0]['remainingMs'] == 600000
    assert latest[1]['remainingMs'] == 5000
    assert all(not p['isActive'] for p in latest)
    # Observers also get it
    assert _events(bob, 'players_data')[-1] == latest


def test_register_with_bad_payload_uses_defaults(flask_app, app_engine):
    c = _connect(flask_app)
    c.emit('register_player', {'name': 42, 'initialMs': 'soon'}, namespace='/ws')
    player = app_engine.state.roster[0]
    assert player.name == 'Player_1'
    assert player.remaining_ms == 600000


def test_start_with_one_player_errors_to_caller_only(flask_app, app_engine):
    alice = _connect(flask_app)
    watcher = _connect(flask_app)
    alice.emit('register_player', 'Alice', namespace='/ws')
    watcher.get_received('/ws')
    alice.get_received('/ws')

    alice.emit('start_game', namespace='/ws')
    errors = _events(alice, 'error_message')
    assert len(errors) == 1
    assert 'At least 2' in errors[0]
    assert _events(watcher, 'error_message') == []
    assert app_engine.state.active_index is None


def test_full_turn_flow(flask_app, app_engine):
    alice = _connect(flask_app)
    bob = _connect(flask_app)
    alice.emit('register_player', 'Alice', namespace='/ws')
    bob.emit('register_player', 'Bob', namespace='/ws')

    alice.emit('start_game', namespace='/ws')
    latest = _events(bob, 'players_data')[-1]
    assert [p['isActive'] for p in latest] == [True, False]

    app_engine.clock.advance(3)
    latest = _events(bob, 'players_data')[-1]
    assert latest[0]['remainingMs'] == 597000

    bob.emit('toggle_pause', namespace='/ws')
    statuses = _events(alice, 'game_status')
    assert statuses[-1]['phase'] == 'paused'
    assert app_engine.clock.advance(1) == 0

    bob.emit('toggle_pause', namespace='/ws')
    assert _events(alice, 'game_status')[-1]['phase'] == 'running'

    alice.emit('next_player', namespace='/ws')
    latest = _events(alice, 'players_data')[-1]
    assert [p['isActive'] for p in latest] == [False, True]
    assert latest[0]['remainingMs'] == 597000


def test_disconnect_of_active_player_passes_turn(flask_app, app_engine):
    alice = _connect(flask_app)
    bob = _connect(flask_app)
    cara = _connect(flask_app)
    for c, name in ((alice, 'Alice'), (bob, 'Bob'), (cara, 'Cara')):
        c.emit('register_player', name, namespace='/ws')
    alice.emit('start_game', namespace='/ws')
    alice.emit('next_player', namespace='/ws')
    bob.get_received('/ws')
    cara.get_received('/ws')

    bob.disconnect(namespace='/ws')
    latest = _events(cara, 'players_data')[-1]
    assert [p['name'] for p in latest] == ['Alice', 'Cara']
    assert [p['isActive'] for p in latest] == [False, True]
    assert app_engine.clock.running


def test_get_state_replies_to_caller(flask_app, app_engine):
    c = _connect(flask_app)
    app_engine.register('external', 'Dana')
    c.get_received('/ws')
    c.emit('get_state', namespace='/ws')
    assert _events(c, 'players_data') == [app_engine.snapshot()]
