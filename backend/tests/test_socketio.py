def _events(sio_client, name):
    return [pkt for pkt in sio_client.get_received('/ws') if pkt['name'] == name]


def test_connect_receives_initial_state(client, sio_client):
    assert sio_client.is_connected('/ws')
    initial = _events(sio_client, 'initial_state')
    assert len(initial) == 1
    state = initial[0]['args'][0]
    assert state['students'] == []
    assert state['groups'] == []
    assert state['active_sessions'] == []
    assert len(state['letter_pairs']) == 10
    assert 'יח' in state['letter_pairs']


def test_ping_answers_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    pongs = _events(sio_client, 'pong')
    assert pongs and pongs[0]['args'][0] == {'n': 1}


def test_roster_changes_are_broadcast(client, sio_client):
    sio_client.get_received('/ws')
    client.post('/api/students/register', json={'name': 'Dana'})
    updates = _events(sio_client, 'students_updated')
    assert updates
    assert [s['name'] for s in updates[-1]['args'][0]] == ['Dana']


def test_session_start_and_end_are_broadcast(client, sio_client):
    ids = [client.post('/api/students/register', json={'name': f's{i}'}).get_json()['id'] for i in range(4)]
    client.post('/api/groups', json={'type': 'nominal', 'member_ids': ids})
    sio_client.get_received('/ws')

    session = client.post('/api/session/start', json={'duration': 60}).get_json()
    client.post(f"/api/session/end/{session['id']}")

    names = [pkt['name'] for pkt in sio_client.get_received('/ws')]
    assert 'session_started' in names
    assert 'session_ended' in names
    assert names.index('session_started') < names.index('session_ended')


def test_reset_is_broadcast(client, sio_client):
    sio_client.get_received('/ws')
    client.post('/api/reset')
    assert _events(sio_client, 'system_reset')
