def _create(client, mode):
    res = client.post('/api/sessions', json={'mode': mode})
    assert res.status_code == 200
    return res.get_json()['session']


def test_create_session_defaults(client):
    session = _create(client, 'countdown')
    assert len(session['id']) == 10
    assert session['mode'] == 'countdown'
    assert session['isRunning'] is False
    assert session['startTime'] is None and session['pausedAt'] is None
    assert session['duration'] == 300_000
    assert session['showMilliseconds'] is True
    assert session['fontSize'] == 48
    assert session['theme'] == 'dark'
    assert session['createdAt'] and session['updatedAt']


def test_create_stopwatch_has_no_duration(client):
    assert _create(client, 'stopwatch')['duration'] is None


def test_create_rejects_unknown_mode(client):
    res = client.post('/api/sessions', json={'mode': 'hourglass'})
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Invalid timer mode'
    assert client.post('/api/sessions', json={}).status_code == 400


def test_get_session(client):
    session = _create(client, 'clock')
    res = client.get(f"/api/sessions/{session['id']}")
    assert res.status_code == 200
    assert res.get_json()['session']['id'] == session['id']


def test_unknown_session_is_404(client):
    assert client.get('/api/sessions/nope').status_code == 404
    assert client.patch('/api/sessions/nope', json={'fontSize': 60}).status_code == 404
    assert client.post('/api/sessions/nope/commands', json={'action': 'start'}).status_code == 404
    assert client.get('/api/sessions/nope/display').status_code == 404


def test_patch_merges_and_clears(client):
    sid = _create(client, 'stopwatch')['id']
    res = client.patch(f'/api/sessions/{sid}', json={'isRunning': True, 'startTime': 1_000})
    assert res.status_code == 200
    patched = res.get_json()['session']
    assert patched['isRunning'] is True and patched['startTime'] == 1_000
    assert patched['fontSize'] == 48

    cleared = client.patch(f'/api/sessions/{sid}', json={'isRunning': False, 'startTime': None}).get_json()['session']
    assert cleared['startTime'] is None


def test_patch_validation(client):
    sid = _create(client, 'stopwatch')['id']
    assert client.patch(f'/api/sessions/{sid}', json={'fontSize': 200}).status_code == 400
    assert client.patch(f'/api/sessions/{sid}', json={'id': 'other'}).status_code == 400
    assert client.patch(f'/api/sessions/{sid}', json={'mode': 'sundial'}).status_code == 400
    assert client.patch(f'/api/sessions/{sid}', data='not json').status_code == 400


def test_extended_theme_round_trips(client):
    sid = _create(client, 'clock')['id']
    theme = {'base': 'dark', 'textColor': '#FFCC00', 'backgroundColor': '#000',
             'borderColor': '#123456', 'borderWidth': 4, 'shadow': True}
    client.patch(f'/api/sessions/{sid}', json={'theme': theme})
    assert client.get(f'/api/sessions/{sid}').get_json()['session']['theme'] == theme


def test_commands_drive_a_stopwatch(client):
    sid = _create(client, 'stopwatch')['id']
    url = f'/api/sessions/{sid}/commands'
    s = client.post(url, json={'action': 'start', 'now': 1_000}).get_json()['session']
    assert (s['isRunning'], s['startTime']) == (True, 1_000)
    s = client.post(url, json={'action': 'pause', 'now': 1_500}).get_json()['session']
    assert (s['isRunning'], s['pausedAt']) == (False, 1_500)
    s = client.post(url, json={'action': 'start', 'now': 2_000}).get_json()['session']
    assert (s['isRunning'], s['startTime'], s['pausedAt']) == (True, 1_500, None)
    s = client.post(url, json={'action': 'reset'}).get_json()['session']
    assert (s['isRunning'], s['startTime'], s['pausedAt']) == (False, None, None)


def test_commands_change_mode_and_duration(client):
    sid = _create(client, 'clock')['id']
    url = f'/api/sessions/{sid}/commands'
    s = client.post(url, json={'action': 'changeMode', 'mode': 'countdown'}).get_json()['session']
    assert (s['mode'], s['duration']) == ('countdown', 300_000)
    s = client.post(url, json={'action': 'setCountdownDuration', 'duration': 60_000}).get_json()['session']
    assert s['duration'] == 60_000


def test_command_errors(client):
    sid = _create(client, 'stopwatch')['id']
    url = f'/api/sessions/{sid}/commands'
    assert client.post(url, json={'action': 'setCountdownDuration', 'duration': 1_000}).status_code == 400
    assert client.post(url, json={'action': 'configure', 'fontSize': 10}).status_code == 400
    assert client.post(url, json={'action': 'launch'}).status_code == 400
    assert client.post(url, json={'action': 'start', 'now': 'soon'}).status_code == 400


def test_display_sample(client):
    sid = _create(client, 'countdown')['id']
    body = client.get(f'/api/sessions/{sid}/display').get_json()
    assert body['displayMs'] == 300_000
    assert body['expired'] is False
    assert body['text'] == '05:00.00'
    assert (body['mode'], body['fontSize'], body['theme']) == ('countdown', 48, 'dark')


def test_display_sample_of_expired_countdown(client):
    sid = _create(client, 'countdown')['id']
    client.post(f'/api/sessions/{sid}/commands', json={'action': 'start', 'now': 0})
    body = client.get(f'/api/sessions/{sid}/display').get_json()
    assert (body['displayMs'], body['expired'], body['text']) == (0, True, '00:00.00')


def test_embed_links(client):
    sid = _create(client, 'clock')['id']
    body = client.get(f'/api/sessions/{sid}/embed').get_json()
    assert body['viewUrl'] == f'http://localhost/view/{sid}'
    assert body['controlUrl'] == f'http://localhost/control/{sid}'
    assert f'paste this URL: http://localhost/view/{sid}' in body['instructions']
    assert 'width to 800 and height to 200' in body['instructions']


def test_pause_before_start_is_stamped_at_start(client):
    sid = _create(client, 'stopwatch')['id']
    url = f'/api/sessions/{sid}/commands'
    client.post(url, json={'action': 'start', 'now': 5_000})
    s = client.post(url, json={'action': 'pause', 'now': 1_000}).get_json()['session']
    assert s['pausedAt'] >= s['startTime']
    s = client.post(url, json={'action': 'start', 'now': 6_000}).get_json()['session']
    assert s['startTime'] <= 6_000


def test_command_now_follows_the_anchor_rules(client):
    sid = _create(client, 'stopwatch')['id']
    url = f'/api/sessions/{sid}/commands'
    for bad in (-7, True, 1.5):
        res = client.post(url, json={'action': 'start', 'now': bad})
        assert res.status_code == 400
    assert client.get(f'/api/sessions/{sid}').get_json()['session']['startTime'] is None


def test_unknown_session_wins_over_bad_body(client):
    assert client.patch('/api/sessions/nope', json={'fontSize': 500}).status_code == 404
    assert client.patch('/api/sessions/nope', data='not json').status_code == 404
    assert client.post('/api/sessions/nope/commands', json={'action': 'start', 'now': -1}).status_code == 404
