import json

from obs_timer.services.sessions import get_session


def test_create_and_show(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['timer', 'create', 'countdown'])
    assert result.exit_code == 0
    sid = result.output.strip()
    assert get_session(sid) is not None

    shown = runner.invoke(args=['timer', 'show', sid])
    assert shown.exit_code == 0
    assert shown.output.rstrip().endswith('05:00.00')


def test_start_pause_reset(flask_app):
    runner = flask_app.test_cli_runner()
    sid = runner.invoke(args=['timer', 'create', 'stopwatch']).output.strip()

    started = json.loads(runner.invoke(args=['timer', 'start', sid]).output)
    assert started['isRunning'] is True and started['startTime'] is not None
    paused = json.loads(runner.invoke(args=['timer', 'pause', sid]).output)
    assert paused['isRunning'] is False and paused['pausedAt'] >= paused['startTime']
    reset = json.loads(runner.invoke(args=['timer', 'reset', sid]).output)
    assert (reset['startTime'], reset['pausedAt']) == (None, None)


def test_duration_command(flask_app):
    runner = flask_app.test_cli_runner()
    sid = runner.invoke(args=['timer', 'create', 'countdown']).output.strip()
    result = runner.invoke(args=['timer', 'duration', sid, '--minutes', '2', '--seconds', '5'])
    assert json.loads(result.output)['duration'] == 125_000

    sw = runner.invoke(args=['timer', 'create', 'stopwatch']).output.strip()
    rejected = runner.invoke(args=['timer', 'duration', sw, '--minutes', '1'])
    assert rejected.exit_code != 0
    assert 'countdown' in rejected.output


def test_unknown_session(flask_app):
    result = flask_app.test_cli_runner().invoke(args=['timer', 'show', 'missing'])
    assert result.exit_code != 0
    assert 'not found' in result.output
