import json
import time

import click
from flask import current_app
from flask.cli import AppGroup

from obs_timer.services.sessions import apply_command, create_session, get_session
from obs_timer.services.surfaces import DisplaySurface
from obs_timer.services.timer import TimerError, format_time, now_ms, sample
from obs_timer.services.timer.state_machine import duration_from_parts

timer_cli = AppGroup('timer', help='Create, drive and watch timer sessions.')


def _load(session_id):
    session = get_session(session_id)
    if not session:
        raise click.ClickException(f'Timer session not found: {session_id}')
    return session


def _run_command(session_id, command):
    try:
        session = apply_command(session_id, command)
    except TimerError as exc:
        raise click.ClickException(exc.message)
    if not session:
        raise click.ClickException(f'Timer session not found: {session_id}')
    click.echo(json.dumps(session.to_dict(), indent=2))


@timer_cli.command('create')
@click.argument('mode', type=click.Choice(['clock', 'stopwatch', 'countdown']))
def create_command(mode):
    """Create a session and print its id."""
    session = create_session(mode)
    click.echo(session.public_id)


@timer_cli.command('show')
@click.argument('session_id')
def show_command(session_id):
    """Print the stored record and the current display text."""
    snapshot = _load(session_id).to_dict()
    result = sample(snapshot, now_ms())
    click.echo(json.dumps(snapshot, indent=2))
    click.echo(format_time(snapshot['mode'], result.display_ms, snapshot['showMilliseconds']))


@timer_cli.command('start')
@click.argument('session_id')
def start_command(session_id):
    _run_command(session_id, {'action': 'start'})


@timer_cli.command('pause')
@click.argument('session_id')
def pause_command(session_id):
    _run_command(session_id, {'action': 'pause'})


@timer_cli.command('reset')
@click.argument('session_id')
def reset_command(session_id):
    _run_command(session_id, {'action': 'reset'})


@timer_cli.command('duration')
@click.argument('session_id')
@click.option('--hours', default=0, type=int)
@click.option('--minutes', default=0, type=int)
@click.option('--seconds', default=0, type=int)
def duration_command(session_id, hours, minutes, seconds):
    """Set a countdown's length (resets it)."""
    try:
        duration = duration_from_parts(hours, minutes, seconds)
    except TimerError as exc:
        raise click.ClickException(exc.message)
    _run_command(session_id, {'action': 'setCountdownDuration', 'duration': duration})


@timer_cli.command('watch')
@click.argument('session_id')
def watch_command(session_id):
    """Render a session in the terminal until interrupted."""
    _load(session_id)
    app = current_app._get_current_object()
    cfg = app.config

    def fetch():
        with app.app_context():
            session = get_session(session_id)
            return session.to_dict() if session else None

    def render(text):
        click.echo(f"\r{text:<16}", nl=False)

    surface = DisplaySurface(
        render, fetch,
        poll_interval=float(cfg.get('POLL_INTERVAL_SEC', 5)),
        fine_tick=float(cfg.get('FINE_TICK_SEC', 0.01)),
        coarse_tick=float(cfg.get('COARSE_TICK_SEC', 1)),
    )
    with surface:
        try:
            while True:
                time.sleep(0.5)
        except KeyboardInterrupt:
            pass
    click.echo('')
