"""
Command line entry point.

Commands:
    status-dashboard serve              Run the dashboard web server
    status-dashboard check [PATH]       Validate a status.json file
    status-dashboard publish-default    Write the sample snapshot to the status path
    status-dashboard poll               Poll the status endpoint like the automation does
"""

import json

import click

from .app import create_app
from .config import ConfigError, load_config
from .logs import configure_logging
from .poller import DEFAULT_URL, poll_forever, poll_once
from .provider import attempt_load
from .snapshot import check_snapshot, default_snapshot, write_status


@click.group()
@click.pass_context
def cli(ctx):
    """Eden status dashboard."""
    try:
        ctx.obj = load_config()
    except ConfigError as e:
        raise click.UsageError(str(e))
    configure_logging(ctx.obj.log_file)


@cli.command('serve')
@click.option('--host', default=None, help='Bind address (default: DASHBOARD_HOST or 127.0.0.1)')
@click.option('--port', default=None, type=int, help='Bind port (default: DASHBOARD_PORT or 5001)')
@click.option('--debug', is_flag=True, help='Run Flask in debug mode')
@click.pass_obj
def serve(config, host, port, debug):
    if not config.secret:
        click.echo('DASHBOARD_SECRET is not set; every page except /login and /api/ will redirect.', err=True)
    app = create_app(config)
    app.run(host=host or config.host, port=port or config.port, debug=debug)


@cli.command('check')
@click.argument('path', required=False)
@click.pass_obj
def check(config, path):
    """Validate a snapshot file (default: the configured status path)."""
    path = path or config.status_path
    result = attempt_load(path)
    if not result.ok:
        click.echo(f'{path}: {result.reason}: {result.detail}')
        raise SystemExit(1)

    problems = check_snapshot(result.data)
    for problem in problems:
        click.echo(f'{path}: {problem}')
    if problems:
        raise SystemExit(1)
    click.echo(f'{path}: ok ({len(result.data["prs"])} PRs, {len(result.data["tasks"])} tasks)')


@cli.command('publish-default')
@click.argument('path', required=False)
@click.option('--print', 'print_only', is_flag=True, help='Print the snapshot instead of writing it')
@click.pass_obj
def publish_default(config, path, print_only):
    snapshot = default_snapshot()
    if print_only:
        click.echo(json.dumps(snapshot, indent=2))
        return
    written = write_status(snapshot, path or config.status_path)
    click.echo(f'Status written to {written}')


@cli.command('poll')
@click.option('--url', default=DEFAULT_URL, help='Status endpoint URL')
@click.option('--interval', default=15, type=int, help='Seconds between polls')
@click.option('--once', is_flag=True, help='Poll a single time and exit')
@click.option('--insecure', is_flag=True, help='Skip TLS certificate verification')
def poll(url, interval, once, insecure):
    if once:
        lines = []
        if poll_once(url, verify=not insecure, buffer=lines) is None:
            raise SystemExit(1)
        for line in lines:
            click.echo(line)
        return
    poll_forever(url, interval=interval, verify=not insecure)


def main():
    cli()


if __name__ == '__main__':
    main()
