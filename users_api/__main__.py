"""
Run the users API: python -m users_api
"""
import sys
from typing import Optional

import click

from logrouter import LogRouter
from users_api.api import create_app, run_server
from users_api.config import ConfigError, load_config


@click.command()
@click.option('--config', 'config_path', type=click.Path(), default=None,
              help='Path to config.yml')
@click.option('--production/--no-production', default=None,
              help='Also write logs to the log file')
@click.option('--host', default=None, help='Host to bind to')
@click.option('--port', type=int, default=None, help='Port to bind to')
@click.option('--log-file', default=None, help='Log file used in production mode')
def main(config_path: Optional[str], production: Optional[bool], host: Optional[str],
         port: Optional[int], log_file: Optional[str]):
    """Run the users API with access logging"""
    try:
        settings = load_config(config_path).override(
            production=production, host=host, port=port, log_file=log_file
        )
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    router = LogRouter(log_file=settings.log_file, level=settings.log_level)
    try:
        router.configure(production=settings.production)
    except OSError as e:
        click.echo(f"Cannot open log file {settings.log_file}: {e}", err=True)
        sys.exit(1)

    try:
        run_server(create_app(router), host=settings.host, port=settings.port)
    except OSError as e:
        click.echo(f"Cannot bind {settings.host}:{settings.port}: {e}", err=True)
        sys.exit(1)
    finally:
        router.close()


if __name__ == '__main__':
    main()
