"""Serve command: run the HTTP API under uvicorn with several worker processes.

uvicorn's supervisor forks the workers and replaces any that die; each worker
builds its own app from the config named by GSA_API_CONFIG.
"""

import logging
import os

import click
import uvicorn

from gsa_api.config.loader import CONFIG_ENV_VAR, load_config_with_overrides
from gsa_api.logging_config import attach_access_log

logger = logging.getLogger(__name__)

APP_FACTORY = "gsa_api.api.app:create_app_from_env"


@click.command('serve')
@click.option('--host', default=None, help='Interface to bind (overrides config)')
@click.option('--port', type=int, default=None, help='Port to listen on (overrides config)')
@click.option(
    '--workers',
    type=int,
    default=None,
    help='Number of worker processes (default: config value, else one per CPU)'
)
@click.pass_context
def serve(ctx, host, port, workers):
    """Start the HTTP API."""
    config_path = ctx.obj['config_path']

    try:
        config = load_config_with_overrides(config_path, {
            "server.host": host,
            "server.port": port,
            "server.workers": workers,
        })
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)
        return

    n_workers = config.server.workers or os.cpu_count() or 1
    access_log = attach_access_log(config.log_dir)

    # Workers load their own config; point them at the same file
    os.environ[CONFIG_ENV_VAR] = str(config_path)

    click.echo(click.style("=== GSA API ===", bold=True))
    click.echo(f"Listening on http://{config.server.host}:{config.server.port}")
    click.echo(f"Workers: {n_workers}")
    click.echo(f"Access log: {access_log}")
    logger.info(f"Master setting up {n_workers} workers")

    uvicorn.run(
        APP_FACTORY,
        factory=True,
        host=config.server.host,
        port=config.server.port,
        workers=n_workers,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )
