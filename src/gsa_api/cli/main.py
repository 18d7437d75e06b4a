"""Main CLI entry point for gsa-api.

Provides command group with global options and subcommands for serving the
API and running single queries locally.
"""

import logging
from pathlib import Path

import click

from gsa_api import __version__
from gsa_api.config.loader import DEFAULT_CONFIG_PATH, load_config
from gsa_api.cli.serve_cmd import serve
from gsa_api.cli.query_cmd import enrich, organisms, title
from gsa_api.logging_config import configure_logging


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default=str(DEFAULT_CONFIG_PATH),
    help='Path to service configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """gsa-api: query gene set enrichment across Expression Atlas comparisons.

    Serves the HTTP API and runs one-off overlap queries and title lookups
    from the command line.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    configure_logging(verbose=verbose)
    if verbose:
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display service information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"GSA API v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Paths:", bold=True))
        click.echo(f"  Data Directory:    {config.data_dir}")
        click.echo(f"  Working Directory: {config.working_dir}")
        click.echo(f"  Contrast Titles:   {config.titles_path}")
        click.echo(f"  Log Directory:     {config.log_dir}")
        click.echo()

        click.echo(click.style("Enrichment Command:", bold=True))
        click.echo(f"  Command:         {config.gsa.command}")
        click.echo(f"  P-value:         {config.gsa.pvalue}")
        click.echo(f"  Cores:           {config.gsa.cores}")
        click.echo(f"  Concurrent Runs: {config.gsa.max_concurrent_runs}")
        timeout = config.gsa.run_timeout_seconds
        click.echo(f"  Timeout:         {f'{timeout}s' if timeout else 'none'}")
        click.echo(f"  Max Genes:       {config.max_genes}")
        click.echo()

        click.echo(click.style("Server:", bold=True))
        click.echo(f"  Listen:  {config.server.host}:{config.server.port}")
        click.echo(f"  Workers: {config.server.workers or 'one per CPU'}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


cli.add_command(serve)
cli.add_command(organisms)
cli.add_command(title)
cli.add_command(enrich)


if __name__ == '__main__':
    cli()
