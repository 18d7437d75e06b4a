"""One-off query commands: organisms, title and enrich.

These run the same code paths as the HTTP routes without starting a server.
"""

import asyncio
import json
import sys

import click

from gsa_api.api.responses import tsv_to_records
from gsa_api.config.loader import load_config
from gsa_api.enrichment import (
    EnrichmentInvoker,
    EnrichmentRequest,
    ResultTransformer,
    query_overlapping_comparisons,
)
from gsa_api.errors import GSAError, ParameterValidationError
from gsa_api.organisms import format_organisms, list_organisms
from gsa_api.titles import load_contrast_titles
from gsa_api.validation import ParameterValidator


def _load(ctx):
    try:
        return load_config(ctx.obj['config_path'])
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)


def _check(validator: ParameterValidator, params: dict) -> None:
    try:
        validator.validate(params).raise_for_errors()
    except ParameterValidationError as e:
        for error in e.errors:
            click.echo(click.style(f"{error['param']}: {error['msg']}", fg='red'), err=True)
        sys.exit(2)


@click.command('organisms')
@click.pass_context
def organisms(ctx):
    """List organisms with a gene-set database."""
    config = _load(ctx)
    try:
        names = list_organisms(config.data_dir)
    except GSAError as e:
        click.echo(click.style(f"Error retrieving available organisms: {e}", fg='red'), err=True)
        sys.exit(1)
    click.echo(format_organisms(names), nl=False)


@click.command('title')
@click.argument('expacc')
@click.argument('contrast_id')
@click.pass_context
def title(ctx, expacc, contrast_id):
    """Print the title of comparison CONTRAST_ID in experiment EXPACC."""
    config = _load(ctx)
    _check(
        ParameterValidator(max_genes=config.max_genes),
        {"EXPACC": expacc, "CONTRASTID": contrast_id},
    )
    index = load_contrast_titles(config.titles_path)
    click.echo(index.get(expacc, contrast_id) or "")


@click.command('enrich')
@click.argument('organism')
@click.argument('gene_ids', nargs=-1, required=True)
@click.option(
    '--format', 'fmt',
    type=click.Choice(['tsv', 'json']),
    default='tsv',
    help='Output format (default: tsv)'
)
@click.pass_context
def enrich(ctx, organism, gene_ids, fmt):
    """Find comparisons overlapping GENE_IDS in ORGANISM and print them."""
    config = _load(ctx)
    genes = " ".join(gene_ids)
    _check(
        ParameterValidator(max_genes=config.max_genes),
        {"FORMAT": fmt, "ORGANISM": organism, "GENE_IDS": genes},
    )

    request = EnrichmentRequest(organism=organism, gene_ids_raw=genes, format=fmt)
    invoker = EnrichmentInvoker.from_config(config)
    transformer = ResultTransformer(
        title_index=load_contrast_titles(config.titles_path),
        atlas_base_url=config.atlas_base_url,
    )

    try:
        result = asyncio.run(query_overlapping_comparisons(request, invoker, transformer))
    except GSAError as e:
        click.echo(click.style(str(e), fg='red'), err=True)
        sys.exit(1)

    if fmt == 'json':
        click.echo(json.dumps(tsv_to_records(result.text), indent=2))
    else:
        click.echo(result.text)
