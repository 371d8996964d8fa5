#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for CrispAlign.

This module provides the main CLI entry point and all subcommands for
aligning CRISPR spacer groups.
"""

import sys
import click
from pathlib import Path
import yaml

from .version import __version__
from .config.parser import ConfigParser
from .config.schema import TEMPLATES, load_config, save_config_template, validate_config
from .errors import ColumnCountError, ConfigurationError
from .utils.pipeline import AlignmentPipeline


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    CrispAlign: frequency-guided alignment of CRISPR spacer groups

    Aligns spacer groups based on the frequency with which they follow other
    groups. If a sample has group F with nothing preceding it, but F follows
    group Q in 2 reads and group Z in 10 reads across the dataset, Z is
    assumed to be missing from the sample and is inserted as an inferred
    group, so F lines up with the other F's that follow Z.
    """
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='crispalign_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t', type=click.Choice(TEMPLATES), default='default',
              help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
        click.echo(f"✓ Configuration file created: {output}")
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except ConfigurationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")
    click.echo("\nKey Settings:")
    click.echo(f"  Columns: {config['alignment']['numcols']}")
    click.echo(f"  Chain start: {config['alignment']['chain_start']}")
    click.echo(f"  Output format: {config['output']['format']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except ConfigurationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    click.echo("\nAlignment:")
    click.echo(f"  Columns: {config['alignment']['numcols']}")
    click.echo(f"  Chain start: {config['alignment']['chain_start']}")

    active = {k: v for k, v in config['filters'].items() if v is not None}
    click.echo("\nFilters:")
    if active:
        for name, value in active.items():
            click.echo(f"  {name}: {value}")
    else:
        click.echo("  none")

    click.echo("\nOutput:")
    click.echo(f"  Format: {config['output']['format']}")
    click.echo(f"  Sort: {config['output']['sort'] or 'input order'}")
    click.echo(f"  Column width: {config['output']['colwidth']}")


# ============================================================================
# Alignment Command
# ============================================================================

@main.command()
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--outfile', '-o', type=click.Path(), help='Output filename')
@click.option('--format', '-f', 'fmt', type=click.Choice(['console', 'csv', 'xlsx']),
              help='Output format (default: console)')
@click.option('--locus', '-l', type=int, help='Only align samples from this locus')
@click.option('--ratio', '-r', type=int, help='Only align samples with this MOI ratio')
@click.option('--timepoint', '-t', type=int, help='Only align samples from this timepoint')
@click.option('--numcols', '-n', type=click.IntRange(min=1), help='Number of group columns (default: 6)')
@click.option('--colwidth', '-w', type=click.IntRange(min=1), help='Column width for console output (default: 15)')
@click.option('--colors', '-c', type=click.Path(dir_okay=False),
              help='Read/write colors from/to this JSON file')
@click.option('--sort', '-s', type=click.Choice(['group', 'groups']),
              help="Sort results; only 'group' for now")
@click.option('--chain-start', type=click.Choice(['first', 'last']),
              help='Which end of a record holds the oldest group (default: last)')
@click.option('--threads', type=click.IntRange(min=1), help='Worker processes for frequency counting')
@click.option('--config', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--log-file', type=click.Path(), help='Also write log messages to this file')
@click.pass_context
def align(ctx, input_file, outfile, fmt, locus, ratio, timepoint, numcols, colwidth,
          colors, sort, chain_start, threads, config_file, log_file):
    """
    Align spacer groups in INPUT_FILE.

    \b
    Input is TAB-delimited:
      sample    count    group1:group2:[...]:groupN
    or, for files ending in .csv:
      sample,count,group1,group2,[...],groupN

    \b
    Locus, ratio and timepoint filters expect sample names like
      CR_[LOCUS]_MOI[RATIO]_tp_[TIMEPOINT]
    """
    try:
        parser = ConfigParser(config_file)
    except ConfigurationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    log_level = None
    if ctx.obj.get('VERBOSE'):
        log_level = 'DEBUG'
    elif ctx.obj.get('QUIET'):
        log_level = 'ERROR'

    parser.merge_cli_overrides({
        'alignment.numcols': numcols,
        'alignment.chain_start': chain_start,
        'filters.locus': locus,
        'filters.ratio': ratio,
        'filters.timepoint': timepoint,
        'output.format': fmt,
        'output.outfile': outfile,
        'output.colwidth': colwidth,
        'output.colors': colors,
        'output.sort': sort,
        'output.logging.level': log_level,
        'output.logging.log_file': log_file,
        'hardware.threads': threads,
    })

    errors = validate_config(parser.to_dict())
    if errors:
        for error in errors:
            click.echo(f"✗ {error}", err=True)
        sys.exit(1)

    pipeline = AlignmentPipeline(parser.to_dict())
    try:
        result = pipeline.run(input_file)
    except ColumnCountError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if result.output_path:
        click.echo(f"Wrote output to {result.output_path}")


if __name__ == '__main__':
    main()
