# === FILE: docs_walker/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point of DocsWalker.

Commands:
  walk      Walk the configured site and print/save the report
  org       Walk the default-branch tree of every repository of an organisation
  config    Show the effective configuration

Common options:
  --config PATH       Path to the YAML/JSON config (default: configs/default.yaml)
  --concurrency INT   Number of simultaneous fetches (overrides the config)
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Log file (stdout only if not given)
  --log-format FORMAT Logging format (e.g. "%(asctime)s %(levelname)s %(message)s")

Report options of walk/org:
  --json PATH         Save the JSON report to a file
  --html PATH         Save the HTML report to a file
  --template DIR      Directory with Jinja2 templates
  --pretty            Indent JSON output (2 spaces)
  --walk-timeout SEC  Deadline for the whole walk (seconds)

Example:
  docs-walker --config configs/default.yaml walk --json report.json --pretty
"""
import asyncio
import json
import sys
from pathlib import Path

import click

from docs_walker import __version__
from docs_walker.config import load_config
from docs_walker.engine import Engine
from docs_walker.exceptions import RepoListingError
from docs_walker.logger import init_logging, logger
from docs_walker.report import render_html, render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def report_options(func):
    """Options shared by the commands that produce a report."""
    options = [
        click.option(
            '--json', '-j', 'json_output',
            default=None,
            type=click.Path(writable=True, dir_okay=False, path_type=Path),
            help='Save the JSON report to a file'
        ),
        click.option(
            '--html', '-h', 'html_output',
            default=None,
            type=click.Path(writable=True, dir_okay=False, path_type=Path),
            help='Save the HTML report to a file'
        ),
        click.option(
            '--template', '-t', 'template_dir',
            default=None,
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            help='Directory with Jinja2 templates (bundled template if omitted)'
        ),
        click.option(
            '--pretty', is_flag=True,
            help='Indent JSON output (2 spaces)'
        ),
        click.option(
            '--walk-timeout', 'walk_timeout',
            type=float,
            default=None,
            help='Deadline for the whole walk (seconds)'
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _run(engine: Engine, walk, *args):
    try:
        return walk(*args)
    except asyncio.TimeoutError:
        print_error(f'Walk did not finish within {engine.walk_timeout} seconds')
    except RepoListingError as e:
        print_error(f'Cannot list repositories: {e}')
    except Exception as e:
        print_error(f'Walk failed: {e}')


def _emit(report, json_output, html_output, template_dir, pretty):
    # without report files, print the list of fetched URLs
    if not json_output and not html_output:
        indent = 2 if pretty else None
        click.echo(json.dumps(report.pages, ensure_ascii=False, indent=indent))
        return

    if json_output:
        try:
            saved_json = render_json(report, json_output, pretty=pretty)
            click.echo(f'JSON report: {saved_json}')
        except Exception as e:
            print_error(f'Cannot save JSON report: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}')
        except Exception as e:
            print_error(f'Cannot save HTML report: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='DocsWalker, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default='configs/default.yaml',
    show_default=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to the YAML/JSON config file.'
)
@click.option(
    '--concurrency', '-n', 'concurrency',
    type=click.IntRange(min=1),
    default=None,
    help='Number of simultaneous fetches (overrides concurrency)'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Path of the log file (stdout only if not given)'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Format string for log lines'
)
@click.pass_context
def cli(ctx, config_path, concurrency, log_level, log_file, log_format):
    """DocsWalker command group."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        cfg = load_config(config_path)
    except Exception as e:
        print_error(f'Cannot load configuration: {e}')
    if concurrency is not None:
        cfg = cfg.model_copy(update={'concurrency': concurrency})
    ctx.ensure_object(dict)
    ctx.obj['config'] = cfg


@cli.command('walk', context_settings=CONTEXT_SETTINGS)
@report_options
@click.pass_context
def walk(ctx, json_output, html_output, template_dir, pretty, walk_timeout):
    """Walk the configured site and produce reports."""
    cfg = ctx.obj['config']
    engine = Engine(cfg, walk_timeout)
    report = _run(engine, engine.run)
    _emit(report, json_output, html_output, template_dir, pretty)


@cli.command('org', context_settings=CONTEXT_SETTINGS)
@click.argument('org')
@click.option(
    '--repo', '-r', 'repos',
    multiple=True,
    help='Only walk these repositories (repeatable)'
)
@report_options
@click.pass_context
def walk_organisation(ctx, org, repos, json_output, html_output, template_dir, pretty, walk_timeout):
    """Walk the default-branch tree of every repository of ORG."""
    cfg = ctx.obj['config']
    logger.info("Listing repositories of %s", org)
    engine = Engine(cfg, walk_timeout)
    report = _run(engine, engine.run_org, org, repos or None)
    _emit(report, json_output, html_output, template_dir, pretty)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Show the current configuration as JSON."""
    cfg = ctx.obj['config']
    click.echo(cfg.model_dump_json(indent=2, exclude={'github': {'token'}}))


if __name__ == "__main__":
    cli()
