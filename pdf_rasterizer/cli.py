"""
Command-line interface for PDF rasterizer.
"""

import functools
import json
import logging
import os
import sys

import click
from rich.console import Console
from rich.progress import Progress, TextColumn, BarColumn, TimeRemainingColumn, TaskProgressColumn
from rich.table import Table

from pdf_rasterizer.exceptions import PDFRasterizerException
from pdf_rasterizer.ghostscript import probe_candidates
from pdf_rasterizer.page_count import PypdfPageCounter
from pdf_rasterizer.rasterizer import PDFRasterizer
from pdf_rasterizer.types import BatchStatus, FailurePolicy
from pdf_rasterizer.utils import format_duration, get_logger

console = Console()


def _page_range_options(command):
    command = click.option(
        '--start-page',
        type=click.IntRange(min=0),
        help='Number of leading pages to skip (default 0)'
    )(command)
    command = click.option(
        '--batch-size', '-b',
        type=click.IntRange(min=0),
        help='Pages per Ghostscript invocation, 0 disables batching (default 0)'
    )(command)
    command = click.option(
        '--page-counter',
        type=click.Choice(['ghostscript', 'pypdf'], case_sensitive=False),
        default='ghostscript',
        show_default=True,
        help='How to determine the page count'
    )(command)
    command = click.option(
        '--gs', 'gs_path',
        type=str,
        help='Path to the Ghostscript executable'
    )(command)
    return command


def _conversion_options(command):
    command = click.option(
        '--output-dir', '-o',
        default='./output',
        help='Output directory for page images',
        type=click.Path(file_okay=False)
    )(command)
    command = click.option(
        '--format', '-f', 'image_format',
        type=click.Choice(['jpg', 'png'], case_sensitive=False),
        default='jpg',
        show_default=True,
        help='Image format (JPEG or PNG with alpha)'
    )(command)
    command = click.option('--resolution', '-r', type=click.IntRange(min=1), help='Resolution in DPI (default 300)')(command)
    command = click.option('--quality', '-q', type=click.IntRange(0, 100), help='JPEG quality (default 100)')(command)
    command = click.option('--alpha-bits', type=click.IntRange(1, 4), help='PNG anti-aliasing bits (default 4)')(command)
    command = click.option('--keep-color-management', is_flag=True, help='Let Ghostscript convert colors')(command)
    command = click.option('--embed-fonts', is_flag=True, help='Render with embedded fonts')(command)
    command = click.option('--keep-annotations', is_flag=True, help='Render screen annotations')(command)
    return _page_range_options(command)


def _build_config(start_page=None, batch_size=None, resolution=None, quality=None,
                  alpha_bits=None, keep_color_management=False, embed_fonts=False,
                  keep_annotations=False):
    config = {
        'start_page': start_page,
        'batch_size': batch_size,
        'resolution': resolution,
        'compression_quality': quality,
        'alpha_bits': alpha_bits,
    }
    config = {key: value for key, value in config.items() if value is not None}
    if keep_color_management:
        config['disable_color_management'] = False
    if embed_fonts:
        config['disable_font_embedding'] = False
    if keep_annotations:
        config['disable_annotations'] = False
    return config


def _build_rasterizer(gs_path, page_counter, **kwargs):
    counter = PypdfPageCounter() if page_counter and page_counter.lower() == 'pypdf' else None
    return PDFRasterizer(executable=gs_path, page_counter=counter, **kwargs)


def _handle_errors(command):
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except PDFRasterizerException as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
            sys.exit(1)
        except OSError as e:
            console.print(f"\n[bold red]✗ Error:[/bold red] {e}")
            sys.exit(1)
    return wrapper


@click.group()
@click.version_option(version="1.0.0")
@click.option('--verbose', '-v', count=True, help='Increase logging verbosity (-v info, -vv debug)')
def cli(verbose):
    """
    PDF Rasterizer CLI - Convert PDF pages to images with Ghostscript.
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    get_logger("pdf_rasterizer", level)


@cli.command(name="convert")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@_conversion_options
@click.option('--fail-fast', is_flag=True, help='Skip remaining batches after the first failure')
@click.option('--workers', '-w', default=1, type=click.IntRange(min=1), help='Batches to run in parallel')
@click.option('--timeout', type=click.FloatRange(min=0, min_open=True), help='Seconds allowed per batch')
@click.option('--report', 'report_path', type=click.Path(dir_okay=False), help='Write a JSON run report')
@_handle_errors
def convert(input_pdf, output_dir, image_format, resolution, quality, alpha_bits,
            keep_color_management, embed_fonts, keep_annotations, start_page,
            batch_size, page_counter, gs_path, fail_fast, workers, timeout, report_path):
    """
    Convert a PDF into one image per page.

    Examples:

        pdf-rasterizer convert input.pdf

        pdf-rasterizer convert input.pdf -o pages -f png --alpha-bits 2

        pdf-rasterizer convert big.pdf --batch-size 50 --workers 4 --fail-fast
    """
    config = _build_config(start_page, batch_size, resolution, quality, alpha_bits,
                           keep_color_management, embed_fonts, keep_annotations)

    os.makedirs(output_dir, exist_ok=True)

    rasterizer = _build_rasterizer(
        gs_path,
        page_counter,
        failure_policy=FailurePolicy.ABORT_ON_FIRST if fail_fast else FailurePolicy.COLLECT_ALL,
        max_workers=workers,
        timeout=timeout,
    )
    rasterizer.read(input_pdf).configure(config)

    console.print(f"\n[bold cyan]Converting {os.path.basename(input_pdf)} to {image_format.upper()}...[/bold cyan]")

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeRemainingColumn(),
        console=console
    ) as progress:
        task = progress.add_task("Rendering batches", total=None)

        def update_progress(current, total, result):
            progress.update(task, total=total, completed=current)

        report = rasterizer.process(output_dir, image_format.lower(), progress_callback=update_progress)

    summary_table = Table(title="Conversion Summary", show_header=False)
    summary_table.add_column("Metric", style="cyan")
    summary_table.add_column("Value", style="green")

    summary_table.add_row("Pages", str(report.total_pages))
    summary_table.add_row("Batches", str(len(report.results)))
    summary_table.add_row("✓ Successful", f"[green]{report.succeeded}[/green]")
    summary_table.add_row("✗ Failed", f"[red]{report.failed}[/red]")
    summary_table.add_row("Skipped", str(report.skipped))
    summary_table.add_row("Total Time", format_duration(report.total_seconds))
    summary_table.add_row("Output Directory", os.path.abspath(output_dir))

    console.print(summary_table)

    if report.results:
        batch_table = Table(title="Batches", show_header=True)
        batch_table.add_column("Batch", style="cyan")
        batch_table.add_column("Pages", style="green")
        batch_table.add_column("Status")
        batch_table.add_column("Time", justify="right")
        for result in report.results:
            style = {BatchStatus.SUCCESS: "green", BatchStatus.FAILURE: "red"}.get(result.status, "yellow")
            batch_table.add_row(
                "-" if result.batch_index is None else str(result.batch_index),
                f"{result.first_page}-{result.last_page}",
                f"[{style}]{result.status.value}[/{style}]",
                format_duration(result.duration_seconds),
            )
        console.print(batch_table)

    if report.failed:
        console.print("\n[bold red]Failed Batches:[/bold red]")
        for result in report.failures:
            console.print(f"  ✗ pages {result.first_page}-{result.last_page} "
                          f"(exit code {result.exit_code}): {result.stderr_text.strip()}")

    if report_path:
        with open(report_path, 'w', encoding='utf-8') as handle:
            json.dump(report.to_dict(), handle, indent=2)
        console.print(f"[dim]Report written to {os.path.abspath(report_path)}[/dim]")

    console.print()
    sys.exit(0 if report.success else 1)


@cli.command(name="plan")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@_page_range_options
@_handle_errors
def show_plan(input_pdf, start_page, batch_size, page_counter, gs_path):
    """
    Show how the pages of a PDF would be split into batches.

    Example:

        pdf-rasterizer plan input.pdf --batch-size 25
    """
    config = _build_config(start_page, batch_size)
    rasterizer = _build_rasterizer(gs_path, page_counter).read(input_pdf).configure(config)

    total_pages = rasterizer.get_page_count()
    batches = rasterizer.plan(total_pages)

    table = Table(title=f"Batch Plan: {os.path.basename(input_pdf)} ({total_pages} pages)")
    table.add_column("Batch", style="cyan", no_wrap=True)
    table.add_column("First Page", style="green", justify="right")
    table.add_column("Last Page", style="green", justify="right")
    table.add_column("Pages", justify="right")

    for batch in batches:
        table.add_row(
            "-" if batch.batch_index is None else str(batch.batch_index),
            str(batch.first_page),
            str(batch.last_page),
            str(batch.page_count),
        )

    console.print()
    if batches:
        console.print(table)
    else:
        console.print("[bold yellow]⚠ Nothing to convert[/bold yellow]")
    console.print()


@cli.command(name="command")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@_conversion_options
@_handle_errors
def show_command(input_pdf, output_dir, image_format, resolution, quality, alpha_bits,
                 keep_color_management, embed_fonts, keep_annotations, start_page,
                 batch_size, page_counter, gs_path):
    """
    Print the Ghostscript command lines without running them.

    The lines are for display; arguments are not quoted.

    Example:

        pdf-rasterizer command input.pdf -o pages -b 10
    """
    config = _build_config(start_page, batch_size, resolution, quality, alpha_bits,
                           keep_color_management, embed_fonts, keep_annotations)
    rasterizer = _build_rasterizer(gs_path, page_counter).read(input_pdf).configure(config)

    for line in rasterizer.get_commands(output_dir, image_format.lower()):
        click.echo(line)


@cli.command(name="detect")
@click.option('--gs', 'gs_path', type=str, help='Additional Ghostscript path to probe first')
def detect(gs_path):
    """
    Probe every Ghostscript candidate and report the outcome.

    Example:

        pdf-rasterizer detect --gs /opt/gs/bin/gs
    """
    probes = probe_candidates(gs_path, stop_at_first=False)

    table = Table(title="Ghostscript Candidates")
    table.add_column("Candidate", style="cyan", no_wrap=True)
    table.add_column("Outcome")
    table.add_column("Details", style="dim")

    for probe in probes:
        style = "green" if probe.available else "red"
        table.add_row(
            probe.candidate,
            f"[{style}]{probe.outcome.value}[/{style}]",
            probe.version or probe.detail,
        )

    console.print()
    console.print(table)
    console.print()
    sys.exit(0 if any(probe.available for probe in probes) else 1)


if __name__ == '__main__':
    cli()
