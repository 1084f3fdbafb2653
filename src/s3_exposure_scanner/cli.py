"""
Command-line interface for the S3 exposure scanner
"""

import logging
import sys
from typing import IO, Iterator

import click
from rich.console import Console

from . import __version__
from .core.config import DEFAULT_CONCURRENCY, ScanConfig
from .core.engine import ScanEngine
from .core.exceptions import BootstrapError
from .core.output import Reporter
from .core.pipeline import BucketPipeline
from .core.provider import AWSProvider


console = Console()


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logging.getLogger('s3_exposure_scanner').setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )

    # Reduce noise from boto3
    logging.getLogger('boto3').setLevel(logging.WARNING)
    logging.getLogger('botocore').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)


def stdin_is_interactive(stream: IO) -> bool:
    return stream.isatty()


def read_bucket_names(stream: IO) -> Iterator[str]:
    """Yield one bucket name per non-blank input line"""
    for line in stream:
        name = line.strip()
        if name:
            yield name


@click.command()
@click.version_option(version=__version__)
@click.option('-a', 'aggressive', is_flag=True,
              help='Be aggressive and attempt to write to the bucket/object policy')
@click.option('-v', 'verbose', is_flag=True, help='See more info on attempts')
@click.option('-c', 'concurrency', type=click.IntRange(min=1), default=DEFAULT_CONCURRENCY,
              show_default=True, help='Set the concurrency level')
@click.option('-q', 'quick', is_flag=True,
              help='Quick mode just checks the bucket ACL and for a directory listing. '
                   'No enumeration of objects')
def cli(aggressive, verbose, concurrency, quick):
    """Check S3 buckets named on stdin for public exposure"""
    # undecodable bytes must not end the scan for the lines after them
    stdin = click.get_text_stream('stdin', errors='replace')
    if stdin_is_interactive(stdin):
        click.echo("No input detected. Please provide a list of bucket names via stdin.")
        sys.exit(1)

    configure_logging(verbose)

    config = ScanConfig(
        verbose=verbose,
        aggressive=aggressive,
        quick=quick,
        concurrency=concurrency,
    )
    reporter = Reporter(verbose=config.verbose, console=console)

    try:
        provider = AWSProvider()
        pipeline = BucketPipeline(config, provider, reporter)
        ScanEngine(config, pipeline).run_scan(read_bucket_names(stdin))
    except BootstrapError as e:
        click.echo(f"Unable to load SDK config, {e}", err=True)
        sys.exit(1)


def main():
    """Main CLI entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted by user[/yellow]")
        sys.exit(1)


if __name__ == "__main__":
    main()
