"""CLI commands that act on conversion job files.

``command`` is a dry run that prints the generated command lines;
``convert`` runs the conversions.
"""

import logging
import sys
import threading
from pathlib import Path

import click

from mediaforge.cli import get_forge
from mediaforge.cli.exit_codes import ExitCode
from mediaforge.config.jobs import load_job_file
from mediaforge.domain.config import ConversionConfig
from mediaforge.errors import InvalidConfigurationError, MediaForgeError
from mediaforge.executor import BatchCallbacks, BatchExecutionEngine, BatchItemResult
from mediaforge.tools import ProgressSnapshot

logger = logging.getLogger(__name__)

# How often the waiting main thread wakes up to notice Ctrl+C
JOIN_POLL_SECONDS = 0.2


def _load_or_exit(job_file: Path) -> list[ConversionConfig]:
    try:
        return load_job_file(job_file)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid job file: {job_file}", err=True)
        for message in e.errors:
            click.echo(f"  - {message}", err=True)
        sys.exit(ExitCode.CONFIG_ERROR)


def _label(config: ConversionConfig) -> str:
    source = config.input if isinstance(config.input, str) else "<stream>"
    target = config.output if isinstance(config.output, str) else "<stream>"
    return f"{source} -> {target}"


@click.command("command")
@click.argument("job_file", type=click.Path(path_type=Path))
@click.pass_context
def command_command(ctx: click.Context, job_file: Path) -> None:
    """Validate JOB_FILE and print the ffmpeg command for each conversion.

    Nothing is executed.
    """
    configs = _load_or_exit(job_file)
    forge = get_forge(ctx)

    invalid = False
    for index, config in enumerate(configs):
        result = forge.validate_config(config)
        if not result.valid:
            invalid = True
            click.echo(f"[{index}] ✗ {_label(config)}", err=True)
            for message in result.errors:
                click.echo(f"      - {message}", err=True)
            continue
        try:
            click.echo(forge.build_command(config))
        except MediaForgeError as e:
            invalid = True
            click.echo(f"[{index}] ✗ {_label(config)}: {e}", err=True)

    if invalid:
        sys.exit(ExitCode.CONFIG_ERROR)


class _ProgressPrinter:
    """Prints batch progress, one line per whole-percent step."""

    def __init__(self, configs: list[ConversionConfig], show_progress: bool):
        self._configs = configs
        self._show_progress = show_progress
        self._last: dict[int, int] = {}
        self._lock = threading.Lock()

    def on_progress(self, index: int, snapshot: ProgressSnapshot) -> None:
        if not self._show_progress:
            return
        step = int(snapshot.percent)
        with self._lock:
            if self._last.get(index) == step:
                return
            self._last[index] = step
        click.echo(f"  [{index}] {snapshot.percent:5.1f}%", err=True)

    def on_file_complete(self, index: int) -> None:
        click.echo(f"✓ [{index}] {_label(self._configs[index])}")

    def on_file_error(self, index: int, error: MediaForgeError) -> None:
        click.echo(f"✗ [{index}] {_label(self._configs[index])}: {error}")

    def callbacks(self) -> BatchCallbacks:
        return BatchCallbacks(
            on_progress=self.on_progress,
            on_file_complete=self.on_file_complete,
            on_file_error=self.on_file_error,
        )


def _run_batch(
    batch: BatchExecutionEngine,
    configs: list[ConversionConfig],
    parallel: int,
    callbacks: BatchCallbacks,
) -> list[BatchItemResult]:
    """Run the batch on a worker thread so Ctrl+C can cancel it."""
    results: list[BatchItemResult] = []
    failure: list[BaseException] = []

    def run() -> None:
        try:
            if parallel > 1:
                results.extend(
                    batch.execute_batch_parallel(configs, parallel, callbacks)
                )
            else:
                results.extend(batch.execute_batch(configs, callbacks))
        except Exception as e:
            failure.append(e)

    worker = threading.Thread(target=run, name="mediaforge-batch", daemon=True)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(JOIN_POLL_SECONDS)
    except KeyboardInterrupt:
        click.echo("\nInterrupted, cancelling conversions...", err=True)
        batch.cancel_all()
        worker.join()
        raise

    if failure:
        raise failure[0]
    return results


@click.command("convert")
@click.argument("job_file", type=click.Path(path_type=Path))
@click.option(
    "--parallel",
    "-p",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of conversions to run at once.",
)
@click.pass_context
def convert_command(ctx: click.Context, job_file: Path, parallel: int) -> None:
    """Run every conversion in JOB_FILE.

    Exit codes:
      0   - All conversions succeeded
      1   - At least one conversion failed
      2   - Invalid job file
      130 - Interrupted
    """
    configs = _load_or_exit(job_file)
    forge = get_forge(ctx)

    invalid = False
    for index, config in enumerate(configs):
        result = forge.validate_config(config)
        if not result.valid:
            invalid = True
            click.echo(f"[{index}] ✗ {_label(config)}", err=True)
            for message in result.errors:
                click.echo(f"      - {message}", err=True)
    if invalid:
        sys.exit(ExitCode.CONFIG_ERROR)

    printer = _ProgressPrinter(configs, show_progress=parallel == 1)
    batch = forge.create_batch_engine()
    logger.info("Running %d conversion(s), parallel=%d", len(configs), parallel)

    try:
        results = _run_batch(batch, configs, parallel, printer.callbacks())
    except KeyboardInterrupt:
        sys.exit(ExitCode.INTERRUPTED)

    failed = sum(1 for r in results if not r.success)
    click.echo()
    click.echo(f"{len(results) - failed} succeeded, {failed} failed")
    if failed:
        sys.exit(ExitCode.GENERAL_ERROR)
