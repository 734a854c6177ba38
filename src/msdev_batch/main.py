"""CLI entrypoint for msdev-batch."""

import logging

import rich_click as click

from msdev_batch import __version__
from msdev_batch.batch.controllers import BatchCliController, BuildCommand, LocateCommand

click.rich_click.USE_MARKDOWN = True
BATCH_CONTROLLER = BatchCliController()


class _ClickEchoHandler(logging.Handler):
    """Route log records through click so CliRunner and terminals both see them."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=record.levelno >= logging.ERROR)
        except Exception:  # noqa: BLE001
            self.handleError(record)


@click.group()
@click.version_option(version=__version__, prog_name="msdev-batch")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log command lines and timings.")
def msdev_batch(verbose: bool) -> None:
    """Run a legacy build tool over a batch of projects."""

    _configure_logging(logging.DEBUG if verbose else logging.INFO)


@msdev_batch.command("build")
@click.argument("projects", nargs=-1, required=True)
@click.option(
    "--tool-path",
    default=None,
    help="Fully qualified path to msdev.exe. Default: `$MSDevDir/Bin/msdev.exe`.",
)
@click.option("--target", default=None, help="Build action, for example `CLEAN` or `REBUILD`.")
@click.option(
    "--timeout",
    "timeout_minutes",
    type=click.IntRange(min=1),
    default=None,
    help="Per-project timeout in minutes. Default: 5.",
)
@click.option(
    "--timeout-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Per-project timeout in seconds; takes precedence over --timeout.",
)
@click.option(
    "--stop-on-error/--no-stop-on-error",
    default=None,
    help="Stop at the first project that fails to build.",
)
@click.option(
    "--terminate-on-timeout/--no-terminate-on-timeout",
    default=None,
    help="Kill the tool when a project exceeds its timeout.",
)
@click.option("--platform", default=None, help="Default platform. Default: `Win32`.")
@click.option("--configuration", default=None, help="Default configuration. Default: `Debug`.")
def build(  # noqa: PLR0913
    projects: tuple[str, ...],
    tool_path: str | None,
    target: str | None,
    timeout_minutes: int | None,
    timeout_seconds: int | None,
    stop_on_error: bool | None,
    terminate_on_timeout: bool | None,
    platform: str | None,
    configuration: str | None,
) -> None:
    """Build PROJECTS in order.

    Each project is `path` or `path|platform|configuration` to override the
    defaults for that project only.
    """

    try:
        result = BATCH_CONTROLLER.build(
            BuildCommand(
                projects=projects,
                tool_path=tool_path,
                target=target,
                timeout_minutes=timeout_minutes,
                timeout_seconds=timeout_seconds,
                stop_on_error=stop_on_error,
                terminate_on_timeout=terminate_on_timeout,
                platform=platform,
                configuration=configuration,
            ),
        )
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Batch build failed.")


@msdev_batch.command("locate")
@click.option("--tool-path", default=None, help="Explicit tool path to check.")
def locate(tool_path: str | None) -> None:
    """Show which build tool a batch would launch."""

    try:
        result = BATCH_CONTROLLER.locate(LocateCommand(tool_path=tool_path))
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    _emit_lines(result.lines)
    if not result.success:
        raise click.ClickException("Build tool not found.")


def _configure_logging(level: int) -> None:
    root = logging.getLogger("msdev_batch")
    for handler in list(root.handlers):
        if isinstance(handler, _ClickEchoHandler):
            root.removeHandler(handler)
    handler = _ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    msdev_batch()
