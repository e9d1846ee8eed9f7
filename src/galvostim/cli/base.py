import functools
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from galvostim.coords import calc_scaling
from galvostim.device import ScanDSP
from galvostim.io import load_experiment, read_calibration
from galvostim.patterns import get_available_patterns, make_protocol
from galvostim.protocol import render, summarize
from galvostim.types import GalvoStimError, ResourceError
from galvostim.util import (
    DEFAULT_LOGLEVEL,
    get_hw_ports,
    get_log_filename,
    shutdown_log,
    start_log,
)


def print_tree(cmd, prefix="", parent_ctx=None):
    """Print command tree starting from given command."""
    ctx = click.Context(cmd, info_name=cmd.name, parent=parent_ctx)

    # Only print root name if no parent
    if not parent_ctx:
        click.echo(cmd.name)

    for sub in sorted(cmd.list_commands(ctx)):
        sub_cmd = cmd.get_command(ctx, sub)
        click.echo(f"{prefix}└── {sub}")
        if isinstance(sub_cmd, click.Group):
            print_tree(sub_cmd, prefix + "    ", ctx)


def tree_option(f):
    """Add --tree option to command."""

    def callback(ctx, param, value):
        if not value or ctx.resilient_parsing:
            return
        print_tree(ctx.command)
        ctx.exit()

    return click.option(
        "--tree",
        is_flag=True,
        help="Show command tree from this point",
        expose_value=False,
        is_eager=True,
        callback=callback,
    )(f)


def log_options(f):
    """Add logging options and start the log before the command runs."""

    @click.option(
        "--log-to-file/--no-log-to-file",
        "-ltf/",
        default=False,
        help="Enable/disable logging to file (default: disabled)",
    )
    @click.option(
        "--log-to-stdout/--no-log-to-stdout",
        "-lts/",
        default=False,
        help="Enable/disable console logging, on stderr (default: disabled)",
    )
    @click.option(
        "--log-path",
        "-lp",
        default="",
        help="Custom path for log file (default: ~/.galvostim/galvostim.log)",
    )
    @click.option(
        "--log-level",
        "-ll",
        default=DEFAULT_LOGLEVEL,
        help="Logging level (DEBUG, INFO, WARNING, ERROR) (default: INFO)",
    )
    @functools.wraps(f)
    def wrapper(*args, log_to_file, log_to_stdout, log_path, log_level, **kwargs):
        start_log(
            log_to_file=log_to_file,
            log_to_stdout=log_to_stdout,
            log_path=log_path,
            clear_prev=log_to_file,
            log_level=log_level.upper(),
        )
        try:
            return f(*args, **kwargs)
        finally:
            log_file = get_log_filename()
            shutdown_log()
            if log_file:
                click.echo(f"Log written to {log_file}", err=True)

    return wrapper


def reports_errors(f):
    """Turn library errors into a one-line CLI error and exit code 1."""

    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except GalvoStimError as e:
            raise click.ClickException(str(e)) from e

    return wrapper


def _send(dsp: ScanDSP, protocol: str, execute: bool):
    with dsp:
        before = dsp.lines_sent
        dsp.upload(protocol)
        # first line is the clear
        commands = dsp.lines_sent - before - 1
        if execute:
            dsp.execute()
    click.echo(
        f"Uploaded {commands} commands to {dsp.port}"
        + (" and started execution" if execute else ""),
        err=True,
    )


@click.group()
@tree_option
def cli():
    """galvostim - photostimulation protocols for galvo scan controllers.

    Builds scan-control protocols for single spots, grids, target lists and
    file-defined patterns, and uploads them over RS232:

    - Protocol generation from JSON experiment files

    - Scale factor calibration

    - Direct control of the scan controller
    """
    pass


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the protocol to this file (default: stdout)",
)
@click.option("--port", "-p", default=None, help="Upload to the controller on PORT")
@click.option(
    "--upload/--no-upload",
    default=False,
    help="Upload using the serial section of the experiment file",
)
@click.option(
    "--execute/--no-execute",
    "-x/",
    default=False,
    help="Start the protocol after uploading it (default: disabled)",
)
@log_options
@reports_errors
def build(config, output, port, upload, execute):
    """Build the protocol described by an experiment file.

    CONFIG: JSON experiment file with "experiment" and "transform" sections
    """
    setup = load_experiment(config)
    protocol = render(make_protocol(setup.experiment, setup.transform))

    if output:
        Path(output).write_text(protocol)
        click.echo(f"Wrote {setup.experiment.pattern_type} protocol to {output}")
    else:
        click.echo(protocol, nl=False)

    if port:
        _send(ScanDSP(port), protocol, execute)
    elif upload:
        if setup.serial is None:
            raise click.UsageError(f"{config} has no serial section, give --port")
        _send(ScanDSP.from_config(setup.serial), protocol, execute)
    elif execute:
        raise click.UsageError("--execute needs --port or --upload")


@cli.command()
@click.argument("calfile", type=click.Path(exists=True, dir_okay=False))
@log_options
@reports_errors
def calibrate(calfile):
    """Compute the pixel to galvo scale factor from calibration points.

    CALFILE: tab-delimited galvoX, galvoY, pixelX, pixelY records
    """
    scale_factor = calc_scaling(read_calibration(calfile))
    click.echo(scale_factor)


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@log_options
@reports_errors
def summary(config):
    """Summarise the protocol an experiment file would build.

    CONFIG: JSON experiment file
    """
    setup = load_experiment(config)
    prot = make_protocol(setup.experiment, setup.transform)
    stats = summarize(prot)

    table = Table(title=f"{setup.experiment.pattern_type} protocol")
    table.add_column("Quantity")
    table.add_column("Value", justify="right")
    for key, value in stats.items():
        table.add_row(key.replace("_", " "), str(value))
    Console().print(table)


@cli.command()
@click.argument("protocol", type=click.Path(exists=True, dir_okay=False))
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@click.option(
    "--execute/--no-execute",
    "-x/",
    default=False,
    help="Start the protocol after uploading it (default: disabled)",
)
@log_options
@reports_errors
def upload(protocol, port, execute):
    """Upload a previously built protocol file.

    PROTOCOL: protocol text, as written by `galvostim build -o`
    """
    try:
        text = Path(protocol).read_text()
    except UnicodeDecodeError as e:
        raise ResourceError(f"{protocol} is not a text file: {e}") from e
    if not text.startswith("C\n"):
        raise ResourceError(f"{protocol} does not look like a protocol file")
    _send(ScanDSP(port), text, execute)


@cli.command()
def patterns():
    """List the pattern types an experiment file can use."""
    for name in get_available_patterns():
        click.echo(name)


@cli.command()
def ports():
    """List all available COM ports."""
    ports = get_hw_ports()

    click.echo("\nAvailable COM ports:")
    click.echo("-------------------")

    if not ports:
        click.echo("No COM ports found")
        click.echo("")
        return

    for port, info in ports.items():
        click.echo(f"\nPort: {port}")
        if len(info) >= 2:
            description, hwid = info
            click.echo(f"Description: {description}")
            click.echo(f"Hardware ID: {hwid}")

    click.echo("")
