import click

from galvostim.cli.base import log_options, reports_errors, tree_option
from galvostim.device import ScanDSP
from galvostim.types import CH_X, CH_Y, MAX_CHANNEL

channel_type = click.IntRange(0, MAX_CHANNEL)


@click.group()
@tree_option
def dsp():
    """Direct scan controller commands."""
    pass


@dsp.command(name="set")
@click.argument("channel", type=channel_type)
@click.argument("value", type=int)
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@log_options
@reports_errors
def set_value(channel, value, port):
    """Set CHANNEL to VALUE immediately."""
    with ScanDSP(port) as scan:
        scan.set_value(channel, value)
    click.echo(f"Set channel {channel} to {value}")


@dsp.command()
@click.argument("x", type=int)
@click.argument("y", type=int)
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@log_options
@reports_errors
def park(x, y, port):
    """Move the galvos to X, Y (microcounts)."""
    with ScanDSP(port) as scan:
        scan.set_value(CH_X, x)
        scan.set_value(CH_Y, y)
    click.echo(f"Parked galvos at ({x}, {y})")


@dsp.command()
@click.argument("channel", type=channel_type)
@click.argument("counts", type=int)
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@log_options
@reports_errors
def offset(channel, counts, port):
    """Set the offset of CHANNEL to COUNTS."""
    with ScanDSP(port) as scan:
        scan.set_offset(channel, counts)
    click.echo(f"Set channel {channel} offset to {counts}")


@dsp.command()
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@log_options
@reports_errors
def execute(port):
    """Start the protocol already loaded on the controller."""
    with ScanDSP(port) as scan:
        scan.execute()
    click.echo("Execution started")


@dsp.command()
@click.option("--port", "-p", required=True, help="Serial port of the controller")
@log_options
@reports_errors
def clear(port):
    """Clear the protocol loaded on the controller."""
    with ScanDSP(port) as scan:
        scan.clear()
    click.echo("Protocol cleared")
