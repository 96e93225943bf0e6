"""Main entry point for the violin tuner CLI."""

import time
from typing import Optional

import click

from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..core.interfaces import IAudioSource
from ..errors import TunerError
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_utils import format_cents, get_note_name
from ..session import TunerSession
from ..tuner_types import TuningReading, TuningStatus

logger = get_logger(__name__)

SEVERITY_COLORS = {0: "green", 1: "yellow", 2: "magenta", 3: "red"}


def format_reading(reading: TuningReading, color: bool = True) -> str:
    """Render a reading as one line of text."""
    if not reading.is_active:
        return f"{'-':>2}      -- Hz  {TuningStatus.NO_SIGNAL.message}"

    if reading.status is TuningStatus.NO_SIGNAL:
        return f"{'-':>2} {reading.frequency:7.2f} Hz  {reading.status.message}"

    line = (
        f"{reading.note:>2} {reading.frequency:7.2f} Hz "
        f"({get_note_name(reading.frequency):>4})  "
        f"target {reading.target_frequency:7.2f} Hz  "
        f"{format_cents(reading.cents):>10}  {reading.status.message}"
    )
    if color:
        line = click.style(line, fg=SEVERITY_COLORS.get(reading.status.severity))
    return line


def run_tuner(
    session: TunerSession,
    source: IAudioSource,
    duration: Optional[float] = None,
    show_time: bool = False,
) -> int:
    """Print one reading per block until the source ends, the duration is up or Ctrl-C.

    Returns:
        Number of readings printed
    """
    count = 0
    start_time = time.monotonic()

    with source:
        # start() may have switched to the device's sample rate
        block_seconds = source.block_size / source.sample_rate
        readings = session.readings(source.blocks(), source.sample_rate)
        try:
            for reading in readings:
                line = format_reading(reading)
                if show_time:
                    line = f"{count * block_seconds:7.2f}s  {line}"
                click.echo(line)
                count += 1
                if duration is not None and time.monotonic() - start_time >= duration:
                    break
        except KeyboardInterrupt:
            click.echo("Stopped.")
        finally:
            readings.close()

    logger.info(f"Tuner stopped after {count} readings")
    return count


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory holding the settings files (default: ~/.config/violin_tuner)",
)
@click.pass_context
def cli(ctx, debug, config_dir):
    """Violin tuner - shows the nearest string and how far off it is."""
    setup_logging(level="DEBUG" if debug else None)
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir


def _factory(ctx) -> ComponentFactory:
    return ComponentFactory(ConfigManager(ctx.obj["config_dir"]))


def _resolve_device(device: Optional[str]) -> Optional[int]:
    """Turn a --device value (ID or part of the name) into a device ID."""
    if device is None or device.isdigit():
        return int(device) if device is not None else None

    from ..audio.devices import find_input_device

    device_id, _ = find_input_device(device)
    if device_id is None:
        raise click.ClickException(f"No input device matching {device!r}")
    return device_id


@cli.command()
@click.option("--device", default=None, help="Audio input device ID or part of its name")
@click.option("--string", "string_name", default=None, help="Tune this string only (e.g. G)")
@click.option("--duration", "-t", type=float, default=None, help="Stop after this many seconds")
@click.pass_context
def listen(ctx, device, string_name, duration):
    """Tune from the microphone."""
    try:
        factory = _factory(ctx)
        session = factory.create_session(selected_target=string_name)
        source = factory.create_audio_source(device_id=_resolve_device(device))
        click.echo("Listening... press Ctrl-C to stop.")
        run_tuner(session, source, duration=duration)
    except TunerError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
@click.argument("wav_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--string", "string_name", default=None, help="Tune this string only (e.g. G)")
@click.option("--gain", type=float, default=1.0, help="Gain applied to the samples")
@click.pass_context
def analyze(ctx, wav_file, string_name, gain):
    """Show the readings for a recorded WAV file."""
    try:
        factory = _factory(ctx)
        session = factory.create_session(selected_target=string_name)
        source = factory.create_audio_source(file_path=wav_file, gain=gain)
        run_tuner(session, source, show_time=True)
    except TunerError as e:
        raise click.ClickException(str(e)) from e


@cli.command()
def devices():
    """List audio input devices and the sample rates they support."""
    from ..audio.devices import (
        default_input_device,
        list_input_devices,
        supported_sample_rates,
    )

    try:
        default_id = default_input_device()
        for device_id, device in list_input_devices():
            marker = "*" if device_id == default_id else " "
            click.echo(f"{marker} Device {device_id}: {device['name']}")
            click.echo(f"    Max input channels: {device['max_input_channels']}")
            click.echo(f"    Default sample rate: {device['default_samplerate']} Hz")
            rates = supported_sample_rates(device_id)
            click.echo(
                "    Supported rates: " + (", ".join(str(r) for r in rates) or "none")
            )
    except TunerError as e:
        raise click.ClickException(str(e)) from e


@cli.group()
def config():
    """Show or change the string frequencies."""


@config.command("show")
@click.pass_context
def config_show(ctx):
    """Print the target frequency of every string."""
    manager = ConfigManager(ctx.obj["config_dir"])
    for target in manager.get_targets():
        click.echo(f"{target.name}: {target.frequency:.2f} Hz")


@config.command("set")
@click.argument("string_name")
@click.argument("frequency")
@click.pass_context
def config_set(ctx, string_name, frequency):
    """Set the target FREQUENCY (Hz) of STRING_NAME."""
    manager = ConfigManager(ctx.obj["config_dir"])
    try:
        value = manager.set_string_frequency(string_name, frequency)
    except TunerError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"{string_name.upper()}: {value:.2f} Hz")


@config.command("reset")
@click.pass_context
def config_reset(ctx):
    """Restore the standard tuning (G 196, D 293.66, A 440, E 659.26 Hz)."""
    manager = ConfigManager(ctx.obj["config_dir"])
    if not manager.reset_config("strings"):
        raise click.ClickException("Could not reset the string frequencies")
    click.echo("String frequencies reset to standard tuning.")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
