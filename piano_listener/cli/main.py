"""Main entry point for the Piano Listener CLI."""

import signal
import threading
from contextlib import contextmanager
from typing import Iterator, Tuple

import click

from ..logging_config import setup_logging
from ..note_matcher import NoteMatcher
from ..synth import write_tone
from ..audio.audio_input import AudioDeviceError
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from .reporters import BannerReporter, ConsoleReporter, DetectionSummary, ReportQueue

POLL_INTERVAL = 0.05  # Seconds between report queue drains


def _build_reports(
    factory: ComponentFactory, banner: bool, verbose: bool
) -> Tuple[ReportQueue, DetectionSummary]:
    summary = DetectionSummary()
    reports = ReportQueue([summary])
    if banner:
        reports.add_reporter(BannerReporter())
    else:
        reports.add_reporter(ConsoleReporter(NoteMatcher(factory.note_table), verbose=verbose))
    return reports, summary


def _print_summary(summary: DetectionSummary) -> None:
    for line in summary.render():
        click.echo(line)


@contextmanager
def _stop_on_interrupt() -> Iterator[threading.Event]:
    """Turn Ctrl+C into an event polled by the main loop."""
    stop_requested = threading.Event()

    def request_stop(signum, frame):
        # Takes effect between blocks, the running callback always completes
        stop_requested.set()

    previous_handler = signal.signal(signal.SIGINT, request_stop)
    try:
        yield stop_requested
    finally:
        signal.signal(signal.SIGINT, previous_handler)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Configuration directory (default: ~/.config/piano_listener)",
)
@click.pass_context
def main(ctx, debug, config_dir):
    """Piano Listener - detect piano notes from an audio stream."""
    setup_logging(level="DEBUG" if debug else "INFO")
    try:
        ctx.obj = ComponentFactory(ConfigManager(config_dir))
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")


@main.command()
@click.option("--device", type=int, default=None, help="Audio input device ID")
@click.option("--banner", is_flag=True, help="Print note names in large letters")
@click.option("--verbose", "-v", is_flag=True, help="Print one line per detected block")
@click.pass_obj
def listen(factory, device, banner, verbose):
    """Listen to the microphone until Ctrl+C."""
    try:
        service = factory.create_note_detection_service(factory.create_audio_input(device))
    except OSError as e:
        raise click.ClickException(f"Audio backend unavailable: {e}")

    reports, summary = _build_reports(factory, banner, verbose)
    with _stop_on_interrupt() as stop_requested:
        try:
            try:
                service.start(reports.enqueue)
            except AudioDeviceError as e:
                raise click.ClickException(str(e))

            click.echo("Listening for piano notes... Press Ctrl+C to stop.")
            while not stop_requested.wait(POLL_INTERVAL):
                reports.process_events()
        finally:
            service.stop()

    reports.process_events()
    click.echo(f"\nStopped listening after {service.elapsed:.1f}s.")
    _print_summary(summary)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--realtime", is_flag=True, help="Process blocks at playback speed")
@click.option("--loop", is_flag=True, help="Repeat the file until Ctrl+C")
@click.option("--banner", is_flag=True, help="Print note names in large letters")
@click.option("--verbose", "-v", is_flag=True, help="Print one line per detected block")
@click.pass_obj
def analyze(factory, file, realtime, loop, banner, verbose):
    """Detect the notes played in a sound file."""
    reports, summary = _build_reports(factory, banner, verbose)

    try:
        file_input = factory.create_file_input(file, realtime=realtime, loop=loop)
    except AudioDeviceError as e:
        raise click.ClickException(str(e))

    service = factory.create_note_detection_service(file_input)
    with _stop_on_interrupt() as stop_requested:
        service.start(reports.enqueue)
        try:
            while not file_input.wait(POLL_INTERVAL) and not stop_requested.is_set():
                reports.process_events()
        finally:
            service.stop()

    reports.process_events()
    click.echo(
        f"\nAnalyzed {service.blocks_processed} blocks from {file} in {service.elapsed:.2f}s"
    )
    _print_summary(summary)


@main.command()
def devices():
    """List audio input devices."""
    try:
        from ..audio.sound_device import default_input_device, list_input_devices

        input_devices = list_input_devices()
        default_id = default_input_device()
    except OSError as e:
        raise click.ClickException(f"Audio backend unavailable: {e}")

    if not input_devices:
        click.echo("No audio input devices found.")
        return

    click.echo("Available audio input devices:")
    click.echo("-" * 30)
    for device in input_devices:
        marker = "*" if device["id"] == default_id else " "
        click.echo(
            f"{marker} {device['id']}: {device['name']} "
            f"(inputs: {device['channels']}, rate: {device['default_samplerate']:.0f}Hz)"
        )


@main.command()
@click.argument("note")
@click.argument("output", type=click.Path(dir_okay=False, writable=True))
@click.option("--duration", "-t", default=1.0, show_default=True, help="Length in seconds")
@click.option("--amplitude", default=0.5, show_default=True, help="Amplitude of the fundamental")
@click.option(
    "--harmonic",
    default=0.0,
    show_default=True,
    help="Amplitude of the second harmonic",
)
@click.pass_obj
def tone(factory, note, output, duration, amplitude, harmonic):
    """Write a test tone for NOTE (e.g. A4) to OUTPUT."""
    try:
        frequency = factory.note_table.by_name(note).frequency
    except KeyError as e:
        raise click.BadParameter(e.args[0], param_hint="NOTE")

    partials = [(frequency, amplitude)]
    if harmonic > 0:
        partials.append((2 * frequency, harmonic))

    frames = write_tone(output, partials, duration, factory.detector_config.sample_rate)
    click.echo(f"Wrote {frames} samples of {note} ({frequency:.2f} Hz) to {output}")


if __name__ == "__main__":
    main()
