"""Main entry point for the Note Sight CLI."""

import argparse
import sys
import time
from collections import Counter
from typing import List, Optional

from ..audio.audio_input import list_input_devices
from ..core.config import ConfigManager
from ..core.factory import ComponentFactory
from ..errors import NoteParseError, NoteSightError
from ..logger import get_logger
from ..logging_config import setup_logging
from ..note_types import DisplaySnapshot
from ..note_utils import parse_note_string
from ..services.detection_session import DetectionSession

logger = get_logger(__name__)


def format_snapshot(snapshot: DisplaySnapshot) -> str:
    """One-line text rendering of a display snapshot."""
    if snapshot.is_empty:
        return "-"
    keys = " ".join(str(k) for k in snapshot.highlighted_keys) or "none"
    staff = f"{snapshot.staff.clef} staff ({snapshot.staff.key})"
    fingering = str(snapshot.fingering) if snapshot.fingering else "no fingering"
    return f"{snapshot.note}  |  {staff}  |  keys: {keys}  |  {fingering}"


def watch_session(
    session: DetectionSession,
    duration: Optional[float],
    refresh: float,
    until=None,
) -> Counter:
    """Poll a running session and print each change of note.

    Args:
        session: A listening session
        duration: Seconds to watch, or None until interrupted
        refresh: Display refresh rate in Hz
        until: Optional callable that ends the watch when it returns True

    Returns:
        Counter of how many refreshes showed each note
    """
    seen: Counter = Counter()
    interval = 1.0 / refresh
    deadline = None if duration is None else time.monotonic() + duration
    last = None
    while deadline is None or time.monotonic() < deadline:
        snapshot = session.snapshot()
        if snapshot.note is not None:
            seen[str(snapshot.note)] += 1
        if snapshot.note != last:
            print(format_snapshot(snapshot), flush=True)
            last = snapshot.note
        if until is not None and until():
            break
        time.sleep(interval)
    return seen


def report(seen: Counter) -> None:
    total = sum(seen.values())
    logger.info(f"Detected a note on {total} refreshes.")
    for note_name, count in seen.most_common():
        logger.info(f"  {note_name}: {count}")


def run_session(session: DetectionSession, args, until=None) -> int:
    try:
        session.start()
    except NoteSightError as e:
        logger.error(f"Could not start listening: {e}")
        return 1

    try:
        seen = watch_session(session, args.duration, args.refresh, until=until)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        seen = Counter()
    finally:
        session.stop()

    report(seen)
    return 0


def cmd_listen(factory: ComponentFactory, args) -> int:
    device = factory.create_capture_device("live", device_id=args.device)
    return run_session(factory.create_session(device), args)


def cmd_file(factory: ComponentFactory, args) -> int:
    try:
        device = factory.create_capture_device(
            "file",
            file_path=args.path,
            loop=args.loop,
            gain=args.gain,
            realtime=not args.fast,
        )
    except NoteSightError as e:
        logger.error(str(e))
        return 1
    session = factory.create_session(device)
    return run_session(session, args, until=lambda: device.finished)


def cmd_lookup(factory: ComponentFactory, args) -> int:
    try:
        note = parse_note_string(args.note)
    except NoteParseError as e:
        logger.error(str(e))
        return 1

    display = factory.create_display()
    frequency = factory.create_frequency_service().note_to_frequency(note)
    print(f"{note} ({frequency:.2f} Hz, note number {note.note_number})")
    print(format_snapshot(display.snapshot(note)))
    for fingering in display.fingerboard.positions_for(note)[1:]:
        print(f"  also: {fingering}")
    return 0


def cmd_freq(factory: ComponentFactory, args) -> int:
    frequencies = factory.create_frequency_service()
    note = frequencies.frequency_to_note(args.hz)
    if note is None:
        print(f"{args.hz} Hz: no note")
        return 1
    cents = frequencies.cents_off(args.hz, note)
    print(f"{args.hz} Hz: {note} ({cents:+.0f} cents)")
    print(format_snapshot(factory.create_display().snapshot(note)))
    return 0


def cmd_devices(_factory: ComponentFactory, _args) -> int:
    try:
        devices = list_input_devices()
    except NoteSightError as e:
        logger.error(str(e))
        return 1

    if not devices:
        print("No input devices found")
        return 1
    for device in devices:
        print(
            f"[{device['id']}] {device['name']} "
            f"(inputs: {device['channels']}, {device['sample_rate']:.0f} Hz)"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Note Sight - live pitch detection on staff, keyboard and fingerboard"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config-dir",
        default=None,
        help="Configuration directory (default: ~/.config/note_sight)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    listen_parser = subparsers.add_parser(
        "listen", help="Detect notes from the microphone"
    )
    listen_parser.add_argument(
        "--device", type=int, default=None, help="Audio input device ID"
    )

    file_parser = subparsers.add_parser("file", help="Detect notes in a WAV file")
    file_parser.add_argument("path", help="Audio file to analyse")
    file_parser.add_argument("--loop", action="store_true", help="Loop the file")
    file_parser.add_argument("--gain", type=float, default=1.0, help="Input gain")
    file_parser.add_argument(
        "--fast", action="store_true", help="Read as fast as possible"
    )

    for sub in (listen_parser, file_parser):
        sub.add_argument(
            "--duration",
            type=float,
            default=None,
            help="Seconds to listen (default: until interrupted or end of file)",
        )
        sub.add_argument(
            "--refresh", type=float, default=20.0, help="Display refresh rate in Hz"
        )

    lookup_parser = subparsers.add_parser(
        "lookup", help="Show where a note is played"
    )
    lookup_parser.add_argument("note", help="Note such as C#4 or Bb2")

    freq_parser = subparsers.add_parser("freq", help="Quantise a frequency to a note")
    freq_parser.add_argument("hz", type=float, help="Frequency in Hz")

    subparsers.add_parser("devices", help="List audio input devices")
    return parser


COMMANDS = {
    "listen": cmd_listen,
    "file": cmd_file,
    "lookup": cmd_lookup,
    "freq": cmd_freq,
    "devices": cmd_devices,
}


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command line arguments, or None to use sys.argv

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.command not in COMMANDS:
        parser.print_help()
        return 1

    setup_logging("DEBUG" if parsed_args.debug else None)
    factory = ComponentFactory(ConfigManager(parsed_args.config_dir))
    return COMMANDS[parsed_args.command](factory, parsed_args)


if __name__ == "__main__":
    sys.exit(main())
