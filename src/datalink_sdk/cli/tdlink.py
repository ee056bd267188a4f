"""
tdlink - Timex Datalink Command-Line Interface
==============================================

Sends organizer data to a Timex Datalink watch through a serial
transmitter, or prints the packets that would be sent.

Usage Examples
--------------
List available serial ports:
    $ tdlink ports

Send a data file:
    $ tdlink send organizer.json --serial-device /dev/ttyACM0

Set the clock only:
    $ tdlink send --no-alarms

Send a sound theme and a wrist app too:
    $ tdlink send organizer.json --sound-theme DEFHIGH.SPC --wrist-app TIMER.ZAP

Inspect the packets without transmitting:
    $ tdlink dump organizer.json

Put the watch in receive mode (COMM MODE > TRANSMIT) before sending.

Transmission Order
------------------
Sync, Start, [Beep], Time (zone 1 local, zone 2 UTC), Alarms, EEPROM
records, Sound theme, Wrist app, Sound options, End.

Exit Codes
----------
0 - Success
1 - Data file, container file or transfer error
2 - Invalid arguments
3 - Internal error
"""

import datetime
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import click

from datalink_sdk import __version__
from datalink_sdk.cli.errors import handle_cli_exception
from datalink_sdk.comms import (
    DEFAULT_LED_PATH,
    LedAdapter,
    NotebookAdapter,
    find_serial_port,
    format_port_list,
    hex_dump,
    list_serial_ports,
)
from datalink_sdk.config import TransmitConfig
from datalink_sdk.datafile import DatalinkData, load_data
from datalink_sdk.errors import DatalinkError
from datalink_sdk.files import load_sound_theme, load_wrist_app
from datalink_sdk.protocol import (
    Anniversary,
    Beep,
    DateFormat,
    Eeprom,
    End,
    ProtocolVariant,
    Session,
    SoundTheme,
    Start,
    Sync,
    Time,
    WristApp,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Session Building
# =============================================================================

@dataclass
class SessionOptions:
    """What to include in a transmission."""

    variant: ProtocolVariant = ProtocolVariant.LEGACY
    sync_length: Optional[int] = None
    start_beep: bool = False
    appointments: bool = True
    anniversaries: bool = True
    phone_numbers: bool = True
    lists: bool = True
    alarms: bool = True
    time: bool = True
    sound_theme: Optional[bytes] = None
    wrist_app: Optional[bytes] = None


def zone_name(tz: Optional[str]) -> str:
    """
    Derive a zone label from a TZ value.

    "Europe/Madrid" gives "Madrid", offsets such as "UTC+02:00" and an
    unset TZ give "HOME". Only the first three characters reach the watch.
    """
    if not tz or tz.upper().startswith("UTC"):
        return "HOME"
    if "/" in tz:
        return tz.rsplit("/", 1)[-1].replace("_", " ") or "HOME"
    return tz


def anniversaries_for_year(
    anniversaries: list[Anniversary], year: int
) -> list[Anniversary]:
    """
    Move anniversaries into one calendar year and sort them by date.

    The watch pages through anniversaries in the order received, so they
    are sent sorted. 29 February falls back to the 28th in common years.
    """
    moved = []
    for item in anniversaries:
        try:
            date = item.time.replace(year=year)
        except ValueError:
            date = item.time.replace(year=year, day=28)
        moved.append(Anniversary(time=date, anniversary=item.anniversary))
    return sorted(moved, key=lambda a: a.time)


def time_commands(now: datetime.datetime, tz: Optional[str]) -> list[Time]:
    """
    Time commands for local time (zone 1) and UTC (zone 2).

    Args:
        now: Current time, timezone-aware.
        tz: Value of the TZ environment variable.
    """
    local = now.astimezone().replace(tzinfo=None)
    utc = now.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return [
        Time(
            zone=1,
            time=local,
            is_24h=True,
            date_format=DateFormat.DAY_DASH_MONTH_DASH_YEAR,
            name=zone_name(tz),
        ),
        Time(
            zone=2,
            time=utc,
            is_24h=True,
            date_format=DateFormat.YEAR_DOT_MONTH_DOT_DAY,
            name="UTC",
        ),
    ]


def build_session(
    data: Optional[DatalinkData],
    options: SessionOptions,
    now: Optional[datetime.datetime] = None,
    tz: Optional[str] = None,
) -> Session:
    """
    Assemble the full transmission for a data file.

    Args:
        data: Parsed data file, or None to send only time and extras.
        options: Section switches and extra payloads.
        now: Current time (timezone-aware); defaults to the system clock.
        tz: Zone name source; defaults to the TZ environment variable.
    """
    data = data or DatalinkData()
    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    if tz is None:
        tz = os.environ.get("TZ")

    session = Session()
    session.add(Sync(length=options.sync_length, variant=options.variant))
    session.add(Start(variant=options.variant))

    if options.start_beep:
        session.add(Beep())

    if options.time:
        session.extend(time_commands(now, tz))

    if options.alarms:
        session.extend(data.alarms)

    eeprom = Eeprom(
        appointments=data.appointments if options.appointments else [],
        anniversaries=(
            anniversaries_for_year(data.anniversaries, now.year - 1)
            if options.anniversaries else []
        ),
        phone_numbers=data.phone_numbers if options.phone_numbers else [],
        lists=data.lists if options.lists else [],
        appointment_notification_minutes=data.appointment_notification_minutes,
    )
    if eeprom.record_count:
        session.add(eeprom)

    if options.sound_theme is not None:
        session.add(SoundTheme(options.sound_theme))

    if options.wrist_app is not None:
        session.add(WristApp(options.wrist_app))

    if data.sound_options is not None:
        session.add(data.sound_options)

    session.add(End())
    return session


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """Shared context for CLI commands."""

    def __init__(self) -> None:
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.INFO
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def progress_bar(current: int, total: int) -> None:
    """Simple text progress bar for packet transmission."""
    if total == 0:
        return
    percent = current * 100 // total
    filled = percent // 2
    bar = "=" * filled + "-" * (50 - filled)
    click.echo(f"\r[{bar}] {percent:3d}% ({current}/{total} packets)", nl=False)
    if current >= total:
        click.echo()


def session_options(func: Callable) -> Callable:
    """Options shared by the send and dump commands."""
    decorators = [
        click.argument(
            "json_file", required=False,
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        ),
        click.option(
            "--protocol", type=click.Choice(["legacy", "current"]), default=None,
            help="Protocol generation: legacy (Datalink 150) or current",
        ),
        click.option(
            "--sync-length", type=click.IntRange(1, 10_000), default=None,
            help="Sync preamble length (default: 150 legacy, 300 current)",
        ),
        click.option(
            "--sound-theme", type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None, help="Sound theme SPC file",
        ),
        click.option(
            "--wrist-app", type=click.Path(exists=True, dir_okay=False, path_type=Path),
            default=None, help="Wrist app ZAP file",
        ),
        click.option("--start-beep", is_flag=True, help="Beep when the transfer starts"),
        click.option("--no-appointments", is_flag=True, help="Skip appointments"),
        click.option("--no-anniversaries", is_flag=True, help="Skip anniversaries"),
        click.option("--no-phone-numbers", is_flag=True, help="Skip phone numbers"),
        click.option("--no-lists", is_flag=True, help="Skip lists"),
        click.option("--no-alarms", is_flag=True, help="Skip alarms"),
        click.option("--no-time", is_flag=True, help="Do not set the time"),
    ]
    for decorator in reversed(decorators):
        func = decorator(func)
    return func


def _prepare(config: TransmitConfig, params: dict) -> Session:
    """Load inputs named on the command line and build the session."""
    if params["protocol"]:
        config.variant = ProtocolVariant.from_name(params["protocol"])
    if params["sync_length"] is not None:
        config.sync_length = params["sync_length"]

    data = load_data(params["json_file"]) if params["json_file"] else None

    options = SessionOptions(
        variant=config.variant,
        sync_length=config.effective_sync_length,
        start_beep=params["start_beep"],
        appointments=not params["no_appointments"],
        anniversaries=not params["no_anniversaries"],
        phone_numbers=not params["no_phone_numbers"],
        lists=not params["no_lists"],
        alarms=not params["no_alarms"],
        time=not params["no_time"],
        sound_theme=load_sound_theme(params["sound_theme"]) if params["sound_theme"] else None,
        wrist_app=load_wrist_app(params["wrist_app"]) if params["wrist_app"] else None,
    )
    return build_session(data, options)


def _echo_packets(packets: list[bytes]) -> None:
    for index, packet in enumerate(packets, start=1):
        click.echo(f"{index:4d} [{len(packet):3d}] {hex_dump(packet)}")


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.version_option(version=__version__, prog_name="tdlink")
@pass_context
def main(ctx: Context, verbose: bool) -> None:
    """
    Send organizer data to a Timex Datalink watch.

    Put the watch in COMM MODE and start TRANSMIT, then run
    'tdlink send'. The link is one-way: the watch shows whether the
    transfer succeeded.

    Use 'tdlink ports' to list available serial ports.
    """
    ctx.verbose = verbose
    ctx.setup_logging()


# =============================================================================
# Send Command
# =============================================================================

@main.command()
@session_options
@click.option(
    "-d", "--serial-device", default=None,
    help="Serial device of the transmitter (default: /dev/ttyACM0)",
)
@click.option("--byte-sleep", type=float, default=None, help="Seconds after each byte")
@click.option("--packet-sleep", type=float, default=None, help="Seconds after each packet")
@click.option(
    "--led", "led_path", default=None, metavar="LED_DIR",
    help=f"Blink a sysfs LED instead of using a serial device (e.g. {DEFAULT_LED_PATH})",
)
@click.option("--dry-run", is_flag=True, help="Build the packets but do not send them")
@pass_context
def send(ctx: Context, serial_device: Optional[str], byte_sleep: Optional[float],
         packet_sleep: Optional[float], led_path: Optional[str], dry_run: bool,
         **params) -> None:
    """
    Send JSON_FILE (and any extras) to the watch.

    Without JSON_FILE only the time, plus any sound theme or wrist app
    given, is sent.

    Example:
        tdlink send organizer.json
        tdlink send organizer.json --no-time --start-beep
        tdlink send --protocol current --sync-length 300
    """
    config = TransmitConfig.from_env()
    config.verbose = ctx.verbose
    if serial_device:
        config.serial_device = serial_device
    if byte_sleep is not None:
        config.byte_sleep = byte_sleep
    if packet_sleep is not None:
        config.packet_sleep = packet_sleep

    try:
        packets = _prepare(config, params).packets()

        if dry_run:
            _echo_packets(packets)
            click.echo(f"{len(packets)} packets, not sent (dry run)")
            return

        if led_path:
            adapter = LedAdapter(
                led_path,
                byte_sleep=config.byte_sleep,
                packet_sleep=config.packet_sleep,
                verbose=config.verbose,
            )
            click.echo(f"Blinking {len(packets)} packets on {led_path}...")
        else:
            adapter = NotebookAdapter.from_config(config)
            click.echo(f"Sending {len(packets)} packets to {config.serial_device}...")

        adapter.write(packets, progress=None if ctx.verbose else progress_bar)
        click.echo("Transfer complete!")

    except DatalinkError as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Dump Command
# =============================================================================

@main.command()
@session_options
@pass_context
def dump(ctx: Context, **params) -> None:
    """
    Print the packets for JSON_FILE as hex without sending them.

    Each line shows the packet number, its length and its bytes.
    """
    config = TransmitConfig.from_env()
    try:
        packets = _prepare(config, params).packets()
    except DatalinkError as e:
        handle_cli_exception(e, ctx.verbose)

    _echo_packets(packets)


# =============================================================================
# Ports Command
# =============================================================================

@main.command()
@click.option("--detailed", "-d", is_flag=True, help="Show detailed port information")
def ports(detailed: bool) -> None:
    """
    List available serial ports.

    Example:
        tdlink ports
        tdlink ports --detailed
    """
    port_list = list_serial_ports()

    if not port_list:
        click.echo("No serial ports found.")
        click.echo("\nTips:")
        click.echo("  - Connect the transmitter board")
        click.echo("  - On Linux, ensure you have permission (dialout group)")
        return

    click.echo("Available serial ports:")
    click.echo(format_port_list(port_list, verbose=detailed))

    auto_port = find_serial_port()
    if auto_port:
        click.echo(f"\nSuggested transmitter port: {auto_port}")
    else:
        click.echo("\nNo USB transmitter auto-detected.")


if __name__ == "__main__":
    main()
