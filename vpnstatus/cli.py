import functools
import json
import signal
import threading

import click

from . import config
from .external.geolocation import fetch_location
from .logging_config import setup_logging
from .monitor import Monitor, get_status
from .network.classifier import is_vpn_interface, matching_prefix
from .network.interfaces import InterfaceEnumerationError, get_interface_snapshot


class OrderedGroup(click.Group):
    """Custom Click group that preserves command order."""

    def list_commands(self, ctx):
        return list(self.commands.keys())


def _debug_option(func):
    return click.option(
        "--debug",
        is_flag=True,
        help="Enable verbose debug logging of interface classification and location lookups.",
    )(func)


def _location_option(func):
    return click.option(
        "--no-location",
        is_flag=True,
        help="Only report VPN interfaces; skip the public IP location lookup.",
    )(func)


def _load_settings(debug, log_file=True):
    cfg = config.load_config()
    setup_logging(debug=debug or config.get_setting(cfg, "debug"), log_file=log_file)
    return cfg


def format_snapshot(snapshot):
    """Render a MonitorSnapshot as the lines shown by status and watch."""
    if snapshot.connected:
        lines = [click.style("VPN Connected", fg="green", bold=True)]
        lines.append(f"Interfaces: {', '.join(snapshot.interfaces)}")
    else:
        lines = [click.style("VPN Disconnected", fg="red", bold=True)]

    if snapshot.is_loading_location:
        lines.append("Location: loading...")
    elif snapshot.location is not None:
        location = snapshot.location
        flag = f"{location.flag} " if location.flag else ""
        lines.append(f"IP: {location.ip}")
        lines.append(f"Location: {flag}{location.city}, {location.country}")
    return lines


@click.group(cls=OrderedGroup)
def cli():
    """
    VPNStatus - VPN detection and public location monitor.

    Detects VPN tunnels from the host's network interfaces and shows the
    public IP address and location your traffic appears to come from.
    """
    pass


@cli.command()
@_debug_option
@_location_option
@click.option("--json", "as_json", is_flag=True, help="Print the status as a JSON object.")
def status(debug, no_location, as_json):
    """
    Show the current VPN status once and exit.

    Examples:
      vpnstatus status
      vpnstatus status --json --no-location
    """
    cfg = _load_settings(debug, log_file=False)
    fetch = functools.partial(
        fetch_location,
        url=config.get_setting(cfg, "geolocation_url"),
        timeout=config.get_setting(cfg, "geolocation_timeout"),
    )
    fetch_enabled = config.get_setting(cfg, "fetch_location") and not no_location

    snapshot = get_status(fetch=fetch, fetch_location_enabled=fetch_enabled)

    if as_json:
        click.echo(json.dumps(snapshot.to_dict(), indent=2))
        return

    for line in format_snapshot(snapshot):
        click.echo(line)
    if fetch_enabled and snapshot.location is None:
        click.echo("Location: unavailable")


@cli.command()
@_debug_option
def interfaces(debug):
    """
    List network interfaces and whether each counts as a VPN tunnel.

    An interface counts when its name has a tunnel prefix (utun, ppp, ipsec,
    tap, tun, gpd, wg) and it is up, running and has an IPv4 address.
    """
    _load_settings(debug, log_file=False)

    try:
        snapshot = get_interface_snapshot()
    except InterfaceEnumerationError as e:
        raise click.ClickException(str(e))

    for descriptor in sorted(snapshot, key=lambda d: d.name):
        flags = []
        if descriptor.is_up:
            flags.append("up")
        if descriptor.is_running:
            flags.append("running")
        if descriptor.has_ipv4:
            flags.append("ipv4")

        if is_vpn_interface(descriptor):
            verdict = click.style(f"{'VPN':<18}", fg="green")
        elif matching_prefix(descriptor.name):
            verdict = click.style(f"{'tunnel (inactive)':<18}", fg="yellow")
        else:
            verdict = f"{'-':<18}"

        addresses = ", ".join(descriptor.addresses)
        click.echo(f"{descriptor.name:<12} {','.join(flags) or 'down':<16} {verdict} {addresses}")


@cli.command()
@_debug_option
@_location_option
def watch(debug, no_location):
    """
    Follow VPN status changes until interrupted.

    Prints the status every time a network change is detected. Press Ctrl+C
    to stop.
    """
    cfg = _load_settings(debug)

    monitor = Monitor.from_config(cfg)
    if no_location:
        monitor.fetch_location_enabled = False

    done = threading.Event()

    def on_signal(signum, frame):
        click.echo(f"\nReceived {signal.Signals(signum).name}. Exiting gracefully...")
        done.set()

    signal.signal(signal.SIGINT, on_signal)
    signal.signal(signal.SIGTERM, on_signal)

    def on_snapshot(snapshot):
        click.echo(" | ".join(format_snapshot(snapshot)))

    monitor.subscribe(on_snapshot)
    monitor.start()
    try:
        # Event.wait with a timeout keeps the main thread responsive to signals
        while not done.wait(1.0):
            pass
    finally:
        monitor.stop()


if __name__ == "__main__":
    cli()
