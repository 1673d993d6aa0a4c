import json
import platform
import time
from typing import Optional, Tuple

import click

from .chooser import SecurityKeyChooser
from .config import ChooserSettings
from .connectors import get_connector
from .connectors.sim import SimConnector, passkey_dialog
from .i18n import PatternProvider
from .keyboard import StaticKeyOracle, get_key_oracle
from .log import setup_logging
from .watcher import WindowWatcher

DEFAULT_DEMO_CHOICES = ("iPhone, iPad, or Android device", "Security key")


def _patterns(locale_file: Optional[str]) -> PatternProvider:
    if not locale_file:
        return PatternProvider()
    try:
        return PatternProvider.from_json_file(locale_file)
    except (OSError, ValueError) as e:
        raise click.ClickException(f"Could not load --locale-file: {e}")


def _settings() -> ChooserSettings:
    try:
        return ChooserSettings.from_env()
    except ValueError as e:
        raise click.ClickException(str(e))


@click.group()
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False), default="INFO")
@click.option("--log-file", type=str, default=None)
def cli(log_level: str, log_file: Optional[str]) -> None:
    """Automatically choose the USB security key in Windows passkey prompts"""
    setup_logging(log_level, log_file=log_file)


@cli.command()
@click.option("--locale-file", type=str, default=None, help="JSON file with extra localized labels")
def info(locale_file: Optional[str]) -> None:
    settings = _settings()
    patterns = _patterns(locale_file or settings.locale_file)
    click.echo(json.dumps({"platform": platform.system(), "patterns": patterns.as_dict()}, indent=2, ensure_ascii=False))


@cli.command()
@click.option("--os", "os_override", type=str, default=None, help="Force platform: sim|windows")
@click.option("--timeout", type=float, default=None, help="Seconds to wait for the credential list")
@click.option("--poll-interval", type=float, default=None)
@click.option("--interval", type=float, default=None, help="Seconds between top-level window scans")
@click.option("--workers", type=int, default=None)
@click.option("--locale-file", type=str, default=None, help="JSON file with extra localized labels")
def watch(os_override: Optional[str], timeout: Optional[float], poll_interval: Optional[float], interval: Optional[float], workers: Optional[int], locale_file: Optional[str]) -> None:
    settings = _settings()
    if timeout is not None:
        settings.timeout_seconds = timeout
    if poll_interval is not None:
        settings.poll_interval_seconds = poll_interval
    if interval is not None:
        settings.watch_interval_seconds = interval
    if workers is not None:
        settings.max_workers = workers
    try:
        conn = get_connector(os_override=os_override)
    except RuntimeError as e:
        raise click.ClickException(str(e))
    chooser = SecurityKeyChooser(
        conn,
        patterns=_patterns(locale_file or settings.locale_file),
        key_oracle=get_key_oracle(conn.name),
        settings=settings,
    )
    watcher = WindowWatcher(conn, chooser, interval=settings.watch_interval_seconds, max_workers=settings.max_workers)
    click.echo(f"Watching for passkey prompts via {conn.name}... Press Ctrl+C to stop.")
    try:
        watcher.start()
        while watcher.running:
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


@cli.command()
@click.option("--choice", "choices", type=str, multiple=True, help="Label of a choice in the simulated dialog, in display order")
@click.option("--shift/--no-shift", default=False, help="Simulate a held Shift key")
@click.option("--title", type=str, default="Sign in with your passkey")
def demo(choices: Tuple[str, ...], shift: bool, title: str) -> None:
    conn = SimConnector()
    window = conn.open_window(passkey_dialog(list(choices or DEFAULT_DEMO_CHOICES), title=title))
    chooser = SecurityKeyChooser(conn, key_oracle=StaticKeyOracle(shift), settings=ChooserSettings(timeout_seconds=1.0))
    decision = chooser.choose_usb_security_key(window)
    click.echo(json.dumps({"decision": decision.value, "actions": conn.actions}, indent=2, ensure_ascii=False))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
