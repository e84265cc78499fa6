"""
Command-line interface for macrokit.
"""

from __future__ import annotations
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

import click
import yaml
from pydantic import ValidationError

from macrokit import __version__
from macrokit.config import MacroConfig
from macrokit.engine import MacroEngine
from macrokit.errors import MacroError
from macrokit.keymap import key_name
from macrokit.models.events import MacroEvent, UnrecognizedEvent
from macrokit.models.macro import Macro, PlaybackSettings
from macrokit.recording.filter import Notification

logger = logging.getLogger(__name__)


def _load_config(path: Optional[Path], verbose: bool) -> MacroConfig:
    macro_config = MacroConfig.from_file(path) if path else MacroConfig()
    if verbose:
        macro_config.verbose = True
    return macro_config


def _load_macro(path: Path) -> Macro:
    try:
        return Macro.from_file(path)
    except (ValueError, yaml.YAMLError) as e:
        click.echo(f"❌ Invalid macro file: {e}", err=True)
        raise SystemExit(1)


def _fail(error: MacroError) -> None:
    click.echo(f"❌ {error.kind}: {error.message}", err=True)
    raise SystemExit(1)


def _describe(event: MacroEvent) -> str:
    if isinstance(event, UnrecognizedEvent):
        data = event.data
    else:
        data = event.data.model_dump(mode="json")
    fields = ", ".join(f"{k}={v}" for k, v in data.items())
    return f"[{event.timestamp}ms] {event.type} {fields}"


def _watch_key(name: str, callback: Callable[[], object]):
    """Call ``callback`` when the named key is pressed. Returns the listener."""
    from pynput import keyboard

    def on_press(key):
        if key_name(key) == name:
            callback()

    listener = keyboard.Listener(on_press=on_press)
    listener.daemon = True
    listener.start()
    return listener


@click.group()
@click.version_option(version=__version__)
def main():
    """macrokit - Record keyboard/mouse macros and play them back."""
    pass


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Path to write the recorded macro"
)
@click.option(
    "--name", "-n",
    type=str,
    default=None,
    help="Macro name (defaults to the output file name)"
)
@click.option(
    "--description", "-d",
    type=str,
    default="",
    help="Macro description"
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
@click.option(
    "--duration", "-t",
    type=float,
    default=None,
    help="Stop automatically after this many seconds"
)
@click.option("--no-mouse-move", is_flag=True, help="Do not record mouse movement")
@click.option("--no-clicks", is_flag=True, help="Do not record mouse clicks and wheel")
@click.option("--no-keyboard", is_flag=True, help="Do not record keyboard")
@click.option(
    "--format", "-f",
    type=click.Choice(["json", "yaml"]),
    default=None,
    help="Output format (defaults to the output file suffix)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
def record(
    output: Path,
    name: Optional[str],
    description: str,
    config: Optional[Path],
    duration: Optional[float],
    no_mouse_move: bool,
    no_clicks: bool,
    no_keyboard: bool,
    format: Optional[str],
    verbose: bool
):
    """
    Record global mouse/keyboard input into a macro file.

    Recording stops when the record-stop hotkey is pressed, when --duration
    elapses, or on Ctrl+C.
    """
    macro_config = _load_config(config, verbose)
    hotkeys = macro_config.hotkeys
    settings = macro_config.recording.settings.model_copy(update={
        "record_mouse_movement": macro_config.recording.settings.record_mouse_movement and not no_mouse_move,
        "record_mouse_clicks": macro_config.recording.settings.record_mouse_clicks and not no_clicks,
        "record_keyboard": macro_config.recording.settings.record_keyboard and not no_keyboard,
    })

    stop_requested = threading.Event()

    def on_notification(notification: Notification):
        if notification.key == hotkeys.record_stop:
            stop_requested.set()

    engine = MacroEngine(config=macro_config, on_notification=on_notification)

    try:
        engine.start_recording(settings, hotkeys)
    except MacroError as e:
        _fail(e)

    click.echo(f"🔴 Recording... press {hotkeys.record_stop} to stop")
    deadline = time.monotonic() + duration if duration else None
    try:
        while not stop_requested.wait(timeout=0.2):
            if deadline is not None and time.monotonic() >= deadline:
                break
    except KeyboardInterrupt:
        click.echo("\n   Interrupted")

    events = engine.stop_recording()

    macro = Macro(
        name=name or output.stem,
        description=description,
        events=events,
        recording_settings=settings,
    )
    output_format = format or ("yaml" if output.suffix in (".yaml", ".yml") else "json")
    macro.export(output, format=output_format)

    click.echo(f"✅ Macro saved to: {output}")
    click.echo(f"   - {len(macro.events)} events ({macro.action_count} actions)")
    click.echo(f"   - {macro.duration_ms / 1000:.2f}s long")


@main.command()
@click.option(
    "--macro", "-m",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to macro file"
)
@click.option(
    "--speed", "-s",
    type=float,
    default=None,
    help="Playback speed multiplier (0.5 = half speed, 2.0 = double speed)"
)
@click.option(
    "--repeat-mode", "-r",
    type=click.Choice(["once", "count", "infinite"]),
    default=None,
    help="Override the macro's repeat mode"
)
@click.option(
    "--repeat-count", "-n",
    type=int,
    default=None,
    help="Number of repetitions in count mode"
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file"
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print events without executing them"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output"
)
def play(
    macro: Path,
    speed: Optional[float],
    repeat_mode: Optional[str],
    repeat_count: Optional[int],
    config: Optional[Path],
    dry_run: bool,
    verbose: bool
):
    """
    Play back a macro using real OS mouse/keyboard control.

    This will actually move your mouse cursor and type on your keyboard.

    Press the playback-stop hotkey or Ctrl+C to abort.
    """
    macro_config = _load_config(config, verbose)
    definition = _load_macro(macro)

    overrides = {}
    if speed is not None:
        overrides["speed"] = speed
    if repeat_mode is not None:
        overrides["repeat_mode"] = repeat_mode
    if repeat_count is not None:
        overrides["repeat_count"] = repeat_count
    if overrides:
        try:
            playback_settings = PlaybackSettings.model_validate(
                {**definition.playback_settings.model_dump(), **overrides}
            )
        except ValidationError as e:
            click.echo(f"❌ Invalid playback settings: {e}", err=True)
            raise SystemExit(1)
        definition = definition.model_copy(update={"playback_settings": playback_settings})

    settings = definition.playback_settings
    click.echo(f"🎮 Loading macro: {definition.name}")
    click.echo(f"   - {len(definition.events)} events")
    click.echo(f"   - speed {settings.speed}x, repeat {settings.repeat_mode.value}")

    if dry_run:
        click.echo("\n📋 Dry run - events to be performed:")
        for i, event in enumerate(definition.events):
            click.echo(f"   {i+1}. {_describe(event)}")
        return

    hotkeys = macro_config.hotkeys
    countdown = macro_config.playback.countdown
    if countdown:
        click.echo(f"\n⚠️  Starting playback in {countdown} seconds...")
        for i in range(countdown, 0, -1):
            click.echo(f"   {i}...")
            time.sleep(1)

    engine = MacroEngine(config=macro_config)
    try:
        watcher = _watch_key(hotkeys.playback_stop, engine.stop_playback)
        click.echo(f"\n▶️  Playing... press {hotkeys.playback_stop} or Ctrl+C to stop")
    except Exception as e:
        logger.warning(f"Stop hotkey unavailable: {e}")
        watcher = None
        click.echo("\n▶️  Playing... press Ctrl+C to stop")

    try:
        report = engine.play_macro(definition)
    except KeyboardInterrupt:
        click.echo("\n⏹️  Playback interrupted")
        return
    except MacroError as e:
        _fail(e)
    finally:
        if watcher is not None:
            watcher.stop()

    if report.cancelled:
        click.echo(f"\n⏹️  Playback stopped after {report.events_synthesized} events")
    else:
        click.echo("\n✅ Playback complete!")
    click.echo(f"   - {report.iterations} iteration(s), {report.events_synthesized} events")
    if report.skipped:
        click.echo(f"   - {report.skipped} events skipped")


@main.command()
@click.option(
    "--macro", "-m",
    type=click.Path(exists=True, path_type=Path),
    required=True,
    help="Path to macro file"
)
def info(macro: Path):
    """Validate a macro file and summarize it."""
    click.echo(f"🔍 Validating macro: {macro}")

    definition = _load_macro(macro)
    settings = definition.playback_settings
    unknown = sum(1 for e in definition.events if isinstance(e, UnrecognizedEvent))

    click.echo("✅ Macro is valid!")
    click.echo(f"   - Name: {definition.name}")
    if definition.description:
        click.echo(f"   - Description: {definition.description}")
    click.echo(f"   - Events: {len(definition.events)} ({definition.action_count} actions)")
    click.echo(f"   - Duration: {definition.duration_ms / 1000:.2f}s")
    click.echo(f"   - Playback: speed {settings.speed}x, repeat {settings.repeat_mode.value}")
    if unknown:
        click.echo(f"   ⚠️  {unknown} events of unknown type will be skipped")


@main.command()
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    required=True,
    help="Path to write the configuration file"
)
def init_config(output: Path):
    """Write the default configuration to a YAML file."""
    MacroConfig().to_file(output)
    click.echo(f"✅ Default configuration written to: {output}")


@main.command()
def check():
    """Check if OS input capture and control are available."""
    click.echo("🔍 Checking input backends...\n")

    # Check pynput
    try:
        from pynput.mouse import Controller as MouseController
        pos = MouseController().position
        click.echo("  ✅ pynput is available")
        click.echo(f"     Mouse position: ({int(pos[0])}, {int(pos[1])})")
    except ImportError as e:
        click.echo(f"  ❌ pynput backend unavailable: {e}")
    except Exception as e:
        click.echo(f"  ⚠️  pynput error: {e}")

    # Check pyautogui
    try:
        import pyautogui
        screen_size = pyautogui.size()
        click.echo("  ✅ pyautogui is available")
        click.echo(f"     Screen size: {screen_size[0]}x{screen_size[1]}")
    except ImportError as e:
        click.echo(f"  ❌ pyautogui unavailable: {e}")
    except Exception as e:
        click.echo(f"  ⚠️  pyautogui error: {e}")

    click.echo("\n💡 Note: On macOS, you may need to grant accessibility and input monitoring")
    click.echo("   permissions to your terminal app for recording and playback to work.")


if __name__ == "__main__":
    main()
