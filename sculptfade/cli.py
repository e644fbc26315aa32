#!/usr/bin/env python3
#
# SculptFade
# Copyright (c) 2025 Martynas Jocius
#

import argparse
import json
import sys
import threading
import time
from pathlib import Path

import pygame

from sculptfade import DEFAULT_FPS, UI_PANEL_CHRONICLE, VERSION
from sculptfade.core.scene import InteractiveScene
from sculptfade.core.triggers import SOURCE_TYPES
from sculptfade.debug import debug_log, debug_manager, set_debug_mode
from sculptfade.ui.tui import tui_manager
from sculptfade.utils import list_available_scenes

__all__ = [
    "setup_input_handler",
    "restore_terminal_settings",
    "validate_scene_file",
    "run_scene",
    "main",
]


def setup_input_handler(quit_requested, scene):
    """Listen for keys: 1-9 interact with an object, c toggles the log, q quits."""
    try:
        import termios
        import tty
    except ImportError as exc:
        tui_manager.log(f"Input handler unavailable on this platform: {exc}")
        return None, None

    try:
        original_settings = termios.tcgetattr(sys.stdin)
    except (termios.error, OSError, ValueError) as exc:
        tui_manager.log(f"Input handler disabled; not a terminal: {exc}")
        tui_manager.log("Use Ctrl+C to quit")
        return None, None

    def input_handler():
        tty.setcbreak(sys.stdin.fileno())
        while not quit_requested.is_set():
            char = sys.stdin.read(1)
            if not char:
                break
            if char.isdigit() and char != "0":
                scene.queue_manual_trigger(int(char) - 1)
            elif char.lower() == "c":
                tui_manager.toggle_chronicle()
                tui_manager.update_display(force=True)
            elif char.lower() == "q" or ord(char) == 3:
                tui_manager.set_quitting(True)
                tui_manager.log("Quit requested by user (q)")
                quit_requested.set()

    input_thread = threading.Thread(target=input_handler, daemon=True)
    input_thread.start()
    tui_manager.log(
        f"Input handler active. Shortcuts: 1-9=interact, c=toggle {UI_PANEL_CHRONICLE}, q=quit"
    )
    return original_settings, input_thread


def restore_terminal_settings(original_settings):
    """Restore terminal settings after cbreak mode."""
    if original_settings is None:
        return
    try:
        import termios

        termios.tcsetattr(sys.stdin, termios.TCSADRAIN, original_settings)
    except (ImportError, OSError, ValueError):
        pass


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_number(value, label, scene_file, minimum=0.0):
    if not _is_number(value) or value < minimum:
        print(f"Error: {label} must be a number >= {minimum:g}: {scene_file}")
        return False
    return True


def validate_scene_file(scene_file):
    """Validate scene file before initializing pygame and the scene."""
    scene_path = Path(scene_file)

    if not scene_path.exists():
        print(f"Error: Scene file not found: {scene_file}")
        print("Please check the file path and try again.")
        return False, None

    if not scene_path.is_file():
        print(f"Error: Path is not a file: {scene_file}")
        return False, None

    try:
        with open(scene_path, "r", encoding="utf-8") as f:
            scene_data = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON in scene file: {scene_file}")
        print(f"   JSON error at line {e.lineno}, column {e.colno}: {e.msg}")
        return False, None
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: Unable to read scene file: {scene_file}")
        print(f"   {e}")
        return False, None

    if not isinstance(scene_data, dict):
        print(
            f"Error: Scene file must contain a JSON object, not {type(scene_data).__name__}: {scene_file}"
        )
        return False, None

    objects = scene_data.get("objects")
    if not isinstance(objects, list) or not objects:
        print(f"Error: Scene file needs a non-empty 'objects' array: {scene_file}")
        return False, None

    names = set()
    for i, obj in enumerate(objects):
        label = f"Object {i + 1}"
        if not isinstance(obj, dict):
            print(f"Error: {label} must be a JSON object: {scene_file}")
            return False, None

        name = obj.get("name")
        if not isinstance(name, str) or not name:
            print(f"Error: {label} missing string 'name' field: {scene_file}")
            return False, None
        if name in names:
            print(f"Error: Duplicate object name '{name}': {scene_file}")
            return False, None
        names.add(name)

        for key in ("delay", "fade"):
            if key in obj and not _check_number(obj[key], f"{name}.{key}", scene_file):
                return False, None

        if "property" in obj and (not isinstance(obj["property"], str) or not obj["property"]):
            print(f"Error: {name}.property must be a non-empty string: {scene_file}")
            return False, None

        if "color" in obj:
            color = obj["color"]
            if (
                not isinstance(color, list)
                or len(color) != 4
                or not all(_is_number(c) for c in color)
            ):
                print(f"Error: {name}.color must be an array of 4 numbers (RGBA): {scene_file}")
                return False, None

        slots = obj.get("slots", [])
        if not isinstance(slots, list) or not all(isinstance(s, str) and s for s in slots):
            print(f"Error: {name}.slots must be an array of property names: {scene_file}")
            return False, None

        for key in ("texture", "sound"):
            if key in obj and (not isinstance(obj[key], str) or not obj[key]):
                print(f"Error: {name}.{key} must be a file path string: {scene_file}")
                return False, None

        sources = obj.get("sources", [])
        if not isinstance(sources, list):
            print(f"Error: {name}.sources must be an array: {scene_file}")
            return False, None
        for kind in sources:
            if kind not in SOURCE_TYPES:
                print(
                    f"Error: {name} has unknown source '{kind}' "
                    f"(expected {', '.join(sorted(SOURCE_TYPES))}): {scene_file}"
                )
                return False, None
        if not sources:
            print(f"Warning: {name} has no trigger sources; only manual interaction will work.")

        for key in ("texture", "sound"):
            if key in obj:
                resource = Path(obj[key])
                if not resource.is_absolute():
                    resource = scene_path.parent / resource
                if not resource.exists():
                    print(f"Warning: {name}.{key} not found: {resource}")

    events = scene_data.get("events", [])
    if not isinstance(events, list):
        print(f"Error: 'events' field must be an array: {scene_file}")
        return False, None
    for i, event in enumerate(events):
        label = f"Event {i + 1}"
        if not isinstance(event, dict) or "object" not in event:
            print(f"Error: {label} must be an object with an 'object' field: {scene_file}")
            return False, None
        if event["object"] not in names:
            print(f"Error: {label} refers to unknown object '{event['object']}': {scene_file}")
            return False, None
        if not _check_number(event.get("time", 0), f"{label}.time", scene_file):
            return False, None
        source = event.get("source")
        if source is not None and source not in SOURCE_TYPES:
            print(f"Error: {label} has unknown source '{source}': {scene_file}")
            return False, None

    return True, {
        "name": scene_data.get("name", "Unnamed Scene"),
        "description": scene_data.get("description", "No description"),
        "object_count": len(objects),
        "event_count": len(events),
        "data": scene_data,
    }


def run_scene(scene, quit_requested, fps=DEFAULT_FPS, enable_tui=False, clock=None):
    """Step ``scene`` once per frame until quit, or until it settles without a TUI."""
    clock = clock or pygame.time.Clock()

    # Frame zero so events scheduled at t=0 fire before any time passes
    scene.step(0.0)
    clock.tick(fps)

    while not quit_requested.is_set():
        dt = clock.tick(fps) / 1000.0
        scene.step(dt)

        if enable_tui:
            tui_manager.update_display()
            continue

        if scene.is_finished():
            # Without a keyboard nothing else can trigger the remaining objects
            break

    return scene.clock


def main():
    """Main entry point for SculptFade."""
    parser = argparse.ArgumentParser(
        description="SculptFade - Interactive object fade-out scene runner",
        epilog=f"SculptFade v{VERSION}",
    )
    parser.add_argument(
        "scene",
        nargs="?",
        default="scenes/default.json",
        help="Path to scene JSON file (default: scenes/default.json)",
    )
    parser.add_argument(
        "--list-scenes", action="store_true", help="List available scene files"
    )
    parser.add_argument(
        "--no-tui",
        action="store_true",
        help="Disable Terminal User Interface (TUI is enabled by default)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with detailed state information",
    )
    parser.add_argument(
        "--disable-logging",
        action="store_true",
        help="Disable per-session log file writes (logs directory)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=DEFAULT_FPS,
        help=f"Frame rate of the scene clock (default: {DEFAULT_FPS})",
    )
    parser.add_argument("--version", action="version", version=f"SculptFade {VERSION}")

    args = parser.parse_args()

    if args.list_scenes:
        print("Available scenes:")
        scenes = list_available_scenes()
        if scenes:
            for scene in scenes:
                print(
                    f"  {scene['file']}: {scene['name']} - {scene['description']} "
                    f"({scene['object_count']} objects)"
                )
        else:
            print("  No scenes directory found")
        return 0

    if args.fps <= 0:
        print("Error: --fps must be positive")
        return 1

    print(f"Validating scene file: {args.scene}")
    is_valid, scene_info = validate_scene_file(args.scene)
    if not is_valid:
        print("\nSculptFade startup cancelled due to configuration errors.")
        return 1

    print(f"✅ Scene file validated: {scene_info['name']}")
    print(f"   Description: {scene_info['description']}")
    print(f"   Objects: {scene_info['object_count']}, scripted events: {scene_info['event_count']}")
    print()

    scene_path = Path(args.scene)
    if not args.disable_logging:
        try:
            logs_dir = Path("logs")
            logs_dir.mkdir(parents=True, exist_ok=True)
            log_file_path = logs_dir / f"{scene_path.stem}-{time.strftime('%Y%m%d-%H%M%S')}.log"
            tui_manager.start_file_logging(log_file_path)
            tui_manager.log(f"Session log: {log_file_path}")
        except OSError as exc:
            print(f"Warning: could not initialize file logging ({exc})")
    else:
        print("File logging disabled.")

    if args.debug:
        set_debug_mode(True)
        debug_log(
            "STARTUP",
            "SculptFade starting with debug mode enabled",
            {"scene_file": args.scene, "tui_enabled": not args.no_tui, "fps": args.fps},
        )

    enable_tui = not args.no_tui
    if enable_tui and (not sys.stdin.isatty() or not sys.stdout.isatty()):
        print("Non-interactive terminal detected; disabling TUI")
        enable_tui = False

    original_terminal_settings = None
    quit_requested = threading.Event()
    scene = None

    try:
        pygame.mixer.pre_init(frequency=44100, size=-16, channels=2, buffer=1024)
        try:
            pygame.mixer.init()
        except pygame.error as exc:
            print(f"Warning: audio unavailable ({exc}); interaction sounds disabled")

        scene = InteractiveScene(scene_path)
        if not scene.load_scene():
            print("Error: Scene loading failed after validation passed")
            return 1

        if enable_tui:
            tui_manager.enable_tui()
            tui_manager.start_live_display()
            enable_tui = tui_manager.tui_enabled
            if enable_tui:
                original_terminal_settings, _ = setup_input_handler(quit_requested, scene)

        try:
            run_scene(scene, quit_requested, fps=args.fps, enable_tui=enable_tui)
        except KeyboardInterrupt:
            tui_manager.set_quitting(True)
            tui_manager.log("Interrupted by user (Ctrl+C)")
            quit_requested.set()

        if args.debug:
            debug_log("SHUTDOWN", "SculptFade shutting down", {"clock": scene.clock})
            debug_manager.print_state_summary()

    finally:
        if scene is not None:
            scene.shutdown()
        restore_terminal_settings(original_terminal_settings)
        tui_manager.disable_tui()
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        tui_manager.log("Scene stopped.")
        tui_manager.stop_file_logging()

    return 0


if __name__ == "__main__":
    sys.exit(main())
