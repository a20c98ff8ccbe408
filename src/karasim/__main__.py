"""
CLI entry point for karasim.

Invoked via:
- `karasim <command>` (installed script)
- `python -m karasim <command>` (module execution)

Architecture Role:
    A thin layer that parses arguments, builds a KaraConfig, and delegates to
    Game (run/play/show) or KaraEnv (info).

    User Input → __main__.py → KaraConfig / Game / KaraEnv → Core modules

Available Commands:
    run: Capture a routine against a world, then replay it step by step
    play: Drive Kara manually with keys read from stdin
    show: Print a decoded world
    info: Display version, configuration defaults and environment spaces

Examples:
    karasim run
    karasim run --world demo --routine karasim.routines:collect_leaves
    karasim run --world my_world.txt --routine my_kara.py --delay 0.2
    karasim play --world corridor
    karasim show demo --emoji
    karasim info

Exit Codes:
    0 on success, 1 when a world, routine or config cannot be loaded or a
    Kara error ends the run, 2 for usage errors (argparse). Any other
    exception raised inside a routine is a bug in that routine and propagates
    with its traceback.

Dependencies:
    - argparse: Command-line argument parsing
    - asyncio: Concurrent replay and render loop
    - logging: Verbosity flags
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import contextmanager

from karasim.errors import KaraError, LoadError

logger = logging.getLogger("karasim")

DEFAULT_ROUTINE = "karasim.routines:find_mushroom"

# Manual control key bindings for `play` (one command per input line)
KEY_BINDINGS = {
    "w": "up",
    "up": "up",
    "a": "left",
    "left": "left",
    "d": "right",
    "right": "right",
    "s": "down",
    "down": "down",
}
QUIT_WORDS = {"q", "quit", "exit"}

# Failures of user-supplied files and modules while they are being loaded
LOAD_ERRORS = (OSError, ImportError, AttributeError, TypeError, ValueError)


# =============================================================================
# HELPERS
# =============================================================================


def _setup_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@contextmanager
def _loading(what: str):
    """Report failures while loading user input as LoadError."""
    try:
        yield
    except KaraError:
        raise
    except LOAD_ERRORS as e:
        raise LoadError(f"cannot load {what}: {e}") from e


def _build_config(args: argparse.Namespace):
    """KaraConfig from an optional YAML file, overridden by explicit flags."""
    from karasim.config import KaraConfig

    with _loading("config"):
        config = KaraConfig.from_yaml(args.config) if args.config else KaraConfig()

        overrides = {}
        for name in ("world", "step_delay", "max_commands"):
            value = getattr(args, name, None)
            if value is not None:
                overrides[name] = value
        if overrides:
            config = KaraConfig.from_dict({**vars(config), **overrides})
    return config


def _load_game(world: str, config=None):
    from karasim.game import Game
    from karasim.worlds import load_world

    with _loading(f"world {world!r}"):
        spec = load_world(world)
    return Game.from_string_spec(spec, config)


async def _run_with_display(game, routine, delay: float) -> None:
    """Replay in one task while another prints each new frame."""
    last_frame = None

    def show_changes() -> None:
        nonlocal last_frame
        frame = game.render_text(emoji=True)
        if frame != last_frame:
            print(frame)
            print()
            last_frame = frame

    async def render_loop() -> None:
        while True:
            show_changes()
            await asyncio.sleep(max(delay / 2, 0.01))

    renderer = asyncio.create_task(render_loop())
    try:
        commands = await game.execute_kara(routine, delay)
    finally:
        renderer.cancel()
        try:
            await renderer
        except asyncio.CancelledError:
            pass
    show_changes()
    print(f"Recorded {len(commands)} actions: {', '.join(commands.labels()) or '(none)'}")


# =============================================================================
# COMMAND HANDLERS
# =============================================================================


def cmd_run(args: argparse.Namespace) -> int:
    from karasim.routines import load_routine

    config = _build_config(args)
    game = _load_game(config.world, config)
    with _loading(f"routine {args.routine!r}"):
        routine = load_routine(args.routine)

    try:
        asyncio.run(_run_with_display(game, routine, config.step_delay))
    except KaraError as e:
        print(f"Run stopped: {e}", file=sys.stderr)
        return 1
    finally:
        print(f"Kara ended at {game.kara.coords} facing {game.kara.direction}")
    return 0


def cmd_play(args: argparse.Namespace) -> int:
    from karasim.errors import InvalidMoveError

    config = _build_config(args)
    game = _load_game(config.world, config)
    print(game.render_text(emoji=True))
    print("Keys: w/up move, a/left and d/right turn, s/down toggle leaf, q quit")

    for line in sys.stdin:
        word = line.strip().lower()
        if not word:
            continue
        if word in QUIT_WORDS:
            break
        key = KEY_BINDINGS.get(word)
        if key is None:
            print(f"Unknown key: {word}")
            continue
        try:
            game.key_pressed(key)
        except InvalidMoveError as e:
            print(e)
            continue
        print(game.render_text(emoji=True))
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    game = _load_game(args.world)
    print(game.render_text(emoji=args.emoji))
    print()
    print(f"Size: {game.grid.width}x{game.grid.height}")
    print(f"Kara: {game.kara.coords} facing {game.kara.direction}")
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    from dataclasses import fields

    from karasim import __version__
    from karasim.env import KaraEnv
    from karasim.worlds import WORLDS

    print(f"karasim v{__version__}")
    print()

    config = _build_config(args)
    print("Configuration:")
    for f in fields(config):
        print(f"  {f.name}: {getattr(config, f.name)}")
    print()

    print(f"Worlds: {', '.join(sorted(WORLDS))}")
    print()

    env = KaraEnv(config)
    print("Observation Space:")
    for key, space in env.observation_space.spaces.items():
        print(f"  {key}: {space}")
    print()
    print(f"Action Space: {env.action_space}")
    env.close()
    return 0


COMMANDS = {
    "run": cmd_run,
    "play": cmd_play,
    "show": cmd_show,
    "info": cmd_info,
}


# =============================================================================
# MAIN CLI FUNCTION
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    # Shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    common.add_argument("--quiet", "-q", action="store_true", help="Warnings and errors only")
    common.add_argument("--config", "-c", help="YAML config file")

    parser = argparse.ArgumentParser(
        prog="karasim",
        description="karasim - Kara the lady beetle in a grid world",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # -------------------------------------------------------------------------
    # Run Command
    # -------------------------------------------------------------------------
    run_parser = subparsers.add_parser(
        "run", parents=[common], help="Capture a routine, then replay it"
    )
    run_parser.add_argument(
        "--world", "-w",
        help="World name or world file (default: from config, 'garden')",
    )
    run_parser.add_argument(
        "--routine", "-r",
        default=DEFAULT_ROUTINE,
        help=f"module:function or file.py[:function] (default: {DEFAULT_ROUTINE})",
    )
    run_parser.add_argument(
        "--delay", "-d",
        dest="step_delay",
        type=float,
        help="Seconds between replayed actions (default: 0.5)",
    )
    run_parser.add_argument(
        "--max-commands", "-m",
        dest="max_commands",
        type=int,
        help="Capture bound (default: 50)",
    )

    # -------------------------------------------------------------------------
    # Play Command
    # -------------------------------------------------------------------------
    play_parser = subparsers.add_parser(
        "play", parents=[common], help="Drive Kara with keys from stdin"
    )
    play_parser.add_argument("--world", "-w", help="World name or world file")

    # -------------------------------------------------------------------------
    # Show Command
    # -------------------------------------------------------------------------
    show_parser = subparsers.add_parser("show", parents=[common], help="Print a world")
    show_parser.add_argument("world", nargs="?", default="garden", help="World name or file")
    show_parser.add_argument("--emoji", action="store_true", help="Emoji glyphs")

    # -------------------------------------------------------------------------
    # Info Command
    # -------------------------------------------------------------------------
    subparsers.add_parser("info", parents=[common], help="Show version and defaults")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for karasim.

    Returns:
        Exit code: 0 for success, 1 for errors or a missing command.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    _setup_logging(args)

    try:
        return COMMANDS[args.command](args)
    except KaraError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
