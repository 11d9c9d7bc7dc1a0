#!/usr/bin/env python3
"""
Terminal driver for the sparse life engine.

  python3 life_cli.py                       # r-pentomino in curses
  python3 life_cli.py --pattern acorn       # any entry in life.PATTERNS
  python3 life_cli.py --random 0.3 --size 40x20 --seed-rng 7
  python3 life_cli.py --text -n 50 --width 40 --height 20
  python3 life_cli.py --stats life_stats.csv

Curses controls:
  q         quit               SPACE     pause / resume
  +/-       speed              r         reseed
"""

from __future__ import annotations

import argparse
import curses
import sys
import time
from pathlib import Path
from typing import IO

from life import PATTERNS, Game, InvalidSeedError, SeedPattern, StatsLogger, random_soup
from life_render import CursesRenderer, TextRenderer

MIN_DELAY_MS = 10.0
MAX_DELAY_MS = 1000.0


def parse_size(value: str) -> tuple[int, int]:
    """Parse ``WxH`` into (width, height)."""
    try:
        w, h = (int(v) for v in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {value!r}") from None
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {value!r}")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Conway's Game of Life on an unbounded grid")
    parser.add_argument("--pattern", choices=sorted(PATTERNS), default="r_pentomino",
                        help="Named seed pattern (default: r_pentomino)")
    parser.add_argument("--random", type=float, default=None, metavar="DENSITY",
                        help="Seed with a random soup of this density instead of a pattern")
    parser.add_argument("--size", type=parse_size, default=(32, 16), metavar="WxH",
                        help="Random soup size (default: 32x16)")
    parser.add_argument("--seed-rng", type=int, default=None, metavar="N",
                        help="RNG seed for --random")
    parser.add_argument("-n", "--generations", type=int, default=None,
                        help="Stop after this many generations (default: run forever)")
    parser.add_argument("--fps", type=float, default=24.0,
                        help="Generations per second (default: 24)")
    parser.add_argument("--text", action="store_true",
                        help="Print text frames instead of using curses")
    parser.add_argument("--width", type=int, default=None,
                        help="Text window width (default: terminal width)")
    parser.add_argument("--height", type=int, default=None,
                        help="Text window height (default: terminal height)")
    parser.add_argument("--stats", type=Path, default=None, metavar="PATH",
                        help="Write per-generation telemetry CSV to PATH")
    return parser


def seed_from_args(args: argparse.Namespace) -> SeedPattern:
    if args.random is not None:
        width, height = args.size
        return random_soup(width, height, args.random, args.seed_rng)
    return PATTERNS[args.pattern]


# ═══════════════════════════════════════════════════════════════════════
#  Display loops
# ═══════════════════════════════════════════════════════════════════════

def run_text(game: Game, args: argparse.Namespace, out: IO[str] | None = None) -> None:
    renderer = TextRenderer(args.width, args.height, living="#", dead=".")
    delay = 1.0 / args.fps if args.fps > 0 else 0.0
    game.play(args.generations, show_generation=True, delay=delay, out=out, renderer=renderer)


def run_curses(stdscr: curses.window, game: Game, args: argparse.Namespace) -> None:
    curses.curs_set(0)
    stdscr.nodelay(True)
    stdscr.timeout(0)

    max_y, max_x = stdscr.getmaxyx()
    # Bottom row is the status bar
    renderer = CursesRenderer(stdscr, width=max_x, height=max_y - 1)

    delay = 1000.0 / args.fps if args.fps > 0 else 0.0
    paused = False
    start_gen = game.generation

    while args.generations is None or game.generation - start_gen < args.generations:
        # ── Input ──────────────────────────────────────────────
        try:
            key = stdscr.getch()
        except curses.error:
            key = -1

        if key in (ord("q"), ord("Q")):
            break
        elif key == ord(" "):
            paused = not paused
        elif key in (ord("+"), ord("=")):
            delay = max(MIN_DELAY_MS, delay - 10)
        elif key in (ord("-"), ord("_")):
            delay = min(MAX_DELAY_MS, delay + 10)
        elif key in (ord("r"), ord("R")):
            game.seed(seed_from_args(args))
        elif key == curses.KEY_RESIZE:
            max_y, max_x = stdscr.getmaxyx()
            renderer.width, renderer.height = max_x, max_y - 1

        # ── Render ─────────────────────────────────────────────
        game.render(renderer)
        status = f" gen {game.generation:,}  pop {game.population():,}"
        if paused:
            status += "  [paused]"
        try:
            stdscr.addstr(max_y - 1, 0, status[: max_x - 1], curses.A_DIM)
        except curses.error:
            pass
        stdscr.refresh()

        # ── Simulate ───────────────────────────────────────────
        if not paused:
            game.advance()

        time.sleep(delay / 1000.0)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.fps < 0:
        parser.error("--fps must not be negative")

    stats: StatsLogger | None = None
    if args.stats is not None:
        stats = StatsLogger(args.stats)
        stats.open()

    try:
        try:
            game = Game(seed_from_args(args), stats=stats)
        except InvalidSeedError as exc:
            parser.error(str(exc))
        if args.text:
            run_text(game, args)
        else:
            curses.wrapper(run_curses, game, args)
    except KeyboardInterrupt:
        pass
    finally:
        if stats is not None:
            stats.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
