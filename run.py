"""Command-line entry point for the Python CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import PALETTES


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter (Python)",
    )
    parser.add_argument(
        "program",
        type=Path,
        help="Path to the CHIP-8 program image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--cycles-per-frame",
        type=int,
        default=10,
        help="Instructions executed per 60 Hz frame (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the random number source",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Stop on unknown instructions instead of skipping them",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.program.exists():
        parser.error(f"Program file not found: {args.program}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.cycles_per_frame <= 0:
        parser.error("--cycles-per-frame must be positive")

    config = AppConfig(
        program_path=args.program,
        scale=args.scale,
        fullscreen=args.fullscreen,
        cycles_per_frame=args.cycles_per_frame,
        seed=args.seed,
        strict_decode=args.strict,
        palette=PALETTES[args.palette],
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
