# showroom/config.py
"""
Run configuration: constants, overridden by ``SHOWROOM_*`` environment
variables, overridden by command-line flags.
"""
from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from showroom.constants import (
    ASSET_ROOT,
    ASSET_ROOT_ENV,
    LOG_LEVEL,
    SNAPSHOT_HEIGHT,
    SNAPSHOT_WIDTH,
    TURBO_BUILD_DEFAULT,
)
from showroom.scenes import DEFAULT_PRESET, list_presets

_TRUTHY = {"1", "true", "yes", "on"}
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR")


@dataclass
class ShowroomConfig:
    preset: str = DEFAULT_PRESET
    asset_root: Path = ASSET_ROOT
    use_gui: bool = True
    snapshot: Optional[Path] = None
    width: int = SNAPSHOT_WIDTH
    height: int = SNAPSHOT_HEIGHT
    shadows: Optional[bool] = None       # None keeps the preset's own setting
    turbo_build: bool = TURBO_BUILD_DEFAULT
    load_timeout: Optional[float] = None
    log_level: str = LOG_LEVEL
    log_file: Optional[str] = None
    list_presets: bool = False


def _env_flag(env: Mapping[str, str], key: str, default: bool) -> bool:
    value = env.get(key)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def build_parser(env: Optional[Mapping[str, str]] = None) -> argparse.ArgumentParser:
    env = os.environ if env is None else env
    parser = argparse.ArgumentParser(
        prog="showroom",
        description="Garage/showroom scene in the PyBullet debug visualizer.",
    )
    parser.add_argument(
        "--preset",
        choices=list_presets(),
        default=env.get("SHOWROOM_PRESET", DEFAULT_PRESET),
        help="Scene layout to build.",
    )
    parser.add_argument(
        "--assets",
        dest="asset_root",
        type=Path,
        default=Path(env.get(ASSET_ROOT_ENV, str(ASSET_ROOT))),
        help=f"Directory holding textures and models (env {ASSET_ROOT_ENV}).",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=_env_flag(env, "SHOWROOM_HEADLESS", False),
        help="Run without GUI: build, wait for models, optionally snapshot, exit.",
    )
    parser.add_argument("--snapshot", type=Path, default=None, help="Write a PNG of the start view.")
    parser.add_argument("--width", type=int, default=SNAPSHOT_WIDTH, help="Snapshot width in pixels.")
    parser.add_argument("--height", type=int, default=SNAPSHOT_HEIGHT, help="Snapshot height in pixels.")
    parser.add_argument(
        "--shadows",
        dest="shadows",
        action="store_true",
        default=None,
        help="Force shadows on.",
    )
    parser.add_argument("--no-shadows", dest="shadows", action="store_false", help="Force shadows off.")
    parser.add_argument(
        "--turbo",
        dest="turbo_build",
        action="store_true",
        default=TURBO_BUILD_DEFAULT,
        help="Enable turbo build mode (hide rendering while spawning).",
    )
    parser.add_argument("--no-turbo", dest="turbo_build", action="store_false", help="Disable turbo build mode.")
    parser.add_argument(
        "--load-timeout",
        type=float,
        default=None,
        help="Seconds to wait for model loads in headless mode (default: no limit).",
    )
    parser.add_argument(
        "--log-level",
        default=env.get("SHOWROOM_LOG_LEVEL", LOG_LEVEL),
        choices=LOG_LEVELS,
        type=str.upper,
        help="Console log level.",
    )
    parser.add_argument("--log-file", default=env.get("SHOWROOM_LOG_FILE"), help="Also log to this file.")
    parser.add_argument("--list", dest="list_presets", action="store_true", help="List presets and exit.")
    return parser


def read_config(argv: Optional[Sequence[str]] = None, env: Optional[Mapping[str, str]] = None) -> ShowroomConfig:
    parser = build_parser(env)
    args = parser.parse_args(argv)
    # environment defaults bypass argparse choices
    if args.preset not in list_presets():
        parser.error(f"unknown preset {args.preset!r}; choose one of: {', '.join(list_presets())}")
    if args.log_level not in LOG_LEVELS:
        parser.error(f"unknown log level {args.log_level!r}")
    if args.width <= 0 or args.height <= 0:
        parser.error(f"invalid snapshot size {args.width}x{args.height}")
    if args.load_timeout is not None and args.load_timeout <= 0:
        parser.error("--load-timeout must be positive")
    return ShowroomConfig(
        preset=args.preset,
        asset_root=args.asset_root,
        use_gui=not args.headless,
        snapshot=args.snapshot,
        width=args.width,
        height=args.height,
        shadows=args.shadows,
        turbo_build=args.turbo_build,
        load_timeout=args.load_timeout,
        log_level=args.log_level,
        log_file=args.log_file,
        list_presets=args.list_presets,
    )
