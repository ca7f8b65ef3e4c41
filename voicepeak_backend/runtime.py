import argparse
import os
import shutil
import sys
from typing import Optional

from engines import VoiceOptions

VOICEPEAK_PATH_ENV = "VOICEPEAK_PATH"

# Install locations of the official VOICEPEAK builds
DEFAULT_VOICEPEAK_PATHS = {
    "win32": "C:/Program Files/VOICEPEAK/voicepeak.exe",
    "darwin": "/Applications/voicepeak.app/Contents/MacOS/voicepeak",
}

SPEED_RANGE = (50, 200)
PITCH_RANGE = (-300, 300)


def default_voicepeak_path() -> str:
    return DEFAULT_VOICEPEAK_PATHS.get(sys.platform, "")


def resolve_voicepeak_path(override: Optional[str] = None) -> str:
    """Resolve the VOICEPEAK executable once per run.

    Order: explicit override, $VOICEPEAK_PATH, the platform install location,
    then ``voicepeak`` on PATH.
    """
    if override:
        return override

    env_path = os.getenv(VOICEPEAK_PATH_ENV)
    if env_path:
        return env_path

    default_path = default_voicepeak_path()
    if default_path and os.path.exists(default_path):
        return default_path

    which_path = shutil.which("voicepeak")
    if which_path is not None:
        return which_path

    raise FileNotFoundError(
        "VOICEPEAK executable not found. "
        f"Pass --aux-voicepeak-path or set {VOICEPEAK_PATH_ENV}."
    )


def resolve_engine_path_for_args(args: argparse.Namespace) -> str:
    if args.engine == "mock":
        return ""
    return resolve_voicepeak_path(args.exec_path)


def _check_range(flag: str, value: Optional[int], bounds: tuple) -> None:
    if value is None:
        return
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"{flag} must be between {low} and {high}, got {value}")


def build_voice_options(args: argparse.Namespace) -> VoiceOptions:
    _check_range("--speed", args.speed, SPEED_RANGE)
    _check_range("--pitch", args.pitch, PITCH_RANGE)
    return VoiceOptions(
        narrator=args.narrator,
        emotion=args.emotion,
        speed=args.speed,
        pitch=args.pitch,
    )


def resolve_output_path(output_path: str) -> str:
    """Relative output paths are taken from the current working directory."""
    return os.path.abspath(os.path.expanduser(output_path))
