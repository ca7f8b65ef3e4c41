"""Factory function for creating synthesis engines."""

from typing import List, Optional

from .base import SynthesisEngine, VoiceOptions


def create_engine(
    engine_type: str,
    exec_path: Optional[str] = None,
    options: Optional[VoiceOptions] = None,
) -> SynthesisEngine:
    """Create a synthesis engine instance.

    Args:
        engine_type: The type of engine to create ('voicepeak' or 'mock')
        exec_path: Path of the VOICEPEAK executable (voicepeak only)
        options: Narrator, emotion, speed and pitch forwarded on each call

    Returns:
        An instance of SynthesisEngine

    Raises:
        ValueError: If the engine type is unknown or no executable is given
    """
    if engine_type == "voicepeak":
        from .voicepeak import VoicePeakEngine

        return VoicePeakEngine(exec_path or "", options)
    elif engine_type == "mock":
        from .mock import MockEngine

        return MockEngine(options)
    else:
        raise ValueError(
            f"Unknown engine type: {engine_type}. "
            f"Available engines: {get_available_engines()}"
        )


def get_available_engines() -> List[str]:
    """Get a list of engine types accepted by create_engine()."""
    return ["voicepeak", "mock"]
