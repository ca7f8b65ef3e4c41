"""Speech synthesis engines driven by the batch pipeline."""

from .base import SynthesisEngine, SynthesisError, VoiceOptions
from .factory import create_engine, get_available_engines

__all__ = [
    "SynthesisEngine",
    "SynthesisError",
    "VoiceOptions",
    "create_engine",
    "get_available_engines",
]
