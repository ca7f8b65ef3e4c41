"""Deterministic mock engine for end-to-end tests."""

import os
from typing import List, Optional, Tuple

import numpy as np
from pydub import AudioSegment

from .base import SynthesisEngine, SynthesisError, VoiceOptions

MOCK_NARRATORS = ("Mock Narrator A", "Mock Narrator B")
MOCK_EMOTIONS = ("happy", "sad", "angry")


class MockEngine(SynthesisEngine):
    """Fast engine that writes synthetic 44.1 kHz mono 16-bit WAV files."""

    sample_rate = 44100

    def __init__(self, options: Optional[VoiceOptions] = None) -> None:
        self.options = options or VoiceOptions()
        self.calls: List[Tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    def synthesize(self, text: str, out_path: str) -> None:
        if not text.strip():
            raise SynthesisError(
                "mock engine cannot speak empty text",
                text=text,
                output_path=out_path,
            )

        self.calls.append((text, out_path))
        out_dir = os.path.dirname(out_path)
        if out_dir and not os.path.isdir(out_dir):
            raise SynthesisError(
                f"output directory does not exist: {out_dir}",
                text=text,
                output_path=out_path,
            )
        segment = AudioSegment(
            self.text_to_samples(text).tobytes(),
            frame_rate=self.sample_rate,
            sample_width=2,
            channels=1,
        )
        segment.export(out_path, format="wav").close()

    def list_narrators(self) -> str:
        return "\n".join(MOCK_NARRATORS) + "\n"

    def list_emotions(self, narrator: str) -> str:
        if narrator not in MOCK_NARRATORS:
            return f"Unknown narrator: {narrator}\n"
        return "\n".join(MOCK_EMOTIONS) + "\n"

    def text_to_samples(self, text: str) -> np.ndarray:
        """Generate deterministic int16 tone data from the chunk text."""
        speed = self.options.speed or 100
        base_len = max(441, int(len(text) * 441 * 100 / speed))
        seed = sum((idx + 1) * ord(ch) for idx, ch in enumerate(text)) % 9973
        freq_hz = 180 + (seed % 220)

        t = np.arange(base_len, dtype=np.float32)
        waveform = np.sin(2 * np.pi * freq_hz * t / self.sample_rate)
        pcm = np.clip(waveform * 12000.0, -32768, 32767)
        return pcm.astype(np.int16)
