import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from voicepeak_backend.merge import write_wav_samples


@pytest.fixture()
def temp_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture()
def make_wav():
    """Write a 44.1 kHz mono 16-bit WAV holding the given samples."""

    def _make_wav(path, samples):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        write_wav_samples(np.array(samples, dtype=np.int16), str(path))
        return path

    return _make_wav
