import os

import numpy as np
from pydub import AudioSegment

DEFAULT_SAMPLE_RATE = 44100
SAMPLE_WIDTH = 2


def samples_to_segment(samples: np.ndarray, rate: int = DEFAULT_SAMPLE_RATE) -> AudioSegment:
    if samples.dtype != np.int16:
        samples = samples.astype(np.int16)
    return AudioSegment(
        samples.tobytes(),
        frame_rate=rate,
        sample_width=SAMPLE_WIDTH,
        channels=1,
    )


def read_wav_samples(path: str) -> np.ndarray:
    """Return the raw 16-bit samples of a WAV file, channels left interleaved."""
    segment = AudioSegment.from_wav(path)
    if segment.sample_width != SAMPLE_WIDTH:
        raise ValueError(
            f"{path} is not 16-bit PCM (sample width: {segment.sample_width} bytes)"
        )
    return np.frombuffer(segment.raw_data, dtype=np.int16)


def write_wav_samples(
    samples: np.ndarray,
    output_path: str,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> None:
    output_dir = os.path.dirname(os.path.abspath(output_path))
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    out_f = samples_to_segment(samples, sample_rate).export(output_path, format="wav")
    out_f.close()


def count_files(directory: str) -> int:
    return sum(
        1
        for name in os.listdir(directory)
        if os.path.isfile(os.path.join(directory, name))
    )


def merge_wav_tree(merge_dir: str, output_path: str) -> int:
    """Concatenate ``0.wav``, ``1.wav``, ... of ``merge_dir`` into ``output_path``.

    Every subdirectory ``name/`` is first merged into the sibling file
    ``name.wav``, so a nested chunk group takes the place of a single leaf
    in its parent. Files are counted after that flattening step and read in
    numeric order; a gap in the sequence is an error.

    Returns:
        Number of samples written to ``output_path``.

    Raises:
        FileNotFoundError: If a numbered WAV file is missing.
        ValueError: If an input WAV is not 16-bit PCM.
    """
    for name in sorted(os.listdir(merge_dir)):
        entry_path = os.path.join(merge_dir, name)
        if os.path.isdir(entry_path):
            merge_wav_tree(entry_path, entry_path + ".wav")

    file_count = count_files(merge_dir)
    parts = []
    for file_number in range(file_count):
        file_path = os.path.join(merge_dir, f"{file_number}.wav")
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"WAV file missing from merge sequence: {file_path}")
        parts.append(read_wav_samples(file_path))

    if parts:
        samples = np.concatenate(parts)
    else:
        samples = np.array([], dtype=np.int16)

    write_wav_samples(samples, output_path)
    return len(samples)
