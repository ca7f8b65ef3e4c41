"""Tests for the recursive WAV merger."""

import sys
from pathlib import Path

import numpy as np
import pytest
from pydub import AudioSegment

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from voicepeak_backend.merge import (
    DEFAULT_SAMPLE_RATE,
    merge_wav_tree,
    read_wav_samples,
)


@pytest.mark.unit
class TestMergeWavTree:
    def test_flat_directory_is_concatenated_in_numeric_order(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", [1, 2, 3])
        make_wav(tree / "1.wav", [4, 5])
        make_wav(tree / "2.wav", [6, 7, 8, 9])
        output = tmp_path / "out.wav"

        total = merge_wav_tree(str(tree), str(output))

        assert total == 9
        assert read_wav_samples(str(output)).tolist() == [1, 2, 3, 4, 5, 6, 7, 8, 9]

    def test_output_format_is_mono_44100_16bit(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", [100, -100])
        output = tmp_path / "out.wav"

        merge_wav_tree(str(tree), str(output))

        segment = AudioSegment.from_wav(str(output))
        assert segment.channels == 1
        assert segment.frame_rate == DEFAULT_SAMPLE_RATE == 44100
        assert segment.sample_width == 2

    def test_numeric_order_is_not_lexical(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        for idx in range(12):
            make_wav(tree / f"{idx}.wav", [idx])
        output = tmp_path / "out.wav"

        merge_wav_tree(str(tree), str(output))

        assert read_wav_samples(str(output)).tolist() == list(range(12))

    def test_subdirectory_is_flattened_into_sibling_file(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", [1])
        make_wav(tree / "1" / "0.wav", [2, 3])
        make_wav(tree / "1" / "1.wav", [4])
        make_wav(tree / "2.wav", [5])
        output = tmp_path / "out.wav"

        total = merge_wav_tree(str(tree), str(output))

        assert total == 5
        assert read_wav_samples(str(output)).tolist() == [1, 2, 3, 4, 5]
        assert read_wav_samples(str(tree / "1.wav")).tolist() == [2, 3, 4]

    def test_nested_chunk_groups_merge_bottom_up(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0" / "0" / "0.wav", [1])
        make_wav(tree / "0" / "0" / "1.wav", [2])
        make_wav(tree / "0" / "1.wav", [3])
        make_wav(tree / "0" / "2" / "0.wav", [4])
        make_wav(tree / "0" / "2" / "1.wav", [5])
        make_wav(tree / "1.wav", [6])
        output = tmp_path / "out.wav"

        merge_wav_tree(str(tree), str(output))

        assert read_wav_samples(str(output)).tolist() == [1, 2, 3, 4, 5, 6]

    def test_gap_in_sequence_is_an_error(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", [1])
        make_wav(tree / "2.wav", [3])

        with pytest.raises(FileNotFoundError, match="1.wav"):
            merge_wav_tree(str(tree), str(tmp_path / "out.wav"))

    def test_merge_is_deterministic(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", np.arange(-500, 500, 7))
        make_wav(tree / "1" / "0.wav", [32767, -32768, 0])
        make_wav(tree / "1" / "1.wav", [42] * 100)

        first = tmp_path / "first.wav"
        second = tmp_path / "second.wav"
        merge_wav_tree(str(tree), str(first))
        merge_wav_tree(str(tree), str(second))

        assert first.read_bytes() == second.read_bytes()

    def test_output_parent_directories_are_created(self, tmp_path, make_wav):
        tree = tmp_path / "tree"
        make_wav(tree / "0.wav", [1, 2])
        output = tmp_path / "nested" / "dir" / "out.wav"

        merge_wav_tree(str(tree), str(output))

        assert output.exists()

    def test_input_sample_rate_is_not_resampled(self, tmp_path):
        tree = tmp_path / "tree"
        tree.mkdir()
        samples = np.array([10, 20, 30], dtype=np.int16)
        AudioSegment(
            samples.tobytes(),
            frame_rate=22050,
            sample_width=2,
            channels=1,
        ).export(str(tree / "0.wav"), format="wav").close()
        output = tmp_path / "out.wav"

        merge_wav_tree(str(tree), str(output))

        segment = AudioSegment.from_wav(str(output))
        assert segment.frame_rate == 44100
        assert read_wav_samples(str(output)).tolist() == [10, 20, 30]

    def test_non_16bit_input_is_rejected(self, tmp_path):
        tree = tmp_path / "tree"
        tree.mkdir()
        AudioSegment(
            bytes([0, 10, 20, 30]),
            frame_rate=44100,
            sample_width=1,
            channels=1,
        ).export(str(tree / "0.wav"), format="wav").close()

        with pytest.raises(ValueError, match="not 16-bit PCM"):
            merge_wav_tree(str(tree), str(tmp_path / "out.wav"))

    def test_empty_directory_produces_empty_wav(self, tmp_path):
        tree = tmp_path / "tree"
        tree.mkdir()
        output = tmp_path / "out.wav"

        total = merge_wav_tree(str(tree), str(output))

        assert total == 0
        assert output.exists()
