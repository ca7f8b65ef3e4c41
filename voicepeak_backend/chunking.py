import re
from typing import Iterable, List

from .models import Chunk, ChunkTooLongError

MAX_CHUNK_CHARS = 140

# "。" and the half-width "｡"
PERIOD_SPLIT_RE = re.compile("[。｡]")
# "、" and the half-width "､"
COMMA_SPLIT_RE = re.compile("[、､]")


def split_text_to_lines(text: str) -> List[str]:
    """Split input text into spoken lines, dropping line terminators and blank lines."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in text.split("\n") if line.strip()]


def _split_segments(pattern: re.Pattern, text: str) -> List[str]:
    return [segment for segment in pattern.split(text) if segment.strip()]


def plan_line_chunks(line: str, line_idx: int) -> List[Chunk]:
    """Decide how one line is cut into engine-sized chunks.

    A line of at most MAX_CHUNK_CHARS characters is a single chunk. Longer
    lines are split on periods; a period segment that is still too long
    causes the *whole line* to be split on commas, once per such segment.
    Comma pieces must be strictly shorter than MAX_CHUNK_CHARS.

    A long line made only of delimiters has nothing left to speak and
    yields no chunks. Period indices are only used up by segments that
    produce chunks, so the numbered files of a line never have gaps.

    Raises:
        ChunkTooLongError: If a comma piece has MAX_CHUNK_CHARS characters or more.
    """
    if len(line) <= MAX_CHUNK_CHARS:
        return [Chunk(line, (line_idx,))]

    chunks: List[Chunk] = []
    period_idx = 0
    for segment in _split_segments(PERIOD_SPLIT_RE, line):
        if len(segment) <= MAX_CHUNK_CHARS:
            chunks.append(Chunk(segment, (line_idx, period_idx)))
            period_idx += 1
            continue

        pieces = _split_segments(COMMA_SPLIT_RE, line)
        for comma_idx, piece in enumerate(pieces):
            if len(piece) >= MAX_CHUNK_CHARS:
                raise ChunkTooLongError(piece, len(piece), line_index=line_idx)
            chunks.append(Chunk(piece, (line_idx, period_idx, comma_idx)))
        if pieces:
            period_idx += 1

    return chunks


def plan_chunks(lines: Iterable[str]) -> List[Chunk]:
    """Plan every line; lines that yield no chunks take no line index."""
    chunks: List[Chunk] = []
    line_idx = 0
    for line in lines:
        line_chunks = plan_line_chunks(line, line_idx)
        if line_chunks:
            chunks.extend(line_chunks)
            line_idx += 1
    return chunks


def count_line_jobs(line: str) -> int:
    return len(plan_line_chunks(line, 0))


def count_total_jobs(text: str) -> int:
    """Number of engine invocations needed for ``text``, without running any.

    Blank lines are dropped by split_text_to_lines before counting, so they
    add nothing here even though count_line_jobs("") is 1.
    """
    return len(plan_chunks(split_text_to_lines(text)))
