import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from engines import SynthesisError  # noqa: F401


@dataclass
class Chunk:
    text: str
    address: Tuple[int, ...]

    @property
    def relative_path(self) -> str:
        return os.path.join(*(str(idx) for idx in self.address)) + ".wav"


class ChunkTooLongError(ValueError):
    """A comma-split piece is still too long to be spoken in one engine call."""

    def __init__(self, text: str, length: int, line_index: Optional[int] = None):
        self.text = text
        self.length = length
        self.line_index = line_index
        location = f" (line {line_index})" if line_index is not None else ""
        super().__init__(
            f"Chunk of {length} characters is too long{location}: {text[:40]}..."
        )


@dataclass
class PreparedJob:
    input_path: Optional[str]
    output_path: str
    engine_name: str
    engine_path: str
    lines: List[str]
    chunks: List[Chunk]
    total_jobs: int
    total_chars: int
    warnings: List[str]


@dataclass
class JobInspectionResult:
    input_path: Optional[str]
    output_path: str
    engine: str
    engine_path: str
    total_lines: int
    total_jobs: int
    total_chars: int
    chunk_paths: List[str]
    warnings: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "engine": self.engine,
            "engine_path": self.engine_path,
            "total_lines": self.total_lines,
            "total_jobs": self.total_jobs,
            "total_chars": self.total_chars,
            "chunk_paths": self.chunk_paths,
            "warnings": self.warnings,
        }
