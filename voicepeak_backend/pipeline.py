import os
import time
from dataclasses import dataclass
from typing import Any, List, Optional

from engines import SynthesisEngine

from .events import EventEmitter
from .models import Chunk


@dataclass
class PipelineRunResult:
    output_paths: List[str]
    times: List[float]


def run_synthesis(
    *,
    chunks: List[Chunk],
    engine: SynthesisEngine,
    temp_dir: str,
    events: EventEmitter,
    progress: Optional[Any] = None,
    task_id: Optional[Any] = None,
) -> PipelineRunResult:
    """Synthesize every chunk into its numbered slot under ``temp_dir``.

    Chunks run one at a time in plan order. The first engine failure stops
    the run.
    """
    total_jobs = len(chunks)
    output_paths: List[str] = []
    times: List[float] = []

    for idx, chunk in enumerate(chunks):
        out_path = os.path.join(temp_dir, chunk.relative_path)
        os.makedirs(os.path.dirname(out_path), exist_ok=True)

        events.emit("job", path=chunk.relative_path.replace(os.sep, "/"), status="SYNTH")
        start = time.perf_counter()
        engine.synthesize(chunk.text, out_path)
        elapsed = time.perf_counter() - start

        times.append(elapsed)
        output_paths.append(out_path)
        events.emit("timing", job_idx=idx, job_timing_ms=int(elapsed * 1000))

        if progress and task_id is not None:
            progress.update(task_id, advance=1)
        events.emit("progress", current_job=idx + 1, total_jobs=total_jobs)

    return PipelineRunResult(output_paths=output_paths, times=times)
