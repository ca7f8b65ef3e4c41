import argparse
import os
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from .chunking import count_total_jobs, plan_chunks, split_text_to_lines
from .models import Chunk, PreparedJob
from .runtime import resolve_engine_path_for_args, resolve_output_path


def read_text_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


@dataclass
class JobPreparationDeps:
    resolve_engine_path_for_args: Callable[[argparse.Namespace], str] = (
        resolve_engine_path_for_args
    )
    read_text_file: Callable[[str], str] = read_text_file
    split_text_to_lines: Callable[[str], List[str]] = split_text_to_lines
    plan_chunks: Callable[..., List[Chunk]] = plan_chunks
    count_total_jobs: Callable[[str], int] = count_total_jobs


DEFAULT_PREPARATION_DEPS = JobPreparationDeps()


def load_input_text(args: argparse.Namespace, deps: JobPreparationDeps) -> str:
    if args.text:
        if not os.path.exists(args.text):
            raise FileNotFoundError(f"Input text file not found: {args.text}")
        return deps.read_text_file(args.text)
    if args.say:
        return args.say
    raise ValueError("Nothing to say: pass --text FILE or a text argument.")


def repeated_comma_split_warnings(chunks: List[Chunk]) -> List[str]:
    """Flag lines whose comma split was repeated for several long sentences."""
    long_segments = {
        (chunk.address[0], chunk.address[1])
        for chunk in chunks
        if len(chunk.address) == 3
    }
    per_line = Counter(line_idx for line_idx, _ in long_segments)

    warnings = []
    for line_idx, count in sorted(per_line.items()):
        if count > 1:
            warnings.append(
                f"Line {line_idx} has {count} over-long sentences; the whole line "
                f"is comma-split {count} times and will be spoken {count} times."
            )
    return warnings


def prepare_job(
    args: argparse.Namespace,
    *,
    deps: Optional[JobPreparationDeps] = None,
) -> PreparedJob:
    deps = deps or DEFAULT_PREPARATION_DEPS
    engine_path = deps.resolve_engine_path_for_args(args)
    text = load_input_text(args, deps)
    lines = deps.split_text_to_lines(text)
    if not lines:
        raise ValueError("No text lines to synthesize.")

    total_jobs = deps.count_total_jobs(text)
    chunks = deps.plan_chunks(lines)
    if not chunks:
        raise ValueError("No speakable text: every line is made of delimiters only.")
    if total_jobs != len(chunks):
        raise RuntimeError(
            f"Job count mismatch: counted {total_jobs} jobs but planned {len(chunks)} chunks."
        )
    total_chars = sum(len(chunk.text) for chunk in chunks)

    return PreparedJob(
        input_path=args.text,
        output_path=resolve_output_path(args.out),
        engine_name=args.engine,
        engine_path=engine_path,
        lines=lines,
        chunks=chunks,
        total_jobs=total_jobs,
        total_chars=total_chars,
        warnings=repeated_comma_split_warnings(chunks),
    )


def describe_chunks(chunks: List[Any]) -> List[str]:
    return [chunk.relative_path.replace(os.sep, "/") for chunk in chunks]
