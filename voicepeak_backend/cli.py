import argparse
import os
import tempfile
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from rich.progress import (
    BarColumn,
    Progress,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)

from engines import SynthesisEngine, VoiceOptions, create_engine, get_available_engines

from .cleanup import cleanup_engine, cleanup_temp_dir
from .events import EventEmitter, start_heartbeat_emitter
from .job import (
    DEFAULT_PREPARATION_DEPS,
    JobPreparationDeps,
    describe_chunks,
    prepare_job,
)
from .merge import DEFAULT_SAMPLE_RATE, merge_wav_tree
from .models import JobInspectionResult, PreparedJob
from .pipeline import run_synthesis
from .runtime import build_voice_options, resolve_engine_path_for_args


@dataclass
class MainDeps:
    parse_args: Callable[[], argparse.Namespace]
    event_emitter_cls: Callable[..., EventEmitter]
    inspect_job: Callable[..., JobInspectionResult]
    prepare_job: Callable[..., PreparedJob]
    preparation_deps: JobPreparationDeps
    build_voice_options: Callable[[argparse.Namespace], VoiceOptions]
    resolve_engine_path_for_args: Callable[[argparse.Namespace], str]
    create_engine: Callable[..., SynthesisEngine]
    run_synthesis: Callable[..., Any]
    merge_wav_tree: Callable[[str, str], int]
    cleanup_engine: Callable[[Optional[SynthesisEngine]], Optional[BaseException]]
    cleanup_temp_dir: Callable[[Optional[str]], Optional[BaseException]]
    start_heartbeat_emitter: Callable[..., Any]
    tempfile_module: Any


DEFAULT_MAIN_DEPS = MainDeps(
    parse_args=lambda: parse_args(),
    event_emitter_cls=EventEmitter,
    inspect_job=lambda args, preparation_deps=None: inspect_job(
        args,
        preparation_deps=preparation_deps,
    ),
    prepare_job=prepare_job,
    preparation_deps=DEFAULT_PREPARATION_DEPS,
    build_voice_options=build_voice_options,
    resolve_engine_path_for_args=resolve_engine_path_for_args,
    create_engine=create_engine,
    run_synthesis=run_synthesis,
    merge_wav_tree=merge_wav_tree,
    cleanup_engine=cleanup_engine,
    cleanup_temp_dir=cleanup_temp_dir,
    start_heartbeat_emitter=start_heartbeat_emitter,
    tempfile_module=tempfile,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read a text file aloud with VOICEPEAK and merge the result into one WAV"
    )
    parser.add_argument("say", nargs="?", default=None, help=argparse.SUPPRESS)
    parser.add_argument("-t", "--text", metavar="FILE", help="Text file to say")
    parser.add_argument("-o", "--out", metavar="FILE", help="Path of output WAV file")
    parser.add_argument(
        "-n",
        "--narrator",
        metavar="NAME",
        help="Name of voice, check --list-narrator",
    )
    parser.add_argument(
        "-e",
        "--emotion",
        metavar="EXPR",
        help="Emotion expression, for example: happy=50,sad=50. Also check --list-emotion",
    )
    parser.add_argument(
        "--list-narrator",
        action="store_true",
        help="Print voice list",
    )
    parser.add_argument(
        "--list-emotion",
        metavar="NARRATOR",
        help="Print emotion list for given voice",
    )
    parser.add_argument("--speed", type=int, metavar="VALUE", help="Speed (50 - 200)")
    parser.add_argument("--pitch", type=int, metavar="VALUE", help="Pitch (-300 - 300)")
    parser.add_argument(
        "--aux-voicepeak-path",
        dest="exec_path",
        metavar="PATH",
        help="Absolute path of the VOICEPEAK executable (default: $VOICEPEAK_PATH, "
        "the platform install location, then PATH)",
    )
    parser.add_argument(
        "--engine",
        choices=get_available_engines(),
        default="voicepeak",
        help="Synthesis engine to use (default: voicepeak)",
    )
    parser.add_argument(
        "--inspect",
        action="store_true",
        help="Report the job count and chunk layout, then exit without synthesizing",
    )
    parser.add_argument(
        "--keep-temp",
        action="store_true",
        help="Keep the temporary chunk WAV tree after the run",
    )
    parser.add_argument(
        "--no-rich",
        action="store_true",
        help="Disable rich progress bar (for CLI integration)",
    )
    parser.add_argument(
        "--event-format",
        choices=["text", "json"],
        default="text",
        help="Event output format (default: text)",
    )
    parser.add_argument(
        "--log-file",
        help="Optional path to append event logs",
    )
    return parser.parse_args(argv)


def inspect_job(
    args: argparse.Namespace,
    preparation_deps: Optional[JobPreparationDeps] = None,
) -> JobInspectionResult:
    prepared = prepare_job(args, deps=preparation_deps)
    return JobInspectionResult(
        input_path=prepared.input_path,
        output_path=prepared.output_path,
        engine=prepared.engine_name,
        engine_path=prepared.engine_path,
        total_lines=len(prepared.lines),
        total_jobs=prepared.total_jobs,
        total_chars=prepared.total_chars,
        chunk_paths=describe_chunks(prepared.chunks),
        warnings=prepared.warnings,
    )


def run_listing(args: argparse.Namespace, deps: MainDeps, events: EventEmitter) -> None:
    engine = deps.create_engine(
        args.engine,
        deps.resolve_engine_path_for_args(args),
        deps.build_voice_options(args),
    )
    try:
        if args.list_narrator:
            events.emit("listing", text=engine.list_narrators())
        else:
            events.emit("listing", text=engine.list_emotions(args.list_emotion))
    finally:
        cleanup_error = deps.cleanup_engine(engine)
        if cleanup_error is not None:
            events.warn(f"Engine cleanup failed: {cleanup_error}")


def main(deps: Optional[MainDeps] = None) -> None:
    deps = deps or DEFAULT_MAIN_DEPS

    args = deps.parse_args()
    events = deps.event_emitter_cls(
        event_format=args.event_format,
        job_id=os.path.basename(args.out or "") or "job",
        log_file=args.log_file,
    )

    try:
        if args.list_narrator or args.list_emotion:
            run_listing(args, deps, events)
            return

        if not args.out:
            raise ValueError("--out is required to synthesize speech.")

        if args.inspect:
            inspection = deps.inspect_job(args, preparation_deps=deps.preparation_deps)
            events.emit("inspection", result=inspection.to_dict())
            return

        voice_options = deps.build_voice_options(args)

        events.emit("phase", phase="COUNTING")
        prepared = deps.prepare_job(args, deps=deps.preparation_deps)
        for warning in prepared.warnings:
            events.warn(warning)
        events.emit("total_jobs", total_jobs=prepared.total_jobs)
        events.emit("metadata", key="engine", value=prepared.engine_name)
        events.emit("metadata", key="total_chars", value=prepared.total_chars)

        engine: Optional[SynthesisEngine] = None
        temp_dir: Optional[str] = None
        main_error: Optional[BaseException] = None

        try:
            engine = deps.create_engine(
                prepared.engine_name,
                prepared.engine_path,
                voice_options,
            )
            temp_dir = deps.tempfile_module.mkdtemp(prefix="voicepeak-")

            progress = None
            task_id = None
            if not args.no_rich:
                progress = Progress(
                    TextColumn("[bold]Synthesizing[/bold]"),
                    BarColumn(),
                    TextColumn("{task.completed}/{task.total} jobs"),
                    TimeElapsedColumn(),
                    TimeRemainingColumn(),
                )
                task_id = progress.add_task("voicepeak", total=prepared.total_jobs, completed=0)

            events.info(
                f"Processing {prepared.total_jobs} jobs from {len(prepared.lines)} lines "
                f"with {engine.name} engine"
            )
            events.emit("phase", phase="SYNTHESIZING")

            heartbeat_stop, heartbeat_thread = deps.start_heartbeat_emitter(
                events,
                thread_name="synthesis-heartbeat",
            )
            try:
                if progress:
                    with progress:
                        run_result = deps.run_synthesis(
                            chunks=prepared.chunks,
                            engine=engine,
                            temp_dir=temp_dir,
                            events=events,
                            progress=progress,
                            task_id=task_id,
                        )
                else:
                    run_result = deps.run_synthesis(
                        chunks=prepared.chunks,
                        engine=engine,
                        temp_dir=temp_dir,
                        events=events,
                        progress=progress,
                        task_id=task_id,
                    )
            finally:
                heartbeat_stop.set()
                heartbeat_thread.join(timeout=1)

            events.emit("phase", phase="MERGING")
            events.info("Merging WAV files...")
            total_samples = deps.merge_wav_tree(temp_dir, prepared.output_path)

            avg_time = sum(run_result.times) / max(len(run_result.times), 1)
            events.emit(
                "done",
                output=prepared.output_path,
                jobs=prepared.total_jobs,
                samples=total_samples,
            )
            events.info("Done.")
            events.info(f"Output: {prepared.output_path}")
            events.info(f"Jobs: {prepared.total_jobs}")
            events.info(f"Duration: {total_samples / DEFAULT_SAMPLE_RATE:.2f}s")
            events.info(f"Average job time: {avg_time:.2f}s")
        except BaseException as exc:
            main_error = exc
            raise
        finally:
            cleanup_error: Optional[BaseException] = None

            engine_cleanup_error = deps.cleanup_engine(engine)
            if cleanup_error is None and engine_cleanup_error is not None:
                cleanup_error = engine_cleanup_error

            if args.keep_temp and temp_dir:
                events.info(f"Temporary files kept at: {temp_dir}")
            else:
                temp_cleanup_error = deps.cleanup_temp_dir(temp_dir)
                if cleanup_error is None and temp_cleanup_error is not None:
                    cleanup_error = temp_cleanup_error

            if main_error is None and cleanup_error is not None:
                raise cleanup_error
    except BaseException as exc:
        if isinstance(exc, Exception):
            events.error(str(exc))
        raise
    finally:
        events.close()
