"""VOICEPEAK engine driven as an external process."""

import os
import shlex
import subprocess
import sys
from typing import List, Optional, Tuple, Union

from .base import SynthesisEngine, SynthesisError, VoiceOptions


def _powershell_quote(arg: str) -> str:
    return "'" + arg.replace("'", "''") + "'"


def quote_command(cmd: List[str]) -> str:
    """Render an argv list as one command line for the platform shell.

    POSIX shells get ``shlex`` quoting. On Windows the line is meant for
    PowerShell: every argument is a single-quoted literal, so ``&``, ``|``,
    ``%`` and ``$`` in the text are never interpreted.
    """
    if sys.platform == "win32":
        return "& " + " ".join(_powershell_quote(arg) for arg in cmd)
    return shlex.join(cmd)


def shell_invocation(cmd: List[str]) -> Tuple[Union[str, List[str]], bool]:
    """Return the ``subprocess.run`` arguments and ``shell`` flag for ``cmd``."""
    if sys.platform == "win32":
        return ["powershell", "-NoProfile", "-Command", quote_command(cmd)], False
    return quote_command(cmd), True


class VoicePeakEngine(SynthesisEngine):
    """Runs the VOICEPEAK command line once per chunk.

    Every call goes through the platform shell with the text single-quoted,
    the way the VOICEPEAK CLI is documented to be invoked. Calls block until
    the process exits; there is no timeout.
    """

    def __init__(self, exec_path: str, options: Optional[VoiceOptions] = None):
        if not exec_path:
            raise ValueError("VOICEPEAK executable path is empty.")
        self.exec_path = exec_path
        self.options = options or VoiceOptions()

    @property
    def name(self) -> str:
        return "voicepeak"

    def build_say_command(self, text: str, out_path: str) -> List[str]:
        cmd = [
            self.exec_path,
            "--say", text,
            "--out", out_path,
        ]

        if self.options.narrator:
            cmd.extend(["--narrator", self.options.narrator])
        if self.options.emotion:
            cmd.extend(["--emotion", self.options.emotion])
        if self.options.speed is not None:
            cmd.extend(["--speed", str(self.options.speed)])
        if self.options.pitch is not None:
            cmd.extend(["--pitch", str(self.options.pitch)])
        return cmd

    def _run(self, cmd: List[str]) -> subprocess.CompletedProcess:
        args, use_shell = shell_invocation(cmd)
        return subprocess.run(args, shell=use_shell, capture_output=True)

    def synthesize(self, text: str, out_path: str) -> None:
        proc = self._run(self.build_say_command(text, out_path))
        stderr = proc.stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            raise SynthesisError(
                f"voicepeak failed ({proc.returncode}): {stderr.strip()}",
                text=text,
                output_path=out_path,
                returncode=proc.returncode,
                stderr=stderr,
            )

        if not os.path.exists(out_path) or os.path.getsize(out_path) == 0:
            raise SynthesisError(
                f"voicepeak wrote no audio to {out_path}",
                text=text,
                output_path=out_path,
                returncode=proc.returncode,
                stderr=stderr,
            )

    def list_narrators(self) -> str:
        return self._relay_output(self._run([self.exec_path, "--list-narrator"]))

    def list_emotions(self, narrator: str) -> str:
        return self._relay_output(
            self._run([self.exec_path, "--list-emotion", narrator])
        )

    @staticmethod
    def _relay_output(proc: subprocess.CompletedProcess) -> str:
        stdout = proc.stdout.decode("utf-8", errors="replace")
        if stdout.strip():
            return stdout
        return proc.stderr.decode("utf-8", errors="replace")
