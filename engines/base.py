"""Abstract base class for speech synthesis engines."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class VoiceOptions:
    """Voice settings forwarded to the engine on every synthesis call."""

    narrator: Optional[str] = None
    emotion: Optional[str] = None
    speed: Optional[int] = None
    pitch: Optional[int] = None


class SynthesisEngine(ABC):
    """Interface every engine exposes to the pipeline.

    An engine turns one chunk of text into one WAV file on disk. The
    pipeline owns the file layout; the engine only writes where it is told.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short identifier used in events and on the command line."""

    @abstractmethod
    def synthesize(self, text: str, out_path: str) -> None:
        """Write the speech for ``text`` to ``out_path`` as a WAV file.

        Raises:
            SynthesisError: If the engine fails or writes no audio.
        """

    @abstractmethod
    def list_narrators(self) -> str:
        """Return the engine's narrator listing as text."""

    @abstractmethod
    def list_emotions(self, narrator: str) -> str:
        """Return the emotion vocabulary of ``narrator`` as text."""

    def cleanup(self) -> None:
        """Release engine resources. The default has nothing to release."""


class SynthesisError(RuntimeError):
    """The engine exited with an error or left no audio behind."""

    def __init__(
        self,
        message: str,
        *,
        text: str = "",
        output_path: str = "",
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        self.text = text
        self.output_path = output_path
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
