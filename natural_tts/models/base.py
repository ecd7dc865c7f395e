"""TTS backend interface with the shared temp-file fallbacks."""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from natural_tts.audio.normalize import from_file
from natural_tts.audio.payload import AudioPayload
from natural_tts.audio.playback import AudioSink, play_file
from natural_tts.errors import NotSupported, SaveFailed
from natural_tts.handles import PlaybackHandle, SinkHandle

log = logging.getLogger(__name__)


def did_save(path: str | Path) -> None:
    """Raise ``SaveFailed`` unless *path* opens for reading and is not empty."""
    try:
        with open(path, "rb") as f:
            empty = not f.read(1)
    except OSError as exc:
        raise SaveFailed(f"Didn't save: {path} ({exc})") from exc
    if empty:
        raise SaveFailed(f"Didn't save: {path} is empty")


class TTSModel:
    """Base class for every backend.

    Subclasses implement ``render_to_file()`` (file-producing engines) and may
    override ``say()``, ``synthesize()`` and ``start()`` when the engine can do
    better than the generic composition:

    * ``say``        -> save to a temp file, play it, delete it
    * ``synthesize`` -> save to a temp file, read it back, delete it
    * ``start``      -> save to the given path and stream it through a sink

    ``blocking`` decides whether ``say()`` waits for playback to finish.
    """

    name = "model"
    temp_suffix = ".wav"

    def __init__(self, blocking: bool = True):
        self.blocking = blocking
        self._sink: AudioSink | None = None

    def render_to_file(self, message: str, path: Path) -> None:
        raise NotSupported(f"{self.name} cannot save audio to a file")

    def save(self, message: str, path: str | Path) -> None:
        """Render *message* to *path*; the file must be readable afterwards."""
        path = Path(path)
        self.render_to_file(message, path)
        did_save(path)
        log.debug("%s saved %d chars to %s", self.name, len(message), path)

    def say(self, message: str) -> None:
        with _temp_path(self.temp_suffix) as tmp_path:
            self.save(message, tmp_path)
            self._release_playback()
            sink = play_file(tmp_path)
        self._finish_say(sink)

    def synthesize(self, message: str) -> AudioPayload:
        with _temp_path(self.temp_suffix) as tmp_path:
            self.save(message, tmp_path)
            return from_file(tmp_path)

    def start(self, message: str, path: str | Path) -> PlaybackHandle:
        self.save(message, path)
        self._release_playback()
        self._sink = play_file(path)
        return SinkHandle(self._sink)

    def close(self) -> None:
        """Release engine resources and the last output stream."""
        self._release_playback()

    def _release_playback(self) -> None:
        # One output stream per model: a new playback cuts off the last one.
        if self._sink is not None:
            self._sink.close()
            self._sink = None

    def _finish_say(self, sink: AudioSink) -> None:
        self._sink = sink
        if self.blocking:
            sink.wait_until_done()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


@contextmanager
def _temp_path(suffix: str) -> Iterator[Path]:
    """Yield a not-yet-existing file path inside a private temp directory."""
    with tempfile.TemporaryDirectory(prefix="natural_tts_") as tmp_dir:
        yield Path(tmp_dir) / f"speech{suffix}"
