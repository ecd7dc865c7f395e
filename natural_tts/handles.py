"""Playback handles returned by ``start()``."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from natural_tts.audio.playback import AudioSink
from natural_tts.errors import NotSupported


@runtime_checkable
class SpeechEngine(Protocol):
    """An engine that plays speech by itself and can be told to stop."""

    def stop(self) -> None:
        ...


class PlaybackHandle(ABC):
    """Caller-side control over one in-progress playback."""

    @abstractmethod
    def stop(self) -> None:
        """Halt playback; the handle stays usable for ``resume`` queries."""

    def pause(self) -> None:
        raise NotSupported(f"{type(self).__name__} cannot pause")

    def resume(self) -> None:
        raise NotSupported(f"{type(self).__name__} cannot resume")

    @property
    def is_active(self) -> bool:
        return False


class SinkHandle(PlaybackHandle):
    """Handle over a streaming ``AudioSink``: pause, resume and stop all work."""

    def __init__(self, sink: AudioSink):
        self.sink = sink

    def stop(self) -> None:
        self.sink.stop()

    def pause(self) -> None:
        self.sink.pause()

    def resume(self) -> None:
        self.sink.resume()

    def wait_until_done(self, timeout: float | None = None) -> bool:
        return self.sink.wait_until_done(timeout=timeout)

    @property
    def is_active(self) -> bool:
        return self.sink.is_playing or self.sink.is_paused


class EngineHandle(PlaybackHandle):
    """Opaque handle: the engine manages its own playback, only stop is possible."""

    def __init__(self, engine: SpeechEngine):
        self._engine = engine
        self._stopped = False

    def stop(self) -> None:
        self._engine.stop()
        self._stopped = True

    @property
    def is_active(self) -> bool:
        if self._stopped:
            return False
        is_speaking = getattr(self._engine, "is_speaking", None)
        return bool(is_speaking()) if callable(is_speaking) else True
