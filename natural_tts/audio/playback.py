"""Audio output with pause/resume and instant stop."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

import numpy as np

from natural_tts.audio.normalize import decode, from_file
from natural_tts.audio.payload import AudioPayload

log = logging.getLogger(__name__)


def _sounddevice():
    # Imported on first playback so synthesis-only use works without PortAudio.
    import sounddevice as sd

    return sd


def _open_output_stream(**kwargs: Any):
    return _sounddevice().OutputStream(**kwargs)


class AudioSink:
    """Streams a decoded buffer to the default output device.

    The read position survives ``pause()``/``resume()``. ``stop()`` drops the
    remaining audio, so a later ``resume()`` succeeds without producing sound.
    """

    def __init__(
        self,
        audio: np.ndarray,
        sample_rate: int,
        stream_factory: Callable[..., Any] | None = None,
    ):
        audio = np.asarray(audio, dtype=np.float32)
        if audio.ndim == 1:
            audio = audio.reshape(-1, 1)
        self._audio = audio
        self._sample_rate = sample_rate
        self._stream_factory = stream_factory or _open_output_stream
        self._stream = None
        self._position = 0
        self._lock = threading.Lock()
        self._finished = threading.Event()
        self._paused = False
        self._stopped = False
        self._closed = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def position(self) -> int:
        """Frames handed to the device so far."""
        return self._position

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_stopped(self) -> bool:
        return self._stopped

    @property
    def is_playing(self) -> bool:
        return (
            self._stream is not None
            and not self._paused
            and not self._stopped
            and not self._finished.is_set()
        )

    def play(self) -> None:
        """Open the output stream and start playback. Non-blocking."""
        if self._stream is not None or self._stopped:
            return
        if len(self._audio) == 0:
            self._finished.set()
            return
        self._stream = self._stream_factory(
            samplerate=self._sample_rate,
            channels=self._audio.shape[1],
            dtype="float32",
            callback=self._callback,
            finished_callback=self._on_finished,
        )
        self._stream.start()
        log.debug("Playback started: %d frames @ %d Hz", len(self._audio), self._sample_rate)

    def pause(self) -> None:
        if self._stream is None or self._stopped or self._paused:
            return
        self._paused = True
        self._stream.stop()

    def resume(self) -> None:
        """Continue from the paused position. A stopped sink stays silent."""
        if self._stopped or not self._paused:
            return
        self._paused = False
        self._stream.start()

    def stop(self) -> None:
        """Stop immediately and discard the rest of the buffer."""
        if self._stopped:
            return
        self._stopped = True
        self._paused = False
        with self._lock:
            self._position = len(self._audio)
        self._close_stream(abort=True)
        self._finished.set()

    def close(self) -> None:
        """Release the output stream, stopping playback that is still running."""
        if self._finished.is_set():
            self._close_stream()
        else:
            self.stop()

    def wait_until_done(self, timeout: float | None = None) -> bool:
        """Block until playback finishes. Returns True if finished, False on timeout."""
        if self._stream is None and not self._finished.is_set():
            return True
        done = self._finished.wait(timeout=timeout)
        if done:
            self._close_stream()
        return done

    def _close_stream(self, abort: bool = False) -> None:
        if self._stream is None or self._closed:
            return
        self._closed = True
        if abort:
            self._stream.abort()
        self._stream.close()

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        if status:
            log.debug("Output stream status: %s", status)
        with self._lock:
            chunk = self._audio[self._position:self._position + frames]
            self._position += len(chunk)
        outdata[:len(chunk)] = chunk
        if len(chunk) < frames:
            outdata[len(chunk):] = 0
            raise _sounddevice().CallbackStop

    def _on_finished(self) -> None:
        # Also fires after pause(); only the end of the buffer counts as done.
        if self._position >= len(self._audio):
            self._finished.set()


def play_audio(
    audio: np.ndarray,
    sample_rate: int,
    stream_factory: Callable[..., Any] | None = None,
) -> AudioSink:
    """Start playing *audio* (``(frames,)`` or ``(frames, channels)``)."""
    sink = AudioSink(audio, sample_rate, stream_factory=stream_factory)
    sink.play()
    return sink


def play_payload(payload: AudioPayload, stream_factory: Callable[..., Any] | None = None) -> AudioSink:
    """Decode *payload* if needed and start playing it."""
    pcm = decode(payload)
    return play_audio(pcm.channel_frames(), pcm.spec.sample_rate, stream_factory=stream_factory)


def play_file(path: str | Path, stream_factory: Callable[..., Any] | None = None) -> AudioSink:
    """Read an audio file fully into memory and start playing it."""
    return play_payload(from_file(path), stream_factory=stream_factory)
