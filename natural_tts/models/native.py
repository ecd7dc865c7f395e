"""Operating-system speech engine (SAPI5 / NSSpeechSynthesizer / eSpeak) via pyttsx3."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import pyttsx3

from natural_tts.audio.payload import AudioPayload
from natural_tts.errors import NotSupported
from natural_tts.handles import EngineHandle, PlaybackHandle
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)


class NativeModel(TTSModel):
    """Speaks through the platform speech engine.

    The engine plays audio itself and exposes no file output, so ``save`` and
    ``synthesize`` are unsupported and ``start`` returns an opaque handle.
    ``say`` while the engine is still speaking is a silent no-op.

    pyttsx3 keeps one engine per driver for the whole process; this model
    drives it from one thread at a time.
    """

    name = "native"

    def __init__(self, tts_config: dict | None = None, engine=None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self._engine = engine if engine is not None else pyttsx3.init(tts_config.get("driver"))
        self._worker: threading.Thread | None = None

        if "rate" in tts_config:
            self._engine.setProperty("rate", tts_config["rate"])
        if "volume" in tts_config:
            self._engine.setProperty("volume", tts_config["volume"])
        if tts_config.get("voice"):
            self._engine.setProperty("voice", tts_config["voice"])

    def is_speaking(self) -> bool:
        if self._worker is not None and self._worker.is_alive():
            return True
        return bool(self._engine.isBusy())

    def _speak(self, message: str, blocking: bool) -> None:
        self._engine.say(message)
        if blocking:
            self._engine.runAndWait()
        else:
            self._worker = threading.Thread(target=self._engine.runAndWait, daemon=True)
            self._worker.start()

    def say(self, message: str) -> None:
        if self.is_speaking():
            log.debug("Engine already speaking; ignoring say()")
            return
        self._speak(message, self.blocking)

    def save(self, message: str, path: str | Path) -> None:
        raise NotSupported("The OS speech engine cannot save audio to a file")

    def synthesize(self, message: str) -> AudioPayload:
        raise NotSupported("The OS speech engine cannot synthesize to memory")

    def start(self, message: str, path: str | Path | None = None) -> PlaybackHandle:
        """Start speaking without blocking. *path* is ignored: no file is written."""
        if not self.is_speaking():
            self._speak(message, blocking=False)
        return EngineHandle(self)

    def stop(self) -> None:
        self._engine.stop()

    def voices(self) -> list[dict]:
        return [
            {
                "id": voice.id,
                "name": getattr(voice, "name", voice.id),
                "language": str(voice.languages[0]) if getattr(voice, "languages", None) else "unknown",
                "gender": str(getattr(voice, "gender", None) or "unknown"),
            }
            for voice in self._engine.getProperty("voices")
        ]

    def close(self) -> None:
        if self.is_speaking():
            self._engine.stop()
        super().close()
