"""Microsoft Edge online neural TTS via the edge-tts library."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import edge_tts

from natural_tts.audio.normalize import from_encoded
from natural_tts.audio.payload import AudioPayload
from natural_tts.audio.playback import play_payload
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

AUDIO_FORMAT = "audio-24khz-48kbitrate-mono-mp3"
DEFAULT_VOICE = "en-US-AriaNeural"


class MSEdgeModel(TTSModel):
    """Streams speech from the Edge read-aloud service.

    ``synthesize()`` returns the encoded MP3 stream as an opaque payload with
    the word/sentence boundary events as metadata; ``say()`` decodes it in
    memory instead of going through a temp file.
    """

    name = "msedge"
    temp_suffix = ".mp3"

    def __init__(self, tts_config: dict | None = None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self.voice = tts_config.get("voice", DEFAULT_VOICE)
        self.rate = tts_config.get("rate", "+0%")
        self.pitch = tts_config.get("pitch", "+0Hz")
        self.volume = tts_config.get("volume", "+0%")
        self._voices_cache: list[dict[str, Any]] | None = None

    def _communicate(self, message: str) -> edge_tts.Communicate:
        return edge_tts.Communicate(
            message,
            self.voice,
            rate=self.rate,
            pitch=self.pitch,
            volume=self.volume,
        )

    def synthesize(self, message: str) -> AudioPayload:
        audio = bytearray()
        metadata: list[dict[str, Any]] = []

        for chunk in self._communicate(message).stream_sync():
            if chunk["type"] == "audio":
                audio.extend(chunk["data"])
            else:
                metadata.append({
                    "type": chunk["type"],
                    "offset": chunk.get("offset"),
                    "duration": chunk.get("duration"),
                    "text": chunk.get("text"),
                })

        log.info("Edge TTS: %d chars with voice %s -> %d bytes", len(message), self.voice, len(audio))
        return from_encoded(bytes(audio), AUDIO_FORMAT, metadata)

    def render_to_file(self, message: str, path: Path) -> None:
        path.write_bytes(self.synthesize(message).to_bytes())

    def say(self, message: str) -> None:
        payload = self.synthesize(message)
        self._release_playback()
        self._finish_say(play_payload(payload))

    def voices(self) -> list[dict[str, Any]]:
        """List available Edge voices (cached after the first call)."""
        if self._voices_cache is None:
            all_voices = asyncio.run(edge_tts.list_voices())
            self._voices_cache = [
                {
                    "id": voice["ShortName"],
                    "name": voice.get("FriendlyName", voice["ShortName"]),
                    "language": voice["Locale"],
                    "gender": voice.get("Gender", "unknown"),
                }
                for voice in all_voices
            ]
            log.info("Cached %d Edge TTS voices", len(self._voices_cache))
        return self._voices_cache
