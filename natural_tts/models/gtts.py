"""Text-to-speech via Google Translate's speech service (cloud, MP3) using gTTS."""

import logging
from pathlib import Path

from gtts import gTTS

from natural_tts.errors import MessageRejected
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

MAX_CHARS = 200


class GttsModel(TTSModel):
    """Renders short messages to MP3 with ``gTTS``.

    Messages over ``MAX_CHARS`` characters are rejected locally before any
    request is made.
    """

    name = "gtts"
    temp_suffix = ".mp3"

    def __init__(self, tts_config: dict | None = None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self._language = tts_config.get("language", "en")
        self._tld = tts_config.get("tld", "com")
        self._slow = bool(tts_config.get("slow", False))
        self._timeout = tts_config.get("timeout_s", 15)

    def check_message(self, message: str) -> None:
        """Raise ``MessageRejected`` if the service would refuse *message*."""
        if not message.strip():
            raise MessageRejected("Empty text")
        if len(message) > MAX_CHARS:
            raise MessageRejected(
                f"Message is {len(message)} characters; Google TTS accepts at most {MAX_CHARS}"
            )

    def render_to_file(self, message: str, path: Path) -> None:
        self.check_message(message)
        tts = gTTS(
            message,
            lang=self._language,
            tld=self._tld,
            slow=self._slow,
            timeout=self._timeout,
        )
        tts.save(str(path))
        log.info("Google TTS: %d chars (%s) -> %s", len(message), self._language, path)
