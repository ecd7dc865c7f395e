"""Text-to-speech using Piper (local neural TTS, ONNX voices)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np

from natural_tts.audio.normalize import from_pcm
from natural_tts.audio.payload import AudioPayload
from natural_tts.audio.playback import play_payload
from natural_tts.audio.wav import write_wav
from natural_tts.errors import ConfigDataError
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

DEFAULT_VOICE = "en_US-lessac-medium"


def load_voice(model_path: Path):
    """Load a Piper voice, validating its ``.onnx.json`` config first."""
    if not model_path.exists():
        raise FileNotFoundError(
            f"Piper voice model not found: {model_path}\n"
            "Download it from: https://huggingface.co/rhasspy/piper-voices"
        )
    config_path = Path(f"{model_path}.json")
    try:
        with open(config_path, encoding="utf-8") as f:
            voice_config = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConfigDataError(f"Malformed Piper voice config {config_path}: {exc}") from exc
    if not isinstance(voice_config, dict) or "audio" not in voice_config:
        raise ConfigDataError(f"Piper voice config {config_path} has no 'audio' section")

    from piper.voice import PiperVoice

    return PiperVoice.load(str(model_path), config_path=str(config_path))


class PiperModel(TTSModel):
    """Synthesizes speech in memory with one Piper ONNX voice.

    Sentences come back from Piper one chunk at a time and are joined with
    ``sentence_silence`` seconds of silence.
    """

    name = "piper"

    def __init__(self, tts_config: dict | None = None, voice=None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self._sentence_silence = tts_config.get("sentence_silence", 0.2)
        self._length_scale = tts_config.get("length_scale")
        self._noise_scale = tts_config.get("noise_scale")
        self._noise_w_scale = tts_config.get("noise_w_scale")

        if voice is None:
            model_dir = Path(tts_config.get("model_dir", "models/piper"))
            voice_name = tts_config.get("piper_voice", DEFAULT_VOICE)
            voice = load_voice(model_dir / f"{voice_name}.onnx")
            log.info("Loaded Piper voice: %s", voice_name)
        self._voice = voice

    @property
    def sample_rate(self) -> int:
        return self._voice.config.sample_rate

    def _syn_config(self):
        from piper.config import SynthesisConfig

        return SynthesisConfig(
            length_scale=self._length_scale,
            noise_scale=self._noise_scale,
            noise_w_scale=self._noise_w_scale,
        )

    def synthesize(self, message: str) -> AudioPayload:
        sample_rate = self.sample_rate
        silence = np.zeros(int(self._sentence_silence * sample_rate), dtype=np.float32)

        arrays: list[np.ndarray] = []
        for chunk in self._voice.synthesize(message, syn_config=self._syn_config()):
            if arrays:
                arrays.append(silence)
            arrays.append(chunk.audio_float_array)

        audio = np.concatenate(arrays) if arrays else np.array([], dtype=np.float32)
        return from_pcm(audio, sample_rate)

    def render_to_file(self, message: str, path: Path) -> None:
        payload = self.synthesize(message)
        write_wav(path, payload.samples, payload.spec.sample_rate, bits_per_sample=16)

    def say(self, message: str) -> None:
        payload = self.synthesize(message)
        self._release_playback()
        self._finish_say(play_payload(payload))
