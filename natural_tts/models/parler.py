"""Text-to-speech using Parler-TTS (description-conditioned neural model)."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from natural_tts.audio.normalize import from_pcm
from natural_tts.audio.payload import AudioPayload
from natural_tts.audio.playback import play_payload
from natural_tts.audio.wav import write_wav
from natural_tts.errors import MissingTokenizer, TensorError
from natural_tts.models.base import TTSModel
from natural_tts.models.coqui import select_device

log = logging.getLogger(__name__)

DEFAULT_MODEL = "parler-tts/parler-tts-mini-v1"
DEFAULT_DESCRIPTION = "A female speaker in fast calming voice in a quiet environment"


def load_tokenizer(name: str):
    """Load the tokenizer for *name*, raising ``MissingTokenizer`` if absent."""
    from transformers import AutoTokenizer

    try:
        return AutoTokenizer.from_pretrained(name)
    except (OSError, ValueError) as exc:
        raise MissingTokenizer(f"No tokenizer for {name}: {exc}") from exc


class ParlerModel(TTSModel):
    """Generates speech in memory; the voice is steered by a text description.

    ``model`` and ``tokenizer`` may be passed in pre-loaded; otherwise they
    are fetched from the Hugging Face hub.
    """

    name = "parler"

    def __init__(self, tts_config: dict | None = None, model=None, tokenizer=None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self.description = tts_config.get("description", DEFAULT_DESCRIPTION)
        model_name = tts_config.get("model_name", DEFAULT_MODEL)

        if model is None:
            import transformers
            from parler_tts import ParlerTTSForConditionalGeneration

            transformers.logging.set_verbosity_error()
            self.device = select_device(tts_config.get("use_gpu", True))
            log.info("Loading Parler model %s on %s", model_name, self.device)
            model = ParlerTTSForConditionalGeneration.from_pretrained(model_name).to(self.device)
        else:
            self.device = tts_config.get("device", "cpu")
        if tokenizer is None:
            tokenizer = load_tokenizer(tts_config.get("tokenizer", model_name))

        self._model = model
        self._tokenizer = tokenizer

    @property
    def sample_rate(self) -> int:
        return int(self._model.config.sampling_rate)

    def _token_ids(self, text: str):
        return self._tokenizer(text, return_tensors="pt").input_ids.to(self.device)

    def synthesize(self, message: str) -> AudioPayload:
        generation = self._model.generate(
            input_ids=self._token_ids(self.description),
            prompt_input_ids=self._token_ids(message),
        )
        audio = np.asarray(generation.cpu().numpy(), dtype=np.float32).squeeze()
        if audio.ndim != 1 or audio.size == 0:
            raise TensorError(f"Parler generated an unusable tensor of shape {audio.shape}")
        return from_pcm(audio, self.sample_rate)

    def render_to_file(self, message: str, path: Path) -> None:
        payload = self.synthesize(message)
        write_wav(path, payload.samples, payload.spec.sample_rate)

    def say(self, message: str) -> None:
        payload = self.synthesize(message)
        self._release_playback()
        self._finish_say(play_payload(payload))
