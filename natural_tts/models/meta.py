"""Text-to-speech using MetaVoice-1B (voice cloned from a reference clip)."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from natural_tts.errors import ConfigDataError
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

DEFAULT_MODEL = "metavoiceio/metavoice-1B-v0.1"


class MetaModel(TTSModel):
    """Renders 24 kHz WAV speech with MetaVoice's ``fam`` inference pipeline.

    The voice is cloned from ``speaker_ref``, a short audio clip of the
    target speaker. MetaVoice writes into its own output directory; the
    result is moved to the requested path. Pass ``tts=`` to reuse an already
    loaded ``fam.llm.fast_inference.TTS``.
    """

    name = "meta"

    def __init__(self, tts_config: dict | None = None, tts=None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        speaker_ref = tts_config.get("speaker_ref")
        if not speaker_ref:
            raise ConfigDataError("MetaVoice needs 'speaker_ref': a reference clip of the voice to clone")
        self._speaker_ref = str(speaker_ref)
        self._guidance_scale = tts_config.get("guidance_scale", 3.0)
        self._temperature = tts_config.get("temperature", 1.0)
        self._top_p = tts_config.get("top_p", 0.95)

        if tts is None:
            from fam.llm.fast_inference import TTS

            model_name = tts_config.get("model_name", DEFAULT_MODEL)
            log.info("Loading MetaVoice model %s", model_name)
            tts = TTS(
                model_name=model_name,
                seed=tts_config.get("seed", 1337),
                output_dir=tts_config.get("output_dir", "outputs"),
                quantisation_mode=tts_config.get("quantisation_mode"),
            )
        self._tts = tts

    def render_to_file(self, message: str, path: Path) -> None:
        output = self._tts.synthesise(
            text=message,
            spk_ref_path=self._speaker_ref,
            top_p=self._top_p,
            guidance_scale=self._guidance_scale,
            temperature=self._temperature,
        )
        shutil.move(str(output), str(path))
