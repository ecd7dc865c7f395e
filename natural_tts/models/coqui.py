"""Text-to-speech using Coqui TTS (local neural models)."""

import logging
from pathlib import Path

from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

DEFAULT_MODEL = "tts_models/en/ljspeech/vits"


def select_device(use_gpu: bool) -> str:
    """``"cuda:0"`` when a GPU is requested and available, else ``"cpu"``."""
    import torch

    return "cuda:0" if use_gpu and torch.cuda.is_available() else "cpu"


class CoquiModel(TTSModel):
    """Renders speech to WAV with a Coqui ``TTS`` model.

    The model is loaded once at construction (downloaded on first use).
    Pass ``tts=`` to reuse an already loaded ``TTS.api.TTS`` instance.
    """

    name = "coqui"

    def __init__(self, tts_config: dict | None = None, tts=None):
        tts_config = tts_config or {}
        super().__init__(blocking=tts_config.get("blocking", True))
        self._model_name = tts_config.get("model_name", DEFAULT_MODEL)
        self._speaker = tts_config.get("speaker")
        self._language = tts_config.get("language")

        if tts is None:
            from TTS.api import TTS

            self.device = select_device(tts_config.get("use_gpu", True))
            log.info("Loading Coqui model %s on %s", self._model_name, self.device)
            tts = TTS(model_name=self._model_name, progress_bar=False).to(self.device)
        else:
            self.device = tts_config.get("device", "cpu")
        self._tts = tts

    def render_to_file(self, message: str, path: Path) -> None:
        kwargs = {}
        if self._speaker:
            kwargs["speaker"] = self._speaker
        if self._language:
            kwargs["language"] = self._language
        self._tts.tts_to_file(text=message, file_path=str(path), **kwargs)
