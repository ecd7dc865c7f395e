"""TTS backends -- base interface + factory."""

from __future__ import annotations

from natural_tts.models.base import TTSModel, did_save

MODEL_NAMES = ("coqui", "parler", "native", "msedge", "gtts", "piper", "meta")


def create_model(name: str, tts_config: dict | None = None) -> TTSModel:
    """Instantiate the backend called *name* with its config section.

    Backends are imported on demand so only the libraries of the models
    actually used need to be installed.
    """
    name = name.lower()

    if name == "gtts":
        from natural_tts.models.gtts import GttsModel
        return GttsModel(tts_config)
    elif name == "msedge":
        from natural_tts.models.msedge import MSEdgeModel
        return MSEdgeModel(tts_config)
    elif name == "native":
        from natural_tts.models.native import NativeModel
        return NativeModel(tts_config)
    elif name == "coqui":
        from natural_tts.models.coqui import CoquiModel
        return CoquiModel(tts_config)
    elif name == "parler":
        from natural_tts.models.parler import ParlerModel
        return ParlerModel(tts_config)
    elif name == "piper":
        from natural_tts.models.piper import PiperModel
        return PiperModel(tts_config)
    elif name == "meta":
        from natural_tts.models.meta import MetaModel
        return MetaModel(tts_config)
    raise ValueError(f"Unknown TTS model '{name}'. Supported: {', '.join(MODEL_NAMES)}.")


__all__ = ["MODEL_NAMES", "TTSModel", "create_model", "did_save"]
