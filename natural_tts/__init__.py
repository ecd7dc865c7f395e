"""natural-tts: one interface over cloud, neural and OS text-to-speech backends."""

from natural_tts.audio.payload import AudioPayload, SynthesizedSpec, UnknownSpec, WavSpec
from natural_tts.errors import (
    ConfigDataError,
    MessageRejected,
    MissingTokenizer,
    NoDefaultModel,
    NotLoaded,
    NotSupported,
    OperationFailed,
    SaveFailed,
    TensorError,
    TTSError,
)
from natural_tts.handles import EngineHandle, PlaybackHandle, SinkHandle
from natural_tts.models import TTSModel, create_model
from natural_tts.natural import Model, NaturalTTS

__version__ = "0.2.0"

__all__ = [
    "AudioPayload",
    "ConfigDataError",
    "EngineHandle",
    "MessageRejected",
    "MissingTokenizer",
    "Model",
    "NaturalTTS",
    "NoDefaultModel",
    "NotLoaded",
    "NotSupported",
    "OperationFailed",
    "PlaybackHandle",
    "SaveFailed",
    "SinkHandle",
    "SynthesizedSpec",
    "TTSError",
    "TTSModel",
    "TensorError",
    "UnknownSpec",
    "WavSpec",
    "create_model",
]
