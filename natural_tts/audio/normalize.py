"""Map heterogeneous backend outputs onto ``AudioPayload``."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any, Iterable

import numpy as np
import soundfile as sf

from natural_tts.audio.payload import AudioPayload, SynthesizedSpec, UnknownSpec, WavSpec
from natural_tts.audio.wav import read_wav
from natural_tts.errors import NotSupported


def from_file(path: str | Path) -> AudioPayload:
    """Payload for a file a backend wrote to disk."""
    return read_wav(path)


def from_pcm(
    samples: np.ndarray,
    sample_rate: int,
    channels: int = 1,
    bits_per_sample: int = 32,
) -> AudioPayload:
    """Payload for an in-memory float buffer produced by a neural model."""
    audio = np.asarray(samples, dtype=np.float32)
    return AudioPayload(
        samples=audio,
        spec=WavSpec(
            sample_rate=sample_rate,
            channels=channels,
            bits_per_sample=bits_per_sample,
            sample_format="float",
        ),
    )


def from_encoded(
    data: bytes,
    audio_format: str,
    metadata: Iterable[dict[str, Any]] = (),
) -> AudioPayload:
    """Opaque payload for an engine-specific encoded stream."""
    return AudioPayload(
        samples=np.frombuffer(bytes(data), dtype=np.uint8).copy(),
        spec=SynthesizedSpec(audio_format=audio_format, metadata=tuple(metadata)),
    )


def decode(payload: AudioPayload) -> AudioPayload:
    """Return a PCM payload, decoding opaque bytes through soundfile if needed."""
    if payload.is_pcm:
        return payload
    if isinstance(payload.spec, UnknownSpec):
        raise NotSupported("Cannot decode audio of unknown format")

    audio, sample_rate = sf.read(io.BytesIO(payload.to_bytes()), dtype="float32", always_2d=True)
    return AudioPayload(
        samples=audio.reshape(-1),
        spec=WavSpec(sample_rate=sample_rate, channels=audio.shape[1]),
        duration=audio.shape[0] / sample_rate,
    )
