"""Normalised audio value returned by every synthesis path.

The format descriptor is a closed set of variants:

* ``WavSpec`` -- PCM samples with a known layout.
* ``SynthesizedSpec`` -- opaque engine output (e.g. an MP3 stream plus word
  boundary metadata). The samples are raw bytes, not PCM.
* ``UnknownSpec`` -- nothing is known about the data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

import numpy as np


@dataclass(frozen=True)
class WavSpec:
    sample_rate: int
    channels: int = 1
    bits_per_sample: int = 32
    sample_format: str = "float"  # "int" or "float"


@dataclass(frozen=True)
class SynthesizedSpec:
    audio_format: str
    metadata: tuple[dict[str, Any], ...] = ()


@dataclass(frozen=True)
class UnknownSpec:
    pass


AudioSpec = Union[WavSpec, SynthesizedSpec, UnknownSpec]


@dataclass
class AudioPayload:
    """Samples plus the descriptor that says how to interpret them."""

    samples: np.ndarray
    spec: AudioSpec = field(default_factory=UnknownSpec)
    duration: float | None = None

    def __post_init__(self) -> None:
        self.samples = np.asarray(self.samples).reshape(-1)
        if isinstance(self.spec, WavSpec):
            if self.spec.channels < 1 or self.spec.sample_rate <= 0:
                raise ValueError(f"Invalid PCM spec: {self.spec}")
            if len(self.samples) % self.spec.channels != 0:
                raise ValueError(
                    f"{len(self.samples)} samples cannot be split into "
                    f"{self.spec.channels} channels"
                )
            if self.duration is None:
                self.duration = self.frames / self.spec.sample_rate

    @property
    def is_pcm(self) -> bool:
        return isinstance(self.spec, WavSpec)

    @property
    def frames(self) -> int:
        """Samples per channel; for opaque payloads, the raw length."""
        if isinstance(self.spec, WavSpec):
            return len(self.samples) // self.spec.channels
        return len(self.samples)

    @property
    def sample_rate(self) -> int | None:
        if isinstance(self.spec, WavSpec):
            return self.spec.sample_rate
        return None

    def channel_frames(self) -> np.ndarray:
        """Return PCM samples shaped ``(frames, channels)`` for playback."""
        if not isinstance(self.spec, WavSpec):
            raise TypeError(f"Payload with {type(self.spec).__name__} has no PCM layout")
        return self.samples.reshape(-1, self.spec.channels)

    def to_bytes(self) -> bytes:
        """Raw bytes of an opaque payload."""
        if isinstance(self.spec, WavSpec):
            raise TypeError("PCM payloads are not byte streams; write them with write_wav()")
        return self.samples.astype(np.uint8, copy=False).tobytes()
