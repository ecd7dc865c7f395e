"""Read and write uncompressed RIFF/WAVE audio."""

import logging
import struct
from pathlib import Path

import numpy as np
import soundfile as sf

from natural_tts.audio.payload import AudioPayload, WavSpec

log = logging.getLogger(__name__)

_SUBTYPE_BITS: dict[str, tuple[int, str]] = {
    "PCM_U8": (8, "int"),
    "PCM_S8": (8, "int"),
    "PCM_16": (16, "int"),
    "PCM_24": (24, "int"),
    "PCM_32": (32, "int"),
    "FLOAT": (32, "float"),
    "DOUBLE": (64, "float"),
}

# RIFF header: "RIFF" size "WAVE" "fmt " 16 format channels rate byte_rate
# block_align bits "data" data_size -- all integers little-endian.
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")
_PCM_FORMAT = 1
_INT_TYPES = {16: "<i2", 32: "<i4"}


def read_wav(path: str | Path) -> AudioPayload:
    """Decode an audio file into a PCM payload.

    The descriptor reports the file's own layout (rate, channels, bit depth);
    samples are always returned as interleaved float32 in ``[-1, 1]``.
    Compressed containers (e.g. MP3) report 32-bit float.
    """
    info = sf.info(str(path))
    audio, sample_rate = sf.read(str(path), dtype="float32", always_2d=True)
    bits, sample_format = _SUBTYPE_BITS.get(info.subtype, (32, "float"))
    spec = WavSpec(
        sample_rate=sample_rate,
        channels=audio.shape[1],
        bits_per_sample=bits,
        sample_format=sample_format,
    )
    return AudioPayload(
        samples=audio.reshape(-1),
        spec=spec,
        duration=audio.shape[0] / sample_rate,
    )


def wav_header(num_samples: int, sample_rate: int, bits_per_sample: int = 32) -> bytes:
    """Build a 44-byte mono PCM header for *num_samples* samples."""
    if bits_per_sample not in _INT_TYPES:
        raise ValueError(f"Unsupported bit depth: {bits_per_sample} (use 16 or 32)")
    block_align = bits_per_sample // 8
    data_size = num_samples * block_align
    return _HEADER.pack(
        b"RIFF",
        36 + data_size,
        b"WAVE",
        b"fmt ",
        16,
        _PCM_FORMAT,
        1,
        sample_rate,
        sample_rate * block_align,
        block_align,
        bits_per_sample,
        b"data",
        data_size,
    )


def write_wav(
    path: str | Path,
    samples: np.ndarray,
    sample_rate: int,
    bits_per_sample: int = 32,
) -> None:
    """Write float samples in ``[-1, 1]`` as a mono integer PCM WAV file.

    Accepts ``(frames,)`` or ``(frames, 1)``; multi-channel input raises
    ``ValueError``.
    """
    audio = np.asarray(samples, dtype=np.float64)
    if audio.ndim > 1:
        if audio.ndim != 2 or audio.shape[1] != 1:
            raise ValueError(f"write_wav writes mono audio, got shape {audio.shape}")
        audio = audio.reshape(-1)

    header = wav_header(len(audio), sample_rate, bits_per_sample)
    scale = float(2 ** (bits_per_sample - 1) - 1)
    pcm = np.round(np.clip(audio, -1.0, 1.0) * scale).astype(_INT_TYPES[bits_per_sample])

    with open(path, "wb") as f:
        f.write(header)
        f.write(pcm.tobytes())
    log.debug("Wrote %d samples @ %d Hz to %s", len(pcm), sample_rate, path)
