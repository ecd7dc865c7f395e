"""Audio value type, WAV I/O, normalisation and playback."""

from natural_tts.audio.payload import AudioPayload, AudioSpec, SynthesizedSpec, UnknownSpec, WavSpec

__all__ = ["AudioPayload", "AudioSpec", "SynthesizedSpec", "UnknownSpec", "WavSpec"]
