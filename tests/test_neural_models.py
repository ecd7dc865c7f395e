"""Tests for the Coqui, Parler, Piper and MetaVoice backends with fake engines."""

import json
import sys
import types
from pathlib import Path

import numpy as np
import pytest

from natural_tts import ConfigDataError, MissingTokenizer, TensorError
from natural_tts.audio.wav import read_wav, write_wav
from natural_tts.models.coqui import CoquiModel
from natural_tts.models.meta import MetaModel
from natural_tts.models.parler import DEFAULT_DESCRIPTION, ParlerModel
from natural_tts.models.piper import PiperModel, load_voice


# ── Coqui ────────────────────────────────────────────────────────

class FakeCoqui:
    def __init__(self):
        self.calls: list[dict] = []

    def tts_to_file(self, text, file_path, **kwargs):
        self.calls.append({"text": text, "file_path": file_path, **kwargs})
        write_wav(file_path, np.zeros(2205), 22050, bits_per_sample=16)


def test_coqui_renders_via_tts_to_file(tmp_path: Path):
    fake = FakeCoqui()
    path = tmp_path / "out.wav"

    CoquiModel({"speaker": "p225"}, tts=fake).save("hello", path)

    assert fake.calls == [{"text": "hello", "file_path": str(path), "speaker": "p225"}]
    assert read_wav(path).spec.sample_rate == 22050


def test_coqui_synthesize_uses_file_fallback():
    payload = CoquiModel(tts=FakeCoqui()).synthesize("hello")

    assert payload.spec.sample_rate == 22050
    assert payload.duration == pytest.approx(0.1)


# ── Parler ───────────────────────────────────────────────────────

class FakeIds:
    def __init__(self, text):
        self.text = text
        self.device = None

    def to(self, device):
        self.device = device
        return self


class FakeTokenizer:
    def __call__(self, text, return_tensors=None):
        return types.SimpleNamespace(input_ids=FakeIds(text))


class FakeGeneration:
    def __init__(self, audio):
        self._audio = audio

    def cpu(self):
        return self

    def numpy(self):
        return self._audio


class FakeParler:
    config = types.SimpleNamespace(sampling_rate=44100)

    def __init__(self, audio):
        self._audio = audio
        self.calls: list[tuple[str, str]] = []

    def generate(self, input_ids, prompt_input_ids):
        self.calls.append((input_ids.text, prompt_input_ids.text))
        return FakeGeneration(self._audio)


def test_parler_synthesizes_in_memory():
    fake = FakeParler(np.full((1, 441), 0.2, dtype=np.float32))
    model = ParlerModel(model=fake, tokenizer=FakeTokenizer())

    payload = model.synthesize("hello")

    assert fake.calls == [(DEFAULT_DESCRIPTION, "hello")]
    assert payload.spec.sample_rate == 44100
    assert payload.samples.shape == (441,)
    assert payload.duration == pytest.approx(0.01)


def test_parler_empty_generation_is_tensor_error():
    model = ParlerModel(model=FakeParler(np.zeros((1, 0), dtype=np.float32)), tokenizer=FakeTokenizer())

    with pytest.raises(TensorError):
        model.synthesize("hello")


def test_parler_save_writes_wav(tmp_path: Path):
    model = ParlerModel(
        {"description": "A calm male voice"},
        model=FakeParler(np.full((1, 441), 0.2, dtype=np.float32)),
        tokenizer=FakeTokenizer(),
    )
    path = tmp_path / "out.wav"

    model.save("hello", path)
    payload = read_wav(path)

    assert payload.spec.sample_rate == 44100
    assert len(payload.samples) == 441
    assert np.allclose(payload.samples, 0.2, atol=1e-6)


def test_parler_missing_tokenizer(monkeypatch):
    def _from_pretrained(name):
        raise OSError(f"Can't load tokenizer for '{name}'")

    transformers = types.ModuleType("transformers")
    transformers.AutoTokenizer = types.SimpleNamespace(from_pretrained=_from_pretrained)
    monkeypatch.setitem(sys.modules, "transformers", transformers)

    with pytest.raises(MissingTokenizer):
        ParlerModel({"tokenizer": "nobody/nothing"}, model=FakeParler(np.zeros((1, 4))))


# ── Piper ────────────────────────────────────────────────────────

class FakeVoice:
    config = types.SimpleNamespace(sample_rate=22050)

    def __init__(self, sentences: int = 2):
        self._sentences = sentences

    def synthesize(self, text, syn_config=None):
        for _ in range(self._sentences):
            yield types.SimpleNamespace(audio_float_array=np.full(100, 0.1, dtype=np.float32))


@pytest.fixture
def no_syn_config(monkeypatch):
    monkeypatch.setattr(PiperModel, "_syn_config", lambda self: None)


def test_piper_joins_sentences_with_silence(no_syn_config):
    payload = PiperModel({"sentence_silence": 0.1}, voice=FakeVoice(sentences=2)).synthesize("One. Two.")

    assert payload.spec.sample_rate == 22050
    assert len(payload.samples) == 100 + 2205 + 100
    assert np.all(payload.samples[100:2305] == 0)


def test_piper_empty_text_gives_empty_payload(no_syn_config):
    payload = PiperModel(voice=FakeVoice(sentences=0)).synthesize("")

    assert len(payload.samples) == 0
    assert payload.duration == 0


def test_piper_save_writes_16_bit_wav(no_syn_config, tmp_path: Path):
    path = tmp_path / "out.wav"
    PiperModel(voice=FakeVoice(sentences=1)).save("hello", path)

    payload = read_wav(path)
    assert payload.spec.bits_per_sample == 16
    assert len(payload.samples) == 100


def test_piper_missing_model_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_voice(tmp_path / "absent.onnx")


def test_piper_malformed_voice_config(tmp_path: Path):
    model_path = tmp_path / "voice.onnx"
    model_path.write_bytes(b"onnx")
    Path(f"{model_path}.json").write_text("{not json")

    with pytest.raises(ConfigDataError):
        load_voice(model_path)


def test_piper_voice_config_without_audio_section(tmp_path: Path):
    model_path = tmp_path / "voice.onnx"
    model_path.write_bytes(b"onnx")
    Path(f"{model_path}.json").write_text(json.dumps({"espeak": {"voice": "en-us"}}))

    with pytest.raises(ConfigDataError):
        load_voice(model_path)


# ── MetaVoice ────────────────────────────────────────────────────

class FakeMetaVoice:
    def __init__(self, output_dir: Path):
        self._output_dir = output_dir
        self.calls: list[dict] = []

    def synthesise(self, text, spk_ref_path, top_p=0.95, guidance_scale=3.0, temperature=1.0):
        self.calls.append(
            {"text": text, "spk_ref_path": spk_ref_path, "guidance_scale": guidance_scale, "temperature": temperature}
        )
        output = self._output_dir / f"synth_{len(self.calls)}.wav"
        write_wav(output, np.zeros(2400), 24000)
        return str(output)


def test_meta_moves_output_to_requested_path(tmp_path: Path):
    fake = FakeMetaVoice(tmp_path)
    path = tmp_path / "out.wav"

    MetaModel({"speaker_ref": "ref.wav", "guidance_scale": 2.5}, tts=fake).save("hello", path)

    assert fake.calls == [
        {"text": "hello", "spk_ref_path": "ref.wav", "guidance_scale": 2.5, "temperature": 1.0}
    ]
    assert read_wav(path).spec.sample_rate == 24000
    assert not (tmp_path / "synth_1.wav").exists()


def test_meta_synthesize_uses_file_fallback(tmp_path: Path):
    payload = MetaModel({"speaker_ref": "ref.wav"}, tts=FakeMetaVoice(tmp_path)).synthesize("hello")

    assert payload.duration == pytest.approx(0.1)


def test_meta_requires_speaker_reference(tmp_path: Path):
    with pytest.raises(ConfigDataError, match="speaker_ref"):
        MetaModel({}, tts=FakeMetaVoice(tmp_path))
