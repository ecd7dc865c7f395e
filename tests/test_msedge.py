"""Tests for the Edge TTS backend with a fake edge_tts.Communicate."""

from pathlib import Path

import pytest

from natural_tts.audio.payload import SynthesizedSpec
from natural_tts.models import msedge
from natural_tts.models.msedge import AUDIO_FORMAT, MSEdgeModel


class FakeCommunicate:
    instances: list["FakeCommunicate"] = []

    def __init__(self, text, voice, rate="+0%", pitch="+0Hz", volume="+0%"):
        self.text = text
        self.voice = voice
        self.rate = rate
        self.pitch = pitch
        self.volume = volume
        FakeCommunicate.instances.append(self)

    def stream_sync(self):
        yield {"type": "audio", "data": b"\x01\x02"}
        yield {"type": "WordBoundary", "offset": 500, "duration": 2000, "text": self.text}
        yield {"type": "audio", "data": b"\x03"}


class FakeSink:
    def __init__(self):
        self.waits = 0
        self.closed = False

    def close(self):
        self.closed = True

    def wait_until_done(self, timeout=None):
        self.waits += 1
        return True


@pytest.fixture(autouse=True)
def fake_communicate(monkeypatch):
    monkeypatch.setattr(msedge.edge_tts, "Communicate", FakeCommunicate)


def test_synthesize_returns_opaque_payload_with_metadata():
    payload = MSEdgeModel().synthesize("hello")

    assert not payload.is_pcm
    assert payload.to_bytes() == b"\x01\x02\x03"
    assert isinstance(payload.spec, SynthesizedSpec)
    assert payload.spec.audio_format == AUDIO_FORMAT
    assert payload.spec.metadata == (
        {"type": "WordBoundary", "offset": 500, "duration": 2000, "text": "hello"},
    )


def test_voice_settings_are_passed_through():
    MSEdgeModel({"voice": "en-GB-SoniaNeural", "rate": "+10%", "pitch": "-5Hz", "volume": "-20%"}).synthesize("hi")

    fake = FakeCommunicate.instances[-1]
    assert fake.voice == "en-GB-SoniaNeural"
    assert (fake.rate, fake.pitch, fake.volume) == ("+10%", "-5Hz", "-20%")


def test_save_writes_encoded_stream(tmp_path: Path):
    path = tmp_path / "out.mp3"
    MSEdgeModel().save("hello", path)

    assert path.read_bytes() == b"\x01\x02\x03"


def test_say_plays_decoded_payload_in_memory(monkeypatch):
    played = []

    def _play_payload(payload):
        sink = FakeSink()
        played.append((payload, sink))
        return sink

    monkeypatch.setattr(msedge, "play_payload", _play_payload)

    MSEdgeModel().say("hello")
    MSEdgeModel({"blocking": False}).say("hello")

    assert played[0][0].to_bytes() == b"\x01\x02\x03"
    assert played[0][1].waits == 1
    assert played[1][1].waits == 0


def test_voices_are_listed_once(monkeypatch):
    calls = {"n": 0}

    async def _list_voices():
        calls["n"] += 1
        return [{"ShortName": "en-US-AriaNeural", "FriendlyName": "Aria", "Locale": "en-US", "Gender": "Female"}]

    monkeypatch.setattr(msedge.edge_tts, "list_voices", _list_voices)
    model = MSEdgeModel()

    assert model.voices() == [{"id": "en-US-AriaNeural", "name": "Aria", "language": "en-US", "gender": "Female"}]
    model.voices()
    assert calls["n"] == 1


def test_non_blocking_say_releases_output_on_close(monkeypatch):
    sinks = []

    def _play_payload(payload):
        sinks.append(FakeSink())
        return sinks[-1]

    monkeypatch.setattr(msedge, "play_payload", _play_payload)
    model = MSEdgeModel({"blocking": False})

    model.say("one")
    model.say("two")
    assert sinks[0].closed and not sinks[1].closed

    model.close()
    assert sinks[1].closed
