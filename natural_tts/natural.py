"""NaturalTTS facade: one default model, many optional backends."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

from natural_tts.audio.payload import AudioPayload
from natural_tts.errors import NoDefaultModel, NotLoaded, OperationFailed, TTSError
from natural_tts.handles import PlaybackHandle
from natural_tts.models.base import TTSModel

log = logging.getLogger(__name__)

T = TypeVar("T")


class Model(enum.Enum):
    """Backend kinds the facade can dispatch to."""

    COQUI = "coqui"
    PARLER = "parler"
    NATIVE = "native"
    MSEDGE = "msedge"
    GTTS = "gtts"
    PIPER = "piper"
    META = "meta"

    @classmethod
    def parse(cls, value: "Model | str") -> "Model":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            names = ", ".join(m.value for m in cls)
            raise ValueError(f"Unknown TTS model '{value}'. Supported: {names}.") from None


class NaturalTTS:
    """Routes ``say``/``save``/``synthesize``/``start`` to the default model.

    Only loaded backends occupy a slot. Calls fail with ``NoDefaultModel``
    when no default is selected and ``NotLoaded`` when the default's slot is
    empty. Backend errors that are not ``TTSError`` are wrapped in
    ``OperationFailed`` with the original exception as cause.

    Not thread-safe: guard the whole instance with a lock if shared.
    """

    def __init__(
        self,
        default_model: Model | str | None = None,
        models: dict[Model | str, TTSModel] | None = None,
    ):
        self._default: Model | None = None
        self._models: dict[Model, TTSModel] = {}
        self._handle: PlaybackHandle | None = None

        for kind, model in (models or {}).items():
            self.load(kind, model)
        self.default_model = default_model

    @classmethod
    def configure(cls, default_model: Model | str | None = None, **models: TTSModel | None) -> "NaturalTTS":
        """Build a facade, e.g. ``configure(Model.GTTS, gtts=GttsModel())``.

        Omitted (or ``None``) backends are left unloaded.
        """
        return cls(
            default_model=default_model,
            models={kind: model for kind, model in models.items() if model is not None},
        )

    # ── Slots ───────────────────────────────────────────────────────

    @property
    def default_model(self) -> Model | None:
        return self._default

    @default_model.setter
    def default_model(self, value: Model | str | None) -> None:
        self._default = None if value is None else Model.parse(value)

    def load(self, kind: Model | str, model: TTSModel) -> None:
        """Put *model* in the slot for *kind*, closing any previous occupant."""
        kind = Model.parse(kind)
        previous = self._models.get(kind)
        if previous is not None and previous is not model:
            previous.close()
        self._models[kind] = model
        log.info("Loaded %s model: %r", kind.value, model)

    def unload(self, kind: Model | str) -> None:
        model = self._models.pop(Model.parse(kind), None)
        if model is not None:
            model.close()

    def is_loaded(self, kind: Model | str) -> bool:
        return Model.parse(kind) in self._models

    def loaded_models(self) -> list[Model]:
        return list(self._models)

    def get(self, kind: Model | str) -> TTSModel:
        try:
            return self._models[Model.parse(kind)]
        except KeyError:
            raise NotLoaded(f"Model not loaded: {Model.parse(kind).value}") from None

    def _selected(self) -> TTSModel:
        if self._default is None:
            raise NoDefaultModel()
        return self.get(self._default)

    def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        try:
            return fn(*args)
        except TTSError:
            raise
        except Exception as exc:
            raise OperationFailed(f"{operation} failed: {exc}") from exc

    # ── Operations ──────────────────────────────────────────────────

    def say(self, message: str) -> None:
        model = self._selected()
        self._call("say", model.say, message)

    def save(self, message: str, path: str | Path) -> None:
        model = self._selected()
        self._call("save", model.save, message, path)

    def synthesize(self, message: str) -> AudioPayload:
        model = self._selected()
        return self._call("synthesize", model.synthesize, message)

    def start(self, message: str, path: str | Path) -> PlaybackHandle:
        """Start playback and keep the handle; any previous playback is stopped."""
        model = self._selected()
        previous, self._handle = self._handle, None
        if previous is not None:
            self._call("stop", previous.stop)
        self._handle = self._call("start", model.start, message, path)
        return self._handle

    say_default = say
    save_default = save
    synthesize_default = synthesize
    start_default = start

    # ── Playback control ────────────────────────────────────────────

    @property
    def handle(self) -> PlaybackHandle | None:
        return self._handle

    def _require_handle(self) -> PlaybackHandle:
        if self._handle is None:
            raise NotLoaded("No active playback")
        return self._handle

    def stop(self) -> None:
        handle = self._require_handle()
        self._call("stop", handle.stop)

    def pause(self) -> None:
        handle = self._require_handle()
        self._call("pause", handle.pause)

    def resume(self) -> None:
        handle = self._require_handle()
        self._call("resume", handle.resume)

    # ── Lifecycle ───────────────────────────────────────────────────

    def close(self) -> None:
        """Stop playback and release every loaded backend."""
        if self._handle is not None:
            self._handle.stop()
            self._handle = None
        for kind in list(self._models):
            self.unload(kind)

    def __enter__(self) -> "NaturalTTS":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
