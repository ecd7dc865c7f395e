"""YAML configuration: load a config file and build a facade from it."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from natural_tts.errors import ConfigDataError
from natural_tts.models import create_model
from natural_tts.natural import Model, NaturalTTS

log = logging.getLogger(__name__)


def load_config(path: str | Path) -> dict:
    """Load a YAML config file into a dict."""
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with open(config_path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigDataError(f"Invalid YAML in {path}: {exc}") from exc
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigDataError(f"{path}: top level must be a mapping")
    return config


def from_config(config: dict, factory=create_model) -> NaturalTTS:
    """Build a ``NaturalTTS`` from the ``tts`` section of *config*.

    ``tts.models`` maps model names to their settings; every listed model is
    loaded. ``tts.default`` selects the default model and may name a model
    that is not loaded (calls then fail with ``NotLoaded``).
    """
    tts_config = config.get("tts", {})
    if not isinstance(tts_config, dict):
        raise ConfigDataError("'tts' must be a mapping")
    models_config = tts_config.get("models") or {}
    if not isinstance(models_config, dict):
        raise ConfigDataError("'tts.models' must be a mapping of model name to settings")

    try:
        default = tts_config.get("default")
        default = Model.parse(default) if default is not None else None
        kinds = {Model.parse(name): settings for name, settings in models_config.items()}
    except ValueError as exc:
        raise ConfigDataError(str(exc)) from exc

    for kind, settings in kinds.items():
        if settings is not None and not isinstance(settings, dict):
            raise ConfigDataError(f"'tts.models.{kind.value}' must be a mapping")

    natural = NaturalTTS(default_model=default)
    try:
        for kind, settings in kinds.items():
            log.info("Initializing %s model...", kind.value)
            natural.load(kind, factory(kind.value, settings or {}))
    except BaseException:
        # Release the models that did load before the failure.
        natural.close()
        raise
    return natural
