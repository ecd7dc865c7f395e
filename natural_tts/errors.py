"""Error taxonomy shared by the facade and every backend."""


class TTSError(RuntimeError):
    """Base class for all natural-tts errors."""


class NoDefaultModel(TTSError):
    """Raised when an operation is dispatched with no default model selected."""

    def __init__(self, message: str = "Default model not set"):
        super().__init__(message)


class NotLoaded(TTSError):
    """Raised when the selected model (or playback handle) is not present."""

    def __init__(self, message: str = "Model not loaded"):
        super().__init__(message)


class NotSupported(TTSError):
    """Raised when a backend or handle cannot perform the requested operation."""

    def __init__(self, message: str = "Not supported"):
        super().__init__(message)


class SaveFailed(TTSError):
    """Raised when a save reported success but left no readable file."""


class OperationFailed(TTSError):
    """Wraps a failure raised by an external engine, library or service."""


class MessageRejected(TTSError):
    """Raised when input text is refused locally before reaching a backend."""


class TensorError(TTSError):
    """Raised when a neural model produces an unusable tensor."""


class MissingTokenizer(TTSError):
    """Raised when a neural model's tokenizer resource cannot be found."""


class ConfigDataError(TTSError):
    """Raised for malformed configuration data (YAML or model JSON)."""
