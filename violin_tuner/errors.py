"""Exception types raised by the violin tuner."""


class TunerError(Exception):
    """Base class for all tuner errors."""


class InvalidInputError(TunerError, ValueError):
    """A buffer has the wrong structure (length not a power of two, mismatched sizes)."""


class AudioDeviceError(TunerError):
    """The audio source could not be opened or stopped delivering blocks."""


class ConfigError(TunerError, ValueError):
    """A configuration value is outside its allowed range."""
