"""Error taxonomy for the reporter."""


class ReporterError(Exception):
    """Base class for reporter errors."""


class ConfigError(ReporterError):
    """Raised when reporter options cannot be turned into endpoints. Fatal at startup."""


class EncodeError(ReporterError):
    """Raised when a vessel's data cannot be encoded into an AIS sentence."""


class SourceError(ReporterError):
    """Raised when the vessel source cannot be read."""


class TransportError(ReporterError):
    """Raised when the transmitter is unusable (e.g. its socket is closed)."""
