"""Application exception classes."""


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class InputDataError(Exception):
    """Raised when weather, tide or weight input files cannot be read or validated."""


class AstronomyProviderError(Exception):
    """Raised when the ephemeris backing an astronomy provider cannot be loaded."""


class JournalError(Exception):
    """Raised when writing to journal or result files fails."""


class ExportError(Exception):
    """Raised when CSV export of a result fails."""
