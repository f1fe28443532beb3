"""Simple wrappers for the failure states a poll of the modem can run into"""


class TransportError(Exception):
    """Exception for failed fetches and non-2xx responses from modem."""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message, status_code, payload)
        self.status_code = status_code


class StructuralParseError(Exception):
    """Exception for pages that parsed but don't have the tables/rows we expect."""

    def __init__(self, message, page=None, payload=None):
        super().__init__(message, page, payload)
        self.page = page


class CellDecodeError(ValueError):
    """Exception for a single table cell that doesn't match its decode rule."""

    def __init__(self, message, cell=None):
        super().__init__(message, cell)
        self.cell = cell


class ConfigError(Exception):
    """Exception for bad configuration at startup. Fatal."""
