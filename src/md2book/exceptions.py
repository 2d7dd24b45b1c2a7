"""Custom exceptions for md2book."""


class Md2bookError(Exception):
    """Base exception for md2book operations."""


class ConfigError(Md2bookError):
    """Invalid configuration value."""


class SourceNotFoundError(Md2bookError):
    """Book source files are missing or misnamed."""


class MalformedDocumentError(Md2bookError):
    """Parsed document violates the expected book structure."""


class RenderError(Md2bookError):
    """Error while rendering a document to HTML."""


class ConcatenationError(Md2bookError):
    """Rendered views could not be concatenated."""


class ConversionError(Md2bookError):
    """Error during external format conversion (pandoc)."""
