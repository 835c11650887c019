"""Custom exceptions for the rule converters.

Every fatal condition raised by a reader, the emitter or the configuration
layer derives from ConverterError so the command-line entry points can
report it and exit with a non-zero status.
"""

from typing import Optional, Dict, Any


class ConverterError(Exception):
    """Base exception for all converter errors.

    - message: Human-readable error description
    - details: Optional additional context (paths, line numbers, ...)
    """

    error_code: str = "CONVERTER_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============ Input Errors ============


class InputReadError(ConverterError):
    """Input file is missing or cannot be read."""

    error_code = "INPUT_READ_ERROR"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Error reading {path}: {reason}", details={"path": path})


class InputDecodeError(ConverterError):
    """Input content could not be decoded (malformed JSON, CSV, ...)."""

    error_code = "INPUT_DECODE_ERROR"

    def __init__(self, path: str, reason: str, line: Optional[int] = None):
        details: Dict[str, Any] = {"path": path}
        if line is not None:
            details["line"] = line
        super().__init__(f"Error decoding {path}: {reason}", details=details)


class ShapeMismatchError(ConverterError):
    """A field holds a value whose type is not one of the accepted shapes.

    Never fatal: readers and the normalizer collect these and log them as
    warnings, the offending field simply contributes nothing.
    """

    error_code = "SHAPE_MISMATCH"

    def __init__(self, field: str, value: Any, expected: str):
        super().__init__(
            f"Unexpected type for {field}: {type(value).__name__} (expected {expected})",
            details={"field": field, "type": type(value).__name__},
        )
        self.field = field


# ============ Output Errors ============


class OutputWriteError(ConverterError):
    """Output directory or file could not be written."""

    error_code = "OUTPUT_WRITE_ERROR"

    def __init__(self, path: str, reason: str):
        super().__init__(f"Error writing {path}: {reason}", details={"path": path})


# ============ Configuration Errors ============


class ConfigError(ConverterError):
    """Settings file or category table is malformed."""

    error_code = "CONFIG_ERROR"


class VerificationError(ConverterError):
    """A written ruleset does not decode back to the ruleset that was serialized."""

    error_code = "VERIFICATION_ERROR"

    def __init__(self, path: str):
        super().__init__(f"Written ruleset {path} does not match the generated ruleset", details={"path": path})
