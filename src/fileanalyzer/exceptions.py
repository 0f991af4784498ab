# ============================================================================
# FILE: exceptions.py
# RELPATH: indexed_file_analyzer/src/fileanalyzer/exceptions.py
# PROJECT: Indexed File Analyzer
# VERSION: 1.0.0
# LIFECYCLE: Proposed
# DESCRIPTION: Exception hierarchy for the indexed file analyzer
# ============================================================================

"""
Exception classes for the Indexed File Analyzer.

Every failure the analyzer can report maps onto one branch of this tree, so
the command-line layer can turn configuration problems into exit code 1 and
everything else into exit code 2.
"""

from typing import Any, Optional


class FileAnalyzerError(Exception):
    """Base exception for all Indexed File Analyzer errors."""
    pass


# ============================================================================
# Header / Transcoding Exceptions
# ============================================================================

class MalformedHeaderError(FileAnalyzerError):
    """
    Raised when the NUL-terminated header of a container cannot be read.

    Attributes:
        path: Path of the container file
        reason: Human-readable explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed header in '{path}': {reason}")


class TranscodeError(FileAnalyzerError):
    """
    Raised when a record cannot be stripped of one UTF-8 layer.

    Attributes:
        offset: Byte position in the input at which the problem was found
        detail: Description of the problem
        record_index: Index of the offending record, once known
    """
    def __init__(self, offset: int, detail: str, record_index: Optional[int] = None):
        self.offset = offset
        self.detail = detail
        self.record_index = record_index

        msg = f"at position {offset}, {detail}"
        if record_index is not None:
            msg = f"In record {record_index}, {msg}"
        super().__init__(msg)

    def annotate(self, record_index: int) -> "TranscodeError":
        """Return a copy of this error that names the offending record."""
        return TranscodeError(self.offset, self.detail, record_index)


# ============================================================================
# Validation / Precondition Exceptions
# ============================================================================

class ValidationError(FileAnalyzerError):
    """
    Base exception for input-shape violations.

    Attributes:
        detail: Explanation of the violation
    """
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class ImplodeValidationError(ValidationError):
    """
    Raised when an implode directory does not have the expected shape.

    Attributes:
        detail: Explanation of the violation
        entry: Directory entry (or missing index) the violation is about
    """
    def __init__(self, detail: str, entry: Optional[str] = None):
        self.entry = entry
        super().__init__(detail)


class PreconditionError(FileAnalyzerError):
    """
    Raised when an operation cannot start because of the state of the filesystem.

    Attributes:
        detail: Explanation of the unmet precondition
        path: Path the precondition is about
    """
    def __init__(self, detail: str, path: Optional[str] = None):
        self.detail = detail
        self.path = path
        super().__init__(detail)


class OutputExistsError(PreconditionError):
    """
    Raised when an output container would overwrite an existing file.

    Attributes:
        path: Path of the existing file
    """
    def __init__(self, path: str):
        super().__init__(f"Output file '{path}' must not already exist", path)


# ============================================================================
# Configuration-Related Exceptions
# ============================================================================

class ConfigError(FileAnalyzerError):
    """Base exception for configuration-related errors."""
    pass


class ConfigLoadError(ConfigError):
    """
    Raised when configuration file cannot be loaded.

    Attributes:
        config_file: Path to the configuration file
        reason: Explanation of the failure
    """
    def __init__(self, config_file: str, reason: str):
        self.config_file = config_file
        self.reason = reason
        super().__init__(f"Failed to load config '{config_file}': {reason}")


class ConfigValidationError(ConfigError):
    """
    Raised when configuration data or a command-line option fails validation.

    Attributes:
        key: Configuration key that failed validation
        value: The invalid value
        reason: Explanation of why validation failed
    """
    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{key}': {reason}")


# ============================================================================
# Container Engine Exceptions
# ============================================================================

class ContainerError(FileAnalyzerError):
    """Base exception for indexed file engine errors."""
    pass


class ContainerFormatError(ContainerError):
    """
    Raised when a file is not a readable indexed file of the expected kind.

    Attributes:
        path: Path of the container file
        reason: Explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read indexed file '{path}': {reason}")


class ContainerStateError(ContainerError):
    """
    Raised when an indexed file is used in a way its state does not allow.

    Attributes:
        path: Path of the container file
        reason: Explanation of the failure
    """
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Indexed file '{path}': {reason}")


class RecordIndexError(ContainerError, IndexError):
    """
    Raised when a record index lies outside the container.

    Attributes:
        index: Requested record index
        record_count: Number of records in the container
    """
    def __init__(self, index: int, record_count: int):
        self.index = index
        self.record_count = record_count
        super().__init__(
            f"Record {index} out of range (file has {record_count} records)"
        )


# ============================================================================
# LIFECYCLE STATUS: Proposed
# DEPENDENCIES: None (base exception definitions)
# TESTS: tests/unit/test_exceptions.py
# ============================================================================
