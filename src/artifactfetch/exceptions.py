"""
Custom exceptions for artifactfetch.

Every error raised while acquiring a prebuilt artifact is recoverable: the
installer maps it to the local build. The single exception to that rule is
FallbackBuildError, which is raised when the local build itself fails and is
allowed to terminate the process.
"""


class ArtifactFetchError(Exception):
    """
    Base exception for all artifactfetch errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ArtifactFetchError):
    """
    Exception raised when the run configuration is incomplete.

    This includes:
    - No artifact path
    - No resolvable repository or version
    - Invalid user configuration values
    """

    pass


class ManifestError(ConfigurationError):
    """
    Exception raised when the package manifest cannot be read or parsed.

    Attributes:
        path: The manifest path that was being read.
    """

    def __init__(
        self, message: str, path: str | None = None, details: str | None = None
    ) -> None:
        super().__init__(message, details)
        self.path = path


# =============================================================================
# Download Errors
# =============================================================================


class DownloadError(ArtifactFetchError):
    """
    Base exception for download-related errors.

    Attributes:
        url: The URL that was being downloaded when the error occurred.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


class NetworkError(DownloadError):
    """
    Exception raised for transport-level download failures.

    This includes:
    - Connection timeouts
    - DNS resolution failures
    - Connection refused errors
    - SSL/TLS errors
    """

    pass


class HTTPError(DownloadError):
    """
    Exception raised when the release host answers with an unusable status.

    Attributes:
        status_code: The HTTP status code returned by the server.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, url, details)
        self.status_code = status_code


# =============================================================================
# Artifact Errors
# =============================================================================


class DecompressionError(ArtifactFetchError):
    """
    Exception raised when downloaded bytes cannot be decoded by a codec.

    Attributes:
        codec: Name of the codec that failed.
    """

    def __init__(
        self, message: str, codec: str | None = None, details: str | None = None
    ) -> None:
        super().__init__(message, details)
        self.codec = codec


# =============================================================================
# Build Errors
# =============================================================================


class FallbackBuildError(ArtifactFetchError):
    """
    Exception raised when the local build command fails.

    This is the only unrecovered error: it propagates out of the installer.

    Attributes:
        command: The build command that was run.
        exit_code: Exit status of the command, if it exited.
        signal: Signal number that terminated the command, if any.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        exit_code: int | None = None,
        signal: int | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.command = command
        self.exit_code = exit_code
        self.signal = signal
