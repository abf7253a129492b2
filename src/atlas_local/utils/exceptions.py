"""Custom exceptions for the Atlas Local extension backend."""

from typing import Dict


class AtlasLocalError(Exception):
    """Base exception for Atlas Local extension errors."""

    pass


class RuntimeClientError(AtlasLocalError):
    """Base exception for failures reported by the container runtime."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Initialize RuntimeClientError.

        Args:
            message: Error message
            original_error: Original exception from Docker
        """
        self.original_error = original_error
        super().__init__(message)


class RuntimeUnavailableError(RuntimeClientError):
    """Exception raised when the container runtime cannot be reached or listed."""

    def __init__(
        self,
        message: str = "Container runtime is unavailable",
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message, original_error)


class InspectFailedError(RuntimeClientError):
    """Exception raised when a single container cannot be inspected."""

    def __init__(self, container_id: str, original_error: Exception | None = None) -> None:
        """
        Initialize InspectFailedError.

        Args:
            container_id: ID of the container whose inspect failed
            original_error: Original exception from Docker
        """
        self.container_id = container_id
        detail = f": {original_error}" if original_error else ""
        super().__init__(f"Failed to inspect container {container_id}{detail}", original_error)


class LaunchFailedError(RuntimeClientError):
    """Exception raised when creating or starting a container fails."""

    pass


class ValidationFailedError(AtlasLocalError):
    """Exception raised when launch options fail validation."""

    def __init__(self, errors: Dict[str, str]) -> None:
        """
        Initialize ValidationFailedError.

        Args:
            errors: Validation messages keyed by field name
        """
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid launch options: {fields}")
