"""Setup errors raised while loading run configuration."""


class SetupError(Exception):
    """Base class for failures that abort a run before any output is written."""


class ConfigFileNotFoundError(SetupError):
    """Raised when the sources file does not exist."""

    def __init__(self, file_path: str) -> None:
        """Initialize the error.

        Args:
            file_path: Path that was looked up.
        """
        self.file_path = file_path
        super().__init__(f"Sources file not found: {file_path}")


class ConfigValidationError(SetupError):
    """Raised when the sources file cannot be parsed as a configuration."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


class MissingApiKeyError(SetupError):
    """Raised when a summarization call may be needed but no API key is set."""

    def __init__(self, variable: str = "ZHIPU_API_KEY") -> None:
        """Initialize the error.

        Args:
            variable: Name of the missing environment variable.
        """
        self.variable = variable
        super().__init__(
            f"{variable} is not set (use --skip-llm or --dry-run to run without it)"
        )
