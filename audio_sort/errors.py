from __future__ import annotations


class ApplicationError(Exception):
    """Errors that are reported to the user as a single line and a specific exit code."""

    prefix: str = "UnknownError"
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(f"{self.prefix}: {message}")


class ArgumentsError(ApplicationError):
    prefix = "ArgumentsError"


class ConfigError(ApplicationError):
    prefix = "ConfigError"
