"""Core exception types shared across layers."""


class TrainerConfigurationError(Exception):
    """Raised for configuration problems that no single turn can recover from."""


class PromptConfigurationError(TrainerConfigurationError):
    """Raised when template pools are malformed or missing a category."""


class LocaleNotConfiguredError(TrainerConfigurationError):
    """Raised when neither the requested nor the default locale has pools."""


class InvalidSessionError(ValueError):
    """Raised when game session data violates its invariants."""


__all__ = [
    "TrainerConfigurationError",
    "PromptConfigurationError",
    "LocaleNotConfiguredError",
    "InvalidSessionError",
]
