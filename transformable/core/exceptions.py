"""Exception hierarchy for the transformable package."""


class TransformableError(Exception):
    """Base exception for all transformable errors."""

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigurationError(TransformableError):
    """Raised when transformable fields or transformers are misconfigured."""

    pass


class UnknownTransformerError(ConfigurationError):
    """Raised when no transformer is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        super().__init__(
            f"Unknown transformer: '{name}'",
            context={
                "name": name,
                "available": ", ".join(available or []) or "(none)",
            },
        )
        self.name = name


class ConfigError(ConfigurationError):
    """Raised when a configuration file cannot be loaded or validated."""

    pass


class TransformerExecutionError(TransformableError):
    """Raised by transformers when a value cannot be converted."""

    pass
