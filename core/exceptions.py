"""Custom exception hierarchy for the Key Vault forwarding proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class InvalidParameter(ProxyError):
    """Raised when a required argument is missing.

    Attributes:
        parameter: Name of the offending argument
    """

    def __init__(self, parameter: str) -> None:
        super().__init__(f"Invalid parameter: {parameter}.")
        self.parameter = parameter
