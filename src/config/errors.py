class ConfigurationError(RuntimeError):
    """Raised when the deployment is missing required configuration."""
