"""Exceptions raised by jobretry."""


class JobRetryError(Exception):
    """Base exception for jobretry."""
    pass


class JobNotFoundError(JobRetryError):
    """No job class is registered under the given name."""
    def __init__(self, name: str):
        self.name = name
        self.message = f"Job class not found: {name}"
        super().__init__(self.message)


class PluginNotFoundError(JobRetryError):
    """No plugin factory is registered under the given name."""
    def __init__(self, name: str):
        self.name = name
        self.message = f"Plugin not found: {name}"
        super().__init__(self.message)
