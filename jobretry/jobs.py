"""Job class registry."""

from abc import ABC, abstractmethod
from typing import Dict, List, Type

from .exceptions import JobNotFoundError

__all__ = ["job", "get_job_class", "get_registered_jobs", "BaseJob", "JobNotFoundError"]

# Job class registry (module level)
_registry: Dict[str, Type["BaseJob"]] = {}


def job(name: str):
    """Register a job class under ``name``."""
    def decorator(cls):
        _registry[name] = cls
        return cls
    return decorator


def get_job_class(name: str) -> Type["BaseJob"]:
    """Return the job class registered under ``name``."""
    if name not in _registry:
        raise JobNotFoundError(name)
    return _registry[name]


def get_registered_jobs() -> Dict[str, Type["BaseJob"]]:
    """Registered job classes (copy)."""
    return _registry.copy()


class BaseJob(ABC):
    """Base class for jobs.

    ``plugins`` lists, in order, the names of the plugins that observe this
    job's lifecycle. Retry settings (``retry_limit``, ``retry_delay``,
    ``backoff_strategy``, ``retry_exceptions``) may be declared as class
    attributes or as methods taking the job occurrence.
    """

    plugins: List[str] = []

    @abstractmethod
    def perform(self, *args):
        """Run the job. Raise to signal failure."""
        pass
