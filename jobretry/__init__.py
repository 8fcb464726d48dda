"""jobretry - retry coordination and plugin hooks for background jobs."""

from .jobs import BaseJob, job
from .models import FailureOutcome, JobOccurrence, RetryState
from .plugin import HookDispatcher, PluginRegistry
from .retry import ExponentialRetry, Retry, register_retry_plugins
from .storage import AttemptStore, MemoryStore, RedisStore, retry_key

__version__ = "1.0.0"

__all__ = [
    "AttemptStore",
    "BaseJob",
    "ExponentialRetry",
    "FailureOutcome",
    "HookDispatcher",
    "JobOccurrence",
    "MemoryStore",
    "PluginRegistry",
    "RedisStore",
    "Retry",
    "RetryState",
    "job",
    "register_retry_plugins",
    "retry_key",
]
