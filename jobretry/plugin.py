"""Per job class plugins and lifecycle hook dispatch."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .events import EventBus
from .exceptions import JobNotFoundError, PluginNotFoundError
from .jobs import get_job_class
from .models import FailureOutcome, JobOccurrence

logger = logging.getLogger(__name__)

HOOKS = ("before_perform", "after_perform", "on_failure")


class PluginRegistry:
    """Plugin factories by name, and the plugin instances of each job class.

    Instances are created on first use for a job class and kept for the
    lifetime of the registry.
    """

    def __init__(self, resolve_job_class: Callable[[str], type] = get_job_class):
        self.resolve_job_class = resolve_job_class
        self._factories: Dict[str, Callable[[], Any]] = {}
        self._instances: Dict[str, List[Any]] = {}

    def register(self, name: str, factory: Callable[[], Any]) -> None:
        """Register a zero-argument plugin constructor under ``name``."""
        self._factories[name] = factory

    def plugin(self, name: str):
        """Class decorator form of :meth:`register`."""
        def decorator(cls):
            self.register(name, cls)
            return cls
        return decorator

    def registered(self) -> List[str]:
        return list(self._factories)

    def create(self, name: str) -> Any:
        if name not in self._factories:
            raise PluginNotFoundError(name)
        return self._factories[name]()

    def instances_for(self, job_class: str) -> List[Any]:
        """Plugin instances declared by a job class, in declaration order."""
        if job_class not in self._instances:
            self._instances[job_class] = self._create_instances(job_class)
        return self._instances[job_class]

    def instances_implementing(self, job_class: str, hook: str) -> List[Any]:
        """Plugin instances of a job class that implement ``hook``."""
        return [
            instance for instance in self.instances_for(job_class)
            if callable(getattr(instance, hook, None))
        ]

    def validate(self, job_classes: Iterable[type]) -> List[str]:
        """Names declared by ``job_classes`` that no factory is registered for."""
        unknown = []
        for cls in job_classes:
            for name in getattr(cls, "plugins", None) or []:
                if name not in self._factories and name not in unknown:
                    logger.warning("Job %s declares unknown plugin %s", cls.__name__, name)
                    unknown.append(name)
        return unknown

    def clear(self) -> None:
        """Forget the cached plugin instances."""
        self._instances.clear()

    def _create_instances(self, job_class: str) -> List[Any]:
        try:
            cls = self.resolve_job_class(job_class)
        except JobNotFoundError:
            logger.warning("No job class registered as %s, running without plugins", job_class)
            return []

        instances = []
        for name in getattr(cls, "plugins", None) or []:
            try:
                instances.append(self.create(name))
            except PluginNotFoundError as e:
                logger.warning("Skipping plugin for job %s: %s", job_class, e.message)
        return instances


class HookDispatcher:
    """Fan lifecycle events out to the plugins of the job's class."""

    def __init__(self, registry: PluginRegistry, events: Optional[EventBus] = None):
        self.registry = registry
        self.events = events or EventBus()
        self._listeners: Dict[str, Callable] = {}

    def initialize(self) -> None:
        """Subscribe to every lifecycle event on the event bus."""
        for hook in HOOKS:
            if hook in self._listeners:
                continue
            listener = self._make_listener(hook)
            self._listeners[hook] = listener
            self.events.listen(hook, listener)

    def shutdown(self) -> None:
        for hook, listener in self._listeners.items():
            self.events.stop_listening(hook, listener)
        self._listeners.clear()

    def _make_listener(self, hook: str) -> Callable:
        def listener(*payload):
            return self.notify(hook, *payload)
        return listener

    def notify(self, hook: str, *payload: Any) -> Optional[FailureOutcome]:
        """Run ``hook`` on the plugins of the job in ``payload``.

        ``payload`` is ``(occurrence,)``, ``(cause, occurrence)`` or
        ``(occurrence, cause)``. Other shapes are ignored.
        """
        occurrence, cause = _unpack(payload)
        if occurrence is None or (hook == "on_failure" and cause is None):
            logger.debug("Ignoring %s with unrecognized payload %r", hook, payload)
            return None

        plugins = self.registry.instances_implementing(occurrence.job_class, hook)
        if cause is None:
            for plugin in plugins:
                getattr(plugin, hook)(occurrence, occurrence.instance)
            return None

        outcome = FailureOutcome.UNHANDLED
        for plugin in plugins:
            result = getattr(plugin, hook)(cause, occurrence, occurrence.instance)
            if result == FailureOutcome.RETRYING:
                # later plugins do not see a failure that is being retried
                return FailureOutcome.RETRYING
            if result == FailureOutcome.HANDLED:
                outcome = FailureOutcome.HANDLED
        return outcome

    def before_perform(self, occurrence: JobOccurrence) -> None:
        self.events.trigger("before_perform", occurrence)

    def after_perform(self, occurrence: JobOccurrence) -> None:
        self.events.trigger("after_perform", occurrence)

    def on_failure(self, cause: BaseException, occurrence: JobOccurrence) -> FailureOutcome:
        """Trigger ``on_failure`` and merge what the listeners returned."""
        results = self.events.trigger("on_failure", cause, occurrence)
        if FailureOutcome.RETRYING in results:
            return FailureOutcome.RETRYING
        if FailureOutcome.HANDLED in results:
            return FailureOutcome.HANDLED
        return FailureOutcome.UNHANDLED


def _unpack(payload):
    if len(payload) == 1 and isinstance(payload[0], JobOccurrence):
        return payload[0], None
    if len(payload) == 2:
        first, second = payload
        if isinstance(first, JobOccurrence) and isinstance(second, BaseException):
            return first, second
        if isinstance(first, BaseException) and isinstance(second, JobOccurrence):
            return second, first
        if isinstance(first, JobOccurrence) and second is None:
            return first, None
    return None, None
