"""CLI interface for jobretry."""

import click
import importlib
import sys
from typing import Optional
from redis import Redis
from .backoff import DEFAULT_BACKOFF_STRATEGY, backoff_schedule, parse_strategy
from .jobs import get_registered_jobs
from .log import setup_logging
from .plugin import HookDispatcher, PluginRegistry
from .queue import RedisFailureBackend, RedisJobQueue, RedisScheduler, RedisStatusTracker
from .retry import register_retry_plugins
from .settings import get_settings
from .storage import AttemptStore, RedisStore
from .worker import Worker


# Global redis client
_client: Optional[Redis] = None


def get_client() -> Redis:
    """Get or create the Redis client."""
    global _client
    if _client is None:
        _client = Redis.from_url(get_settings().redis_url, decode_responses=True)
    return _client


def get_attempts() -> AttemptStore:
    settings = get_settings()
    return AttemptStore(RedisStore(get_client(), settings.key_prefix))


def build_registry() -> PluginRegistry:
    """Plugin registry wired to Redis collaborators."""
    settings = get_settings()
    client = get_client()
    registry = PluginRegistry()
    register_retry_plugins(
        registry,
        get_attempts(),
        RedisScheduler(client, settings.key_prefix),
        RedisJobQueue(client, settings.key_prefix),
        status=RedisStatusTracker(client, settings.key_prefix),
        max_delay=settings.max_retry_delay,
    )
    return registry


def _import_jobs(modules) -> None:
    for module in modules:
        importlib.import_module(module)


@click.group()
def cli():
    """jobretry - retry coordination for background jobs"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.json_logs)


@cli.command()
@click.argument("key")
def attempts(key: str):
    """Show the attempt counter for a retry key.

    Example:
        jobretry attempts 'retry:(Job{mail} | SendEmail | 3f2a)'
    """
    value = get_attempts().read_attempt(key)
    if value is None:
        click.echo("No failures recorded")
    else:
        click.echo(f"Attempt: {value}")


@cli.command()
@click.argument("key")
def clear(key: str):
    """Clear the attempt counter for a retry key.

    Example:
        jobretry clear 'retry:(Job{mail} | SendEmail | 3f2a)'
    """
    get_attempts().clear(key)
    click.echo(f"✓ Cleared {key}")


@cli.command()
@click.option("--strategy", default=None, help="Comma separated delays in seconds")
@click.option("--attempts", "count", default=None, type=int, help="Number of attempts to show")
def backoff(strategy: Optional[str], count: Optional[int]):
    """Show the delay before each retry of a backoff strategy.

    Example:
        jobretry backoff --strategy 1,10,60 --attempts 5
    """
    try:
        steps = parse_strategy(strategy) if strategy else list(DEFAULT_BACKOFF_STRATEGY)
    except ValueError as e:
        click.echo(f"✗ Invalid strategy: {e}", err=True)
        sys.exit(1)

    count = len(steps) if count is None else count
    click.echo(f"\n{'Attempt':<10} {'Delay (s)':<10}")
    click.echo("-" * 20)
    for attempt, delay in enumerate(backoff_schedule(steps, count)):
        click.echo(f"{attempt:<10} {delay:<10}")
    click.echo(f"\nRetry limit: {len(steps)}\n")


@cli.command()
@click.option("--import", "modules", multiple=True, help="Module defining job classes")
def plugins(modules):
    """List registered plugins and the plugins each job declares.

    Example:
        jobretry plugins --import myapp.jobs
    """
    _import_jobs(modules)
    registry = build_registry()
    click.echo("Registered plugins: " + ", ".join(registry.registered()))

    jobs = get_registered_jobs()
    for name, cls in jobs.items():
        click.echo(f"  {name:<30} {', '.join(cls.plugins) or '-'}")

    unknown = registry.validate(jobs.values())
    if unknown:
        click.echo(f"✗ Unknown plugins: {', '.join(unknown)}", err=True)
        sys.exit(1)


@cli.group()
def worker():
    """Run workers"""
    pass


@worker.command()
@click.option("--queue", "queues", multiple=True, required=True, help="Queue to work, in priority order")
@click.option("--import", "modules", multiple=True, help="Module defining job classes")
@click.option("--interval", default=5.0, help="Seconds to sleep when queues are empty")
def start(queues, modules, interval: float):
    """Start a worker.

    Example:
        jobretry worker start --queue mail --import myapp.jobs
    """
    _import_jobs(modules)
    settings = get_settings()
    client = get_client()

    registry = build_registry()
    registry.validate(get_registered_jobs().values())
    dispatcher = HookDispatcher(registry)
    dispatcher.initialize()

    w = Worker(
        dispatcher,
        RedisFailureBackend(client, settings.key_prefix),
        queue=RedisJobQueue(client, settings.key_prefix),
    )
    w.run(list(queues), poll_interval=interval)


@cli.group()
def config():
    """Manage configuration"""
    pass


@config.command()
def show():
    """Show current configuration.

    Example:
        jobretry config show
    """
    cfg = get_settings()

    click.echo("\nCurrent Configuration:")
    click.echo(f"  redis-url:        {cfg.redis_url}")
    click.echo(f"  key-prefix:       {cfg.key_prefix}")
    click.echo(f"  log-level:        {cfg.log_level}")
    click.echo(f"  json-logs:        {cfg.json_logs}")
    ceiling = cfg.max_retry_delay if cfg.max_retry_delay is not None else "none"
    click.echo(f"  max-retry-delay:  {ceiling}")
    click.echo()


if __name__ == "__main__":
    cli()
