"""Helpers shared by CLI command groups."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import typer

from memit.application.config import AppConfig, resolve_config
from memit.application.factory import get_study_service
from memit.application.study_service import StudyService
from memit.domain.errors import MemitError

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _resolve_with_overrides(ctx: typer.Context | None = None, **overrides: Any) -> AppConfig:
    """Resolve config, layering global callback options and command options."""
    merged: dict[str, Any] = {}
    if ctx is not None and ctx.obj:
        merged.update(ctx.obj.get("overrides", {}))
    merged.update(overrides)
    config = resolve_config(merged)
    logging.getLogger("memit").setLevel(config.log_level())
    return config


def run_with_service(
    ctx: typer.Context,
    fn: Callable[[StudyService], Awaitable[T]],
    config: AppConfig | None = None,
) -> T:
    """
    Build and load a StudyService, run fn against it and map domain errors
    to a non-zero exit.
    """
    config = config or _resolve_with_overrides(ctx)

    async def run() -> T:
        service = get_study_service(config)
        await service.load()
        return await fn(service)

    try:
        return asyncio.run(run())
    except MemitError as e:
        logger.debug(f"Command failed: {e!r}")
        typer.secho(f"Error ({e.kind.value}): {e}", fg="red", err=True)
        raise typer.Exit(1)
