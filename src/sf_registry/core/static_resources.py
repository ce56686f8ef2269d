"""Static Resource Validator — pre-flight gate for the deploy archive.

A static resource ``Logo`` is deployable when the resources folder
holds both a payload (``Logo`` or ``Logo.<anything>``, descriptor
excluded) and a regular-file descriptor ``Logo.resource-meta.xml``.

Every referenced name is checked concurrently and every failure is
collected before raising, so the operator sees the complete list.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

import structlog

from sf_registry.core.models import StaticResource
from sf_registry.exceptions import StaticResourceValidationError

logger = structlog.get_logger(__name__)


def find_payload(files: Iterable[Path], name: str, descriptor_suffix: str) -> Path | None:
    """Pick the payload file for resource *name* from a directory listing."""
    for file_path in sorted(files):
        file_name = file_path.name
        if file_name.endswith(f".{descriptor_suffix}"):
            continue
        if file_name == name or file_name.startswith(f"{name}."):
            return file_path
    return None


async def _check_resource(
    name: str,
    files: list[Path],
    resources_dir: Path,
    descriptor_suffix: str,
) -> StaticResource:
    payload = find_payload(files, name, descriptor_suffix)
    descriptor = resources_dir / f"{name}.{descriptor_suffix}"
    descriptor_ok = await asyncio.to_thread(descriptor.is_file)

    if payload is not None and descriptor_ok:
        return StaticResource(name=name, payload=payload, descriptor=descriptor)

    problems: list[str] = []
    if payload is None:
        problems.append(f"static resource '{name}' not found in {resources_dir}")
    if not descriptor_ok:
        problems.append(f"static resource '{name}' is missing its descriptor {descriptor.name}")
    raise StaticResourceValidationError(problems)


async def validate_static_resources(
    names: Iterable[str],
    resources_dir: Path,
    descriptor_suffix: str = "resource-meta.xml",
) -> list[StaticResource]:
    """Confirm every resource in *names* has a payload and a descriptor.

    Returns the validated resources in the order of *names*.

    Raises
    ------
    StaticResourceValidationError
        Listing every missing payload or descriptor.
    """
    wanted = list(dict.fromkeys(names))
    if not wanted:
        return []

    try:
        files = await asyncio.to_thread(
            lambda: [p for p in resources_dir.iterdir() if p.is_file()]
        )
    except OSError as exc:
        raise StaticResourceValidationError(
            [f"static resources folder {resources_dir} is not readable ({exc.strerror or exc})"]
            + [f"static resource '{name}' cannot be located" for name in wanted]
        ) from exc

    results = await asyncio.gather(
        *(_check_resource(name, files, resources_dir, descriptor_suffix) for name in wanted),
        return_exceptions=True,
    )

    problems: list[str] = []
    resources: list[StaticResource] = []
    for result in results:
        if isinstance(result, StaticResourceValidationError):
            problems.extend(result.problems)
        elif isinstance(result, BaseException):
            raise result
        else:
            resources.append(result)

    if problems:
        logger.warning("static_resources_invalid", problems=problems)
        raise StaticResourceValidationError(problems)

    logger.info("static_resources_validated", resources=[r.name for r in resources])
    return resources
