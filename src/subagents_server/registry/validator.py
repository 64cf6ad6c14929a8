"""Schema validation for agent definition files.

An agent file is a YAML front matter block followed by a markdown body.
Validation is a total function: malformed input is reported through the
``errors`` and ``warnings`` of a ValidationResult and never raised.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

import frontmatter
import semver
import yaml

from subagents_server.registry.types import (
    LIST_FIELDS,
    REQUIRED_FIELDS,
    VALID_CATEGORIES,
    Agent,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MIN_CONTENT_LENGTH = 100


def _normalize_version(version: str) -> str:
    """Trim surrounding whitespace and one leading 'v' ('v1.2.0' -> '1.2.0')."""
    version = version.strip()
    if version.startswith("v"):
        return version[1:]
    return version


def is_valid_version(version: str) -> bool:
    """Check whether a string is a well-formed semantic version.

    A single leading 'v' is accepted, as agent files commonly carry one.
    """
    return semver.Version.is_valid(_normalize_version(version))


def compare_versions(left: str, right: str) -> int:
    """Compare two semantic versions, returning -1, 0 or 1."""
    return semver.Version.parse(_normalize_version(left)).compare(
        _normalize_version(right)
    )


def validate_agent_text(text: str, path: Path | None = None) -> ValidationResult:
    """Validate the contents of an agent file.

    Checks, in order: metadata parses, required fields are present, version
    is valid semver, category is known, list fields hold strings, at least
    one tool is declared (warning) and the body is long enough (warning).

    Args:
        text: Full file contents (front matter and body)
        path: Location of the file, recorded on the parsed agent

    Returns:
        ValidationResult; ``valid`` is False when any error was found
    """
    errors: list[str] = []
    warnings: list[str] = []

    try:
        post = frontmatter.loads(text)
    except (yaml.YAMLError, ValueError, TypeError) as e:
        return ValidationResult(
            valid=False, errors=[f"Failed to parse metadata: {e}"], warnings=warnings
        )

    metadata: dict[str, Any] = dict(post.metadata)
    body = post.content

    for field_name in REQUIRED_FIELDS:
        if not metadata.get(field_name):
            errors.append(f"Missing required field: {field_name}")

    name = _as_text(metadata.get("name"))
    if "/" in name or "\\" in name or name.startswith("."):
        errors.append(f"Invalid name: {name}")

    version = _as_text(metadata.get("version"))
    if version and not is_valid_version(version):
        errors.append(f"Invalid version format: {version}")

    category = _as_text(metadata.get("category"))
    if category and category not in VALID_CATEGORIES:
        errors.append(
            f"Invalid category: {category}. Must be one of: {', '.join(VALID_CATEGORIES)}"
        )

    lists: dict[str, list[str]] = {}
    for field_name in LIST_FIELDS:
        value = metadata.get(field_name)
        if value is None:
            lists[field_name] = []
        elif isinstance(value, list) and all(isinstance(v, str) for v in value):
            lists[field_name] = value
        else:
            errors.append(f"Field '{field_name}' must be a list of strings")
            lists[field_name] = []

    if not lists["tools"]:
        warnings.append("No tools specified")

    if len(body.strip()) < MIN_CONTENT_LENGTH:
        warnings.append(
            f"Agent description content is too short (minimum {MIN_CONTENT_LENGTH} characters)"
        )

    agent = Agent(
        name=name,
        category=category,
        description=_as_text(metadata.get("description")),
        version=version,
        author=_as_text(metadata.get("author")),
        license=_as_text(metadata.get("license")),
        repository=_as_text(metadata.get("repository")) or None,
        homepage=_as_text(metadata.get("homepage")) or None,
        content=body,
        path=path,
        **lists,
    )

    return ValidationResult(
        valid=not errors, errors=errors, warnings=warnings, agent=agent
    )


async def validate_agent_file(path: Path) -> ValidationResult:
    """Read and validate an agent file.

    Read failures (missing file, permissions, invalid UTF-8) are reported
    as an invalid result rather than raised.
    """
    try:
        text = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Could not read agent file {path}: {e}")
        return ValidationResult(
            valid=False, errors=[f"Failed to read agent file: {e}"]
        )
    return validate_agent_text(text, path=path)


def _as_text(value: Any) -> str:
    """Normalize a scalar metadata value to a string ('' when absent)."""
    if value is None:
        return ""
    return str(value)
