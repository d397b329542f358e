"""Resolve raw options (command line + optional YAML defaults) into a QueryConfiguration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ValidationError
from .models import DEFAULT_LIMIT, OutputMode, QueryConfiguration, Visibility

logger = logging.getLogger(__name__)

DEFAULTS_FILENAME = ".repolist.yaml"
USER_DEFAULTS_RELPATH = Path(".config") / "repolist" / "config.yaml"

# YAML key -> resolve_config keyword
DEFAULT_KEYS = {
    "limit": "limit",
    "visibility": "visibility",
    "include_forks": "include_forks",
    "source_only": "source_only",
    "topics": "topics",
    "output": "output",
    "out_file": "out_file",
}


def find_defaults_file(explicit: Path | None = None, cwd: Path | None = None) -> Path | None:
    """Explicit path, else ./.repolist.yaml, else ~/.config/repolist/config.yaml."""
    if explicit is not None:
        if not explicit.is_file():
            raise ValidationError("config", f"file not found: {explicit}")
        return explicit
    local = (cwd or Path.cwd()) / DEFAULTS_FILENAME
    if local.is_file():
        return local
    user = _user_defaults_path()
    if user is not None and user.is_file():
        return user
    return None


def _user_defaults_path() -> Path | None:
    """~/.config/repolist/config.yaml, or None when there is no home directory."""
    try:
        return Path.home() / USER_DEFAULTS_RELPATH
    except RuntimeError:
        logger.debug("No home directory; skipping user defaults")
        return None


def load_defaults(path: Path | None) -> dict[str, Any]:
    """Load option defaults from YAML. Returns resolve_config keywords."""
    if path is None:
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        raise ValidationError("config", f"cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("config", f"{path} must contain a mapping")
    defaults: dict[str, Any] = {}
    for key, value in data.items():
        target = DEFAULT_KEYS.get(str(key))
        if target is None:
            logger.debug("Ignoring unknown key %r in %s", key, path)
            continue
        defaults[target] = value
    logger.debug("Loaded defaults from %s: %s", path, sorted(defaults))
    return defaults


def _owner(value: Any) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError("owner", f"must be a string, got {value!r}")
    owner = (value or "").strip()
    if not owner:
        raise ValidationError("owner", "must not be empty")
    return owner


def _limit(value: Any) -> int:
    if value is None:
        return DEFAULT_LIMIT
    # bool is an int subclass; `limit: yes` in YAML is not a count
    if isinstance(value, bool):
        raise ValidationError("limit", f"must be a positive integer, got {value!r}")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError("limit", f"must be a positive integer, got {value!r}") from None
    if not isinstance(value, int):
        raise ValidationError("limit", f"must be a positive integer, got {value!r}")
    if value < 1:
        raise ValidationError("limit", f"must be >= 1, got {value}")
    return value


def _choice(field: str, value: Any, enum_cls):
    if not isinstance(value, str):
        raise ValidationError(field, f"must be a string, got {value!r}")
    text = value.strip().lower()
    try:
        return enum_cls(text)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field, f"must be one of {allowed}, got {value!r}") from None


def _flag(field: str, value: Any, default: bool) -> bool:
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ValidationError(field, f"must be true or false, got {value!r}")
    return value


def _topic_filter(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("topics", f"must be a string, got {value!r}")
    if not value.strip():
        raise ValidationError("topics", "must not be blank")
    return value.strip()


def _out_file(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("out_file", f"must be a path, got {value!r}")
    return value


def resolve_config(
    owner: Any,
    *,
    limit: Any = None,
    visibility: Any = None,
    include_forks: Any = None,
    source_only: Any = None,
    topics: Any = None,
    output: Any = None,
    out_file: Any = None,
    is_org: bool = False,
    defaults: dict[str, Any] | None = None,
) -> QueryConfiguration:
    """Validate raw options and return an immutable QueryConfiguration.

    Arguments left as None fall back to ``defaults`` (from a YAML file), then
    to built-in defaults. Raises ValidationError naming the first bad field.
    Performs no network or filesystem access.
    """
    defaults = defaults or {}

    def pick(name: str, value: Any) -> Any:
        return value if value is not None else defaults.get(name)

    raw_visibility = pick("visibility", visibility)
    raw_output = pick("output", output)

    config = QueryConfiguration(
        owner=_owner(owner),
        limit=_limit(pick("limit", limit)),
        visibility=_choice("visibility", raw_visibility, Visibility) if raw_visibility is not None else None,
        include_forks=_flag("include_forks", pick("include_forks", include_forks), True),
        source_only=_flag("source_only", pick("source_only", source_only), False),
        topic_filter=_topic_filter(pick("topics", topics)),
        output_mode=_choice("output", raw_output, OutputMode) if raw_output is not None else OutputMode.CONSOLE,
        out_file=_out_file(pick("out_file", out_file)),
        is_org=bool(is_org),
    )
    if config.source_only and not config.include_forks:
        logger.debug("source_only is implied by excluding forks")
    if config.output_mode == OutputMode.CONSOLE and config.out_file:
        logger.warning("Console output ignores out_file %s", config.out_file)
    logger.debug("Resolved configuration: %s", config)
    return config
