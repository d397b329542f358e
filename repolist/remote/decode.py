"""Decode `gh repo list --json` output into RepositoryDescriptor values."""

import json
from typing import Any

from ..errors import FetchError
from ..models import BranchRef, LicenseInfo, RepositoryDescriptor, Visibility, parse_timestamp

REQUIRED_KEYS = ("name", "nameWithOwner", "visibility", "url", "sshUrl", "createdAt", "updatedAt")


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _count(value: Any) -> int:
    """gh returns counts either bare or as {"totalCount": n}. Negatives are rejected by the model."""
    if isinstance(value, dict):
        value = value.get("totalCount", 0)
    if value is None:
        return 0
    return int(value)


def _branch(value: Any) -> BranchRef | None:
    if not isinstance(value, dict):
        return None
    name = _optional_text(value.get("name"))
    return BranchRef(name) if name else None


def _license(value: Any) -> LicenseInfo | None:
    if not isinstance(value, dict):
        return None
    spdx = _optional_text(value.get("spdxId"))
    if spdx == "NOASSERTION":
        spdx = None
    name = _optional_text(value.get("name"))
    if spdx is None and name is None:
        return None
    return LicenseInfo(spdx_id=spdx, name=name)


def _topics(value: Any) -> tuple[str, ...]:
    """[{"name": "infra"}, ...] or ["infra", ...] -> ("infra", ...), deduplicated."""
    seen: dict[str, None] = {}
    for item in value or []:
        name = item.get("name") if isinstance(item, dict) else item
        if name:
            seen.setdefault(str(name), None)
    return tuple(seen)


def decode_repository(item: dict) -> RepositoryDescriptor:
    """One gh JSON object -> descriptor. Raises KeyError/ValueError/TypeError on bad shape."""
    missing = [k for k in REQUIRED_KEYS if k not in item]
    if missing:
        raise KeyError(", ".join(missing))
    visibility = Visibility(str(item["visibility"]).lower())
    is_private = bool(item.get("isPrivate", visibility != Visibility.PUBLIC))
    return RepositoryDescriptor(
        name=str(item["name"]),
        full_name=str(item["nameWithOwner"]),
        description=_optional_text(item.get("description")),
        homepage_url=_optional_text(item.get("homepageUrl")),
        topics=_topics(item.get("repositoryTopics")),
        visibility=visibility,
        is_private=is_private,
        is_fork=bool(item.get("isFork", False)),
        archived=bool(item.get("isArchived", False)),
        url=str(item["url"]),
        ssh_url=str(item["sshUrl"]),
        created_at=parse_timestamp(str(item["createdAt"])),
        updated_at=parse_timestamp(str(item["updatedAt"])),
        stargazer_count=_count(item.get("stargazerCount")),
        watchers_count=_count(item.get("watchers")),
        open_issues_count=_count(item.get("issues")),
        default_branch=_branch(item.get("defaultBranchRef")),
        license=_license(item.get("licenseInfo")),
    )


def decode_repositories(text: str) -> list[RepositoryDescriptor]:
    """Decode the whole response. Any shape problem is a FetchError."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FetchError(f"could not decode gh output as JSON: {e}") from e
    if not isinstance(data, list):
        raise FetchError(f"could not decode gh output: expected an array, got {type(data).__name__}")
    repos = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise FetchError(f"could not decode gh output: item {i} is not an object")
        try:
            repos.append(decode_repository(item))
        except KeyError as e:
            raise FetchError(f"could not decode gh output: item {i} is missing {e.args[0]}") from e
        except (ValueError, TypeError) as e:
            raise FetchError(f"could not decode gh output: item {i}: {e}") from e
    return repos
