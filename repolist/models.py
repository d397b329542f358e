"""Query configuration and repository descriptors."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class OutputMode(str, Enum):
    CONSOLE = "console"
    JSON = "json"
    CSV = "csv"


DEFAULT_LIMIT = 100


@dataclass(frozen=True)
class QueryConfiguration:
    """Validated options for one run. Built by config.resolve_config."""

    owner: str
    limit: int = DEFAULT_LIMIT
    visibility: Optional[Visibility] = None  # None = no filter
    include_forks: bool = True
    source_only: bool = False  # only meaningful when include_forks is True
    topic_filter: Optional[str] = None  # case-insensitive substring
    output_mode: OutputMode = OutputMode.CONSOLE
    out_file: Optional[str] = None  # None = stdout; ignored in console mode
    is_org: bool = False


@dataclass(frozen=True)
class BranchRef:
    name: str


@dataclass(frozen=True)
class LicenseInfo:
    spdx_id: Optional[str] = None  # None when the host reports no SPDX match
    name: Optional[str] = None


def format_timestamp(value: datetime) -> str:
    """ISO-8601 in UTC with a trailing Z, e.g. 2024-03-01T12:00:00Z."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 instant; a trailing Z is accepted."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RepositoryDescriptor:
    """One repository as returned by the listing query."""

    name: str
    full_name: str
    visibility: Visibility
    url: str
    ssh_url: str
    created_at: datetime
    updated_at: datetime
    description: Optional[str] = None
    homepage_url: Optional[str] = None
    topics: tuple[str, ...] = field(default_factory=tuple)
    is_private: bool = False
    is_fork: bool = False
    archived: bool = False
    stargazer_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    default_branch: Optional[BranchRef] = None  # None for empty repositories
    license: Optional[LicenseInfo] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("repository name is empty")
        if self.is_private and self.visibility == Visibility.PUBLIC:
            raise ValueError(f"{self.full_name}: private repository with public visibility")
        if self.updated_at < self.created_at:
            raise ValueError(f"{self.full_name}: updatedAt is before createdAt")
        if min(self.stargazer_count, self.watchers_count, self.open_issues_count) < 0:
            raise ValueError(f"{self.full_name}: negative count")

    @property
    def owner(self) -> str:
        """Owner part of full_name ("octo/hello" -> "octo")."""
        return self.full_name.split("/", 1)[0]

    def to_dict(self) -> dict:
        """Lossless camelCase document, the shape used by the JSON output."""
        return {
            "name": self.name,
            "fullName": self.full_name,
            "description": self.description,
            "visibility": self.visibility.value,
            "isPrivate": self.is_private,
            "isFork": self.is_fork,
            "archived": self.archived,
            "url": self.url,
            "sshUrl": self.ssh_url,
            "homepageUrl": self.homepage_url,
            "createdAt": format_timestamp(self.created_at),
            "updatedAt": format_timestamp(self.updated_at),
            "stargazerCount": self.stargazer_count,
            "watchersCount": self.watchers_count,
            "openIssuesCount": self.open_issues_count,
            "defaultBranch": {"name": self.default_branch.name} if self.default_branch else None,
            "license": (
                {"spdxId": self.license.spdx_id, "name": self.license.name}
                if self.license
                else None
            ),
            "topics": list(self.topics),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RepositoryDescriptor":
        """Inverse of to_dict."""
        branch = data.get("defaultBranch")
        lic = data.get("license")
        return cls(
            name=data["name"],
            full_name=data["fullName"],
            description=data.get("description"),
            visibility=Visibility(data["visibility"]),
            is_private=bool(data.get("isPrivate", False)),
            is_fork=bool(data.get("isFork", False)),
            archived=bool(data.get("archived", False)),
            url=data["url"],
            ssh_url=data["sshUrl"],
            homepage_url=data.get("homepageUrl"),
            created_at=parse_timestamp(data["createdAt"]),
            updated_at=parse_timestamp(data["updatedAt"]),
            stargazer_count=int(data.get("stargazerCount", 0)),
            watchers_count=int(data.get("watchersCount", 0)),
            open_issues_count=int(data.get("openIssuesCount", 0)),
            default_branch=BranchRef(branch["name"]) if branch else None,
            license=LicenseInfo(spdx_id=lic.get("spdxId"), name=lic.get("name")) if lic else None,
            topics=tuple(data.get("topics") or ()),
        )
