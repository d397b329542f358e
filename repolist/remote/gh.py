"""Run `gh repo list` and classify its failures."""

import logging
import shutil
import subprocess
from typing import Optional

from ..errors import FetchError

logger = logging.getLogger(__name__)

GH = "gh"

# Fields requested from `gh repo list --json`
GH_FIELDS = (
    "name",
    "nameWithOwner",
    "description",
    "visibility",
    "isPrivate",
    "isFork",
    "isArchived",
    "sshUrl",
    "url",
    "homepageUrl",
    "defaultBranchRef",
    "updatedAt",
    "createdAt",
    "stargazerCount",
    "watchers",
    "issues",
    "licenseInfo",
    "repositoryTopics",
)

# Lower-cased stderr fragments that mean "run gh auth login first"
AUTH_HINTS = ("gh auth login", "not logged", "authentication", "http 401", "bad credentials")


def build_argv(owner: str, limit: int, extra_flags: list[str]) -> list[str]:
    """argv for one listing query. extra_flags are the pushed-down filters."""
    return [
        GH, "repo", "list", owner,
        "--limit", str(limit),
        "--json", ",".join(GH_FIELDS),
        *extra_flags,
    ]


def _first_line(text: str) -> str:
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return "no error output"


def run_gh(argv: list[str], timeout: Optional[float] = None) -> str:
    """Run gh once and return stdout. No retry: failures are configuration problems."""
    if shutil.which(argv[0]) is None:
        raise FetchError("GitHub CLI (gh) not found. Install it from https://cli.github.com/")
    logger.debug("Running: %s", " ".join(argv))
    try:
        result = subprocess.run(
            argv,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
        )
    except FileNotFoundError:
        raise FetchError("GitHub CLI (gh) not found. Install it from https://cli.github.com/") from None
    except subprocess.TimeoutExpired:
        raise FetchError(f"gh repo list timed out after {timeout}s") from None
    if result.returncode != 0:
        stderr = result.stderr or ""
        logger.debug("gh exited %s, stderr: %s", result.returncode, stderr.strip())
        lowered = stderr.lower()
        if any(hint in lowered for hint in AUTH_HINTS):
            raise FetchError("not authenticated with GitHub. Run: gh auth login", stderr=stderr)
        raise FetchError(
            f"gh repo list failed (exit {result.returncode}): {_first_line(stderr)}",
            stderr=stderr,
        )
    logger.debug("gh returned %d bytes", len(result.stdout or ""))
    return result.stdout or ""
