"""Remote fetch — one `gh repo list` call, decoded into descriptors."""

import logging
from typing import Optional

from ..engine import query_flags
from ..models import QueryConfiguration, RepositoryDescriptor
from .decode import decode_repositories
from .gh import build_argv, run_gh

logger = logging.getLogger(__name__)


def fetch_repositories(
    config: QueryConfiguration, timeout: Optional[float] = None
) -> list[RepositoryDescriptor]:
    """List the owner's repositories with fork/source/visibility filters pushed to gh."""
    argv = build_argv(config.owner, config.limit, query_flags(config))
    repos = decode_repositories(run_gh(argv, timeout=timeout))
    if len(repos) > config.limit:
        logger.debug("gh returned %d repositories, capping to %d", len(repos), config.limit)
        repos = repos[: config.limit]
    logger.debug("Fetched %d repositories for %s", len(repos), config.owner)
    return repos


__all__ = ["fetch_repositories", "decode_repositories", "build_argv", "run_gh"]
