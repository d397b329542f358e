"""Stage: drop forks when include_forks is off."""

from ..models import QueryConfiguration, RepositoryDescriptor

NAME = "fork"


def enabled(config: QueryConfiguration) -> bool:
    return not config.include_forks


def keep(repo: RepositoryDescriptor, config: QueryConfiguration) -> bool:
    return not repo.is_fork


def gh_flags(config: QueryConfiguration) -> list[str]:
    """gh has no --no-forks; --source ("only non-forks") is the same predicate.

    Left to the source stage when source_only is also set.
    """
    if not enabled(config) or config.source_only:
        return []
    return ["--source"]
