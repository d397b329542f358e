"""Stage: keep only repositories whose canonical owner is the queried account.

Excludes forks, and anything listed under the account whose full name points
at another owner.
"""

from ..models import QueryConfiguration, RepositoryDescriptor

NAME = "source"


def enabled(config: QueryConfiguration) -> bool:
    return config.source_only


def keep(repo: RepositoryDescriptor, config: QueryConfiguration) -> bool:
    return not repo.is_fork and repo.owner.lower() == config.owner.lower()


def gh_flags(config: QueryConfiguration) -> list[str]:
    return ["--source"] if enabled(config) else []
