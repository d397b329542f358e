"""Stage: keep repositories with the configured visibility."""

from ..models import QueryConfiguration, RepositoryDescriptor

NAME = "visibility"


def enabled(config: QueryConfiguration) -> bool:
    return config.visibility is not None


def keep(repo: RepositoryDescriptor, config: QueryConfiguration) -> bool:
    return repo.visibility == config.visibility


def gh_flags(config: QueryConfiguration) -> list[str]:
    if not enabled(config):
        return []
    return ["--visibility", config.visibility.value]
