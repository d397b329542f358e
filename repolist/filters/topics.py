"""Stage: keep repositories with a topic containing the configured substring."""

from ..models import QueryConfiguration, RepositoryDescriptor

NAME = "topics"


def enabled(config: QueryConfiguration) -> bool:
    return config.topic_filter is not None


def keep(repo: RepositoryDescriptor, config: QueryConfiguration) -> bool:
    """Case-insensitive substring match against any topic. No topics never matches."""
    needle = (config.topic_filter or "").lower()
    return any(needle in topic.lower() for topic in repo.topics)


def gh_flags(config: QueryConfiguration) -> list[str]:
    # gh --topic is an exact match; substring matching only happens here
    return []
