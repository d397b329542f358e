"""Filter engine — runs the stages over fetched descriptors and builds gh pushdown flags."""

import logging
from typing import Sequence

from .filters import STAGES
from .models import QueryConfiguration, RepositoryDescriptor

logger = logging.getLogger(__name__)


def query_flags(config: QueryConfiguration) -> list[str]:
    """gh repo list flags for every stage that can filter server-side, in stage order."""
    flags: list[str] = []
    for stage in STAGES:
        if stage.enabled(config):
            flags.extend(stage.gh_flags(config))
    return flags


def run_filters(
    repos: Sequence[RepositoryDescriptor], config: QueryConfiguration
) -> list[RepositoryDescriptor]:
    """Apply enabled stages in order. Keeps relative order; running twice changes nothing.

    Visibility, fork and source stages are normally already satisfied by the
    query flags; they run again here so results do not depend on gh honoring them.
    """
    kept = list(repos)
    for stage in STAGES:
        if not stage.enabled(config):
            continue
        before = len(kept)
        kept = [r for r in kept if stage.keep(r, config)]
        if len(kept) != before:
            logger.debug("Filter %s dropped %d of %d", stage.NAME, before - len(kept), before)
    return kept
