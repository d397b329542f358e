"""Filter stages, applied by engine.run_filters in STAGES order."""

from . import fork, source, topics, visibility

STAGES = (topics, visibility, fork, source)

__all__ = ["STAGES", "topics", "visibility", "fork", "source"]
