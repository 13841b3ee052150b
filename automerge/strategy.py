"""Merge strategy selection from ``auto-merge-method:<strategy>`` labels."""

import logging

from automerge.config import MarkerConfig
from automerge.models import MergeStrategy, PullRequest

logger = logging.getLogger(__name__)

DEFAULT_STRATEGY = MergeStrategy.MERGE_COMMIT

_STRATEGIES = {s.value: s for s in MergeStrategy}


def select_merge_strategy(pr: PullRequest, markers: MarkerConfig) -> MergeStrategy:
    """Return the strategy requested by the first strategy label.

    Later strategy labels are ignored. An unknown strategy name falls back to
    the default rather than raising.
    """
    label = next(
        (name for name in pr.labels if name.startswith(markers.strategy_label_prefix)),
        None,
    )
    if label is None or markers.strategy_separator not in label:
        return DEFAULT_STRATEGY

    requested = label.split(markers.strategy_separator)[1].lower()
    strategy = _STRATEGIES.get(requested)
    if strategy is None:
        logger.debug("Ignoring unknown merge strategy label %r", label)
        return DEFAULT_STRATEGY
    return strategy
