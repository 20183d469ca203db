"""Dimension merging for signalfx-metrics.

Builds the label set of one metric (or one item of a metric) from three
inputs, in increasing precedence:

1. the configured default dimensions,
2. the resolved source, always under the ``source`` key,
3. ``key=value`` item labels, in order; later labels win.

Item labels that are not of the form ``key=value`` are free-form tags and
never become dimensions.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from signalfx_metrics.constants import SOURCE_DIMENSION
from signalfx_metrics.schema.errors import ConfigurationError


def parse_item_label(label: str) -> tuple[str, str] | None:
    """Split ``"key=value"`` on the first ``=``.

    Returns ``None`` for labels without ``=`` or with an empty key.

    Examples
    --------
    >>> parse_item_label("api_type=login")
    ('api_type', 'login')
    >>> parse_item_label("badlabel") is None
    True
    """
    key, sep, value = label.partition("=")
    if not sep or not key:
        return None
    return key, value


def merge_dimensions(
    default_dimensions: Mapping[str, str],
    source: str,
    item_labels: Iterable[str] = (),
) -> dict[str, str]:
    """Return a fresh label set for one metric.

    Parameters
    ----------
    default_dimensions:
        Static dimensions shared by every datapoint.  May be empty.
    source:
        Resolved source name.  Must be non-empty.
    item_labels:
        Ordered ``key=value`` strings.  Malformed entries are skipped.

    Raises
    ------
    ConfigurationError
        If *source* is empty.
    """
    if not source:
        raise ConfigurationError(
            "A non-empty source is required to build dimensions.",
            context={"source": source},
        )
    dimensions = dict(default_dimensions)
    dimensions[SOURCE_DIMENSION] = source
    for label in item_labels:
        parsed = parse_item_label(label)
        if parsed is None:
            continue
        key, value = parsed
        if key == SOURCE_DIMENSION and not value:
            continue
        dimensions[key] = value
    return dimensions
