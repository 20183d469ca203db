"""Unit tests for signalfx_metrics.pipeline.dimensions."""
from __future__ import annotations

import pytest

from signalfx_metrics.pipeline.dimensions import merge_dimensions, parse_item_label
from signalfx_metrics.schema.errors import ConfigurationError


# ---------------------------------------------------------------------------
# parse_item_label
# ---------------------------------------------------------------------------


class TestParseItemLabel:
    def test_key_value_pair(self) -> None:
        assert parse_item_label("api_type=login") == ("api_type", "login")

    def test_splits_on_first_equals_only(self) -> None:
        assert parse_item_label("query=a=b") == ("query", "a=b")

    def test_empty_value_is_allowed(self) -> None:
        assert parse_item_label("flag=") == ("flag", "")

    def test_missing_equals_returns_none(self) -> None:
        assert parse_item_label("badlabel") is None

    def test_empty_key_returns_none(self) -> None:
        assert parse_item_label("=value") is None


# ---------------------------------------------------------------------------
# merge_dimensions
# ---------------------------------------------------------------------------


class TestMergeDimensions:
    def test_source_always_present(self) -> None:
        assert merge_dimensions({}, "host1") == {"source": "host1"}

    def test_defaults_and_source_combined(self) -> None:
        dims = merge_dimensions({"environment": "prod"}, "host1")
        assert dims == {"environment": "prod", "source": "host1"}

    def test_source_overrides_default_dimension(self) -> None:
        dims = merge_dimensions({"source": "stale"}, "host1")
        assert dims["source"] == "host1"

    def test_item_labels_override_defaults(self) -> None:
        dims = merge_dimensions({"environment": "prod"}, "host1", ["environment=qa"])
        assert dims["environment"] == "qa"

    def test_later_item_labels_win(self) -> None:
        dims = merge_dimensions({}, "host1", ["tier=a", "tier=b"])
        assert dims["tier"] == "b"

    def test_valid_and_malformed_item_labels(self) -> None:
        dims = merge_dimensions({}, "host1", ["api_type=login", "badlabel"])
        assert dims == {"source": "host1", "api_type": "login"}
        assert "badlabel" not in dims

    def test_empty_key_label_is_dropped(self) -> None:
        dims = merge_dimensions({}, "host1", ["=orphan"])
        assert dims == {"source": "host1"}

    def test_empty_source_label_cannot_blank_the_source(self) -> None:
        dims = merge_dimensions({}, "host1", ["source="])
        assert dims["source"] == "host1"

    def test_defaults_are_not_mutated(self) -> None:
        defaults = {"environment": "prod"}
        merge_dimensions(defaults, "host1", ["region=eu"])
        assert defaults == {"environment": "prod"}

    def test_each_call_returns_a_new_dict(self) -> None:
        first = merge_dimensions({}, "host1")
        second = merge_dimensions({}, "host1")
        assert first == second
        assert first is not second

    def test_empty_source_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="source"):
            merge_dimensions({}, "")

    @pytest.mark.parametrize(
        "labels",
        [["nokey"], ["a", "b=c", "d"], ["=x", "y"], ["one two", "x=1"]],
    )
    def test_labels_without_equals_never_become_keys(self, labels: list[str]) -> None:
        dims = merge_dimensions({"k": "v"}, "src", labels)
        for label in labels:
            if "=" not in label:
                assert label not in dims
        assert dims["source"] == "src"
