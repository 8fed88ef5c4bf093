from __future__ import annotations

import math
import random

import pytest

from models.errors import InvalidArgument
from services.ranking import ZERO_TOTAL_PERCENTAGE, breakdown, top_n


@pytest.mark.parametrize("seed", range(20))
def test_breakdown_percentages_sum_to_hundred(seed: int) -> None:
    rng = random.Random(seed)
    bucket = {f"key-{i}": rng.uniform(0.0, 50.0) for i in range(rng.randint(1, 12))}
    bucket["key-0"] += 0.01

    entries = breakdown(bucket)

    assert math.fsum(entry.percentage for entry in entries) == pytest.approx(100.0, abs=1e-6)
    assert all(entry.percentage >= 0 for entry in entries)


def test_breakdown_with_zero_total_yields_zero_percentages() -> None:
    entries = breakdown({"computer": 0.0, "monitor": 0.0})

    assert [entry.percentage for entry in entries] == [ZERO_TOTAL_PERCENTAGE, ZERO_TOTAL_PERCENTAGE]
    assert all(not math.isnan(entry.percentage) for entry in entries)


def test_breakdown_of_empty_bucket_is_empty() -> None:
    assert breakdown({}) == []


def test_breakdown_uses_supplied_grand_total() -> None:
    entries = breakdown({"a": 5.0}, grand_total=20.0)

    assert entries[0].percentage == 25.0


def test_top_n_sorts_descending_with_key_tiebreak() -> None:
    bucket = {"b": 5.0, "a": 5.0, "c": 10.0, "d": 1.0}

    ranked = top_n(bucket, 3)

    assert [entry.key for entry in ranked] == ["c", "a", "b"]
    assert ranked[0].percentage == pytest.approx(10.0 / 21.0 * 100)


def test_top_n_keeps_percentages_of_full_total() -> None:
    ranked = top_n({"a": 3.0, "b": 1.0}, 1)

    assert len(ranked) == 1
    assert ranked[0].percentage == 75.0


def test_top_n_leaves_input_untouched() -> None:
    bucket = {"z": 1.0, "a": 2.0}
    snapshot = list(bucket.items())

    top_n(bucket, 1)

    assert list(bucket.items()) == snapshot


def test_top_n_rejects_negative_limit() -> None:
    with pytest.raises(InvalidArgument):
        top_n({"a": 1.0}, -1)
