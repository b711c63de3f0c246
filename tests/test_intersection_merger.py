"""Unit tests for the weighted avoidance intersection."""

from __future__ import annotations

from _fusion_helpers import make_assessment, make_weighted

from stylefusion.fusion.domain import Contribution
from stylefusion.fusion.mergers import WeightedIntersectionMerger


def test_majority_terms_survive_intersection() -> None:
    """A term listed by two of three sources is kept; singletons are not."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(make_assessment(avoidance=("emojis", "slang")), 0.5),
        make_weighted(
            make_assessment("free_text", avoidance=("emojis", "excessive-punctuation")),
            0.3,
        ),
        make_weighted(make_assessment("article", avoidance=("none",)), 0.2),
    ])

    assert merged.value == ("emojis",), f"Expected only emojis, got {merged.value!r}."
    assert merged.details["strategy"] == "intersection", (
        "Expected the primary pass to decide."
    )
    assert [item.source_type for item in merged.term_contributions["emojis"]] == [
        "correspondence",
        "free_text",
    ], "Expected emojis attributed to the two sources listing it."
    stats = merged.details["term_stats"]
    assert stats["emojis"] == {  # type: ignore[index]
        "count": 2,
        "total_weight": 0.8,
        "appearance_percentage": 66.7,
    }, f"Unexpected emojis stats: {stats!r}."


def test_sentinel_source_counts_towards_the_batch() -> None:
    """A term listed by one of two sources meets the 50% bar."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(make_assessment(avoidance=("emojis",)), 0.5),
        make_weighted(make_assessment("article", avoidance=("none",)), 0.5),
    ])

    assert merged.value == ("emojis",), "Expected half the batch to be enough."


def test_heavy_term_survives_weighted_fallback() -> None:
    """When no term reaches half the sources, a heavy one still qualifies."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(make_assessment(avoidance=("slang",)), 0.7),
        make_weighted(make_assessment("free_text", avoidance=("jargon",)), 0.1),
        make_weighted(make_assessment("article", avoidance=("emojis",)), 0.1),
        make_weighted(make_assessment("repository", avoidance=("hedging",)), 0.1),
    ])

    assert merged.value == ("slang",), f"Expected slang, got {merged.value!r}."
    assert merged.details["strategy"] == "weighted", "Expected the fallback pass."
    assert merged.contributions == (Contribution("correspondence", 100),), (
        "Expected slang attributed to its only source."
    )


def test_no_agreement_yields_sentinel_attributed_to_its_reporters() -> None:
    """Without agreement the result is none, credited to sources that said none."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(make_assessment(avoidance=("emojis",)), 0.4),
        make_weighted(make_assessment("free_text", avoidance=("slang",)), 0.3),
        make_weighted(make_assessment("article", avoidance=("None",)), 0.3),
    ])

    assert merged.value == ("none",), f"Expected the sentinel, got {merged.value!r}."
    assert merged.details["strategy"] == "none", "Expected the final fallback."
    assert merged.contributions == (Contribution("article", 100),), (
        "Expected the sentinel credited to the source that reported it."
    )


def test_sentinel_without_reporters_has_no_contributions() -> None:
    """A sentinel nobody reported carries no attribution."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(make_assessment(avoidance=("emojis",)), 0.4),
        make_weighted(make_assessment("article", avoidance=("slang",)), 0.3),
        make_weighted(make_assessment("free_text", avoidance=("jargon",)), 0.3),
    ])

    assert merged.value == ("none",), "Expected the sentinel."
    assert merged.contributions == (), "Expected no attribution for the sentinel."


def test_result_is_capped_at_three_terms() -> None:
    """At most three terms are returned, heaviest first."""
    merged = WeightedIntersectionMerger().merge([
        make_weighted(
            make_assessment(avoidance=("emojis", "slang", "jargon", "hedging")), 0.6
        ),
        make_weighted(make_assessment("article", avoidance=("hedging",)), 0.4),
    ])

    assert merged.value == ("hedging", "emojis", "slang"), (
        f"Unexpected ranking: {merged.value!r}."
    )


def test_empty_batch_returns_sentinel() -> None:
    """No sources yields the sentinel with no contributions."""
    merged = WeightedIntersectionMerger().merge([])

    assert merged.value == ("none",), "Expected the sentinel."
    assert merged.contributions == (), "Expected no contributions."
