"""Reference adapters for the fusion weighting port."""

from __future__ import annotations

from .weighting import (
    SourceTypeWeightingStrategy,
    apply_normalisation,
    effective_word_count,
    normalise_weights,
    quantity_factor,
    weigh_source,
    weigh_sources,
)

__all__ = [
    "SourceTypeWeightingStrategy",
    "apply_normalisation",
    "effective_word_count",
    "normalise_weights",
    "quantity_factor",
    "weigh_source",
    "weigh_sources",
]
