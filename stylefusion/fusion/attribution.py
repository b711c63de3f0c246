"""Assemble merger breakdowns into the profile-visible attribution map."""

from __future__ import annotations

import typing as typ

from .domain import STYLE_ATTRIBUTES, AttributeAttribution

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import MergedAttribute


def assemble_attribution(
    results: cabc.Mapping[str, MergedAttribute[typ.Any]],
) -> dict[str, AttributeAttribution]:
    """Package merger results keyed by attribute name.

    Known style attributes come first in merge order; any extra attributes
    from custom mergers follow in the order they were supplied.

    Parameters
    ----------
    results : Mapping[str, MergedAttribute]
        Merger output keyed by attribute name.

    Returns
    -------
    dict[str, AttributeAttribution]
        Attribution entries carrying the merged value, the attribute-level
        contributions, and any per-term contributions.
    """
    ordered = [name for name in STYLE_ATTRIBUTES if name in results]
    ordered.extend(name for name in results if name not in STYLE_ATTRIBUTES)
    return {
        name: AttributeAttribution(
            value=results[name].value,
            sources=results[name].contributions,
            terms=dict(results[name].term_contributions),
        )
        for name in ordered
    }
