"""Port protocols for the fusion pipeline.

Weighting and attribute merging are the two extension points of the engine.
Adapters implement these protocols so a strategy can be swapped without
touching the orchestration in ``stylefusion.fusion.service``.

Examples
--------
Implement a custom merger that satisfies the protocol:

>>> class FirstSourceToneMerger:
...     attribute = "tone"
...
...     def merge(self, sources):
...         ...
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .domain import MergedAttribute, SourceAssessment, WeightedSource


class WeightingStrategy(typ.Protocol):
    """Computes normalised weights for validated assessments.

    Methods
    -------
    compute_weights(assessments)
        Weigh and normalise a batch of assessments.
    """

    async def compute_weights(
        self,
        assessments: cabc.Sequence[SourceAssessment],
    ) -> list[WeightedSource]:
        """Weigh and normalise a batch of assessments.

        Parameters
        ----------
        assessments : Sequence[SourceAssessment]
            Validated assessments.

        Returns
        -------
        list[WeightedSource]
            Weighted sources in input order whose normalised weights sum
            to 1.0.
        """
        ...


class AttributeMerger(typ.Protocol):
    """Merges one style attribute across weighted sources.

    Implementations must be pure: the result depends only on the weighted
    sources passed in, so mergers can run concurrently over one snapshot.

    Attributes
    ----------
    attribute : str
        Name of the assessment field the merger reads.

    Methods
    -------
    merge(sources)
        Produce the merged value and its contribution breakdown.
    """

    attribute: str

    def merge(
        self,
        sources: cabc.Sequence[WeightedSource],
    ) -> MergedAttribute[typ.Any]:
        """Merge the attribute across ``sources``.

        Parameters
        ----------
        sources : Sequence[WeightedSource]
            Weighted sources sharing one normalised-weight snapshot.

        Returns
        -------
        MergedAttribute
            Merged value, contributions, warnings, and diagnostics.
        """
        ...
