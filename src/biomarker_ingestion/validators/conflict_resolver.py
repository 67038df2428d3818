# ============================================================================
# FILE: src/biomarker_ingestion/validators/conflict_resolver.py
# ============================================================================
"""
Conflict Resolver

When several documents report the same measurement, keep one.

Strategies, in order:
1. Severity (concerning > suboptimal > optimal)
2. Distance of the value from its own range midpoint (larger wins)
3. Otherwise keep the record seen first

Names are matched exactly. The merged list keeps the position at which a
name was first seen, even when a later record replaces it.
"""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from ..core.context import MeasurementRecord


logger = logging.getLogger(__name__)


class ConflictResolution(Enum):
    """Possible outcomes when an incoming record meets a kept one"""
    KEEP_EXISTING = "keep_existing"
    REPLACE_BY_SEVERITY = "replace_by_severity"
    REPLACE_BY_DISTANCE = "replace_by_distance"


class ConflictResolver:
    """
    Merge measurement lists from multiple documents.

    Pure: the same ordered input always gives the same output, and input
    records are never modified.
    """

    def resolve(
        self,
        existing: MeasurementRecord,
        incoming: MeasurementRecord
    ) -> Tuple[ConflictResolution, str]:
        """
        Decide between two records with the same name.

        Returns:
            (resolution_decision, reasoning)
        """
        if incoming.status.severity > existing.status.severity:
            return (
                ConflictResolution.REPLACE_BY_SEVERITY,
                f"{incoming.status.value} outranks {existing.status.value}"
            )

        if incoming.status.severity < existing.status.severity:
            return (
                ConflictResolution.KEEP_EXISTING,
                f"{existing.status.value} outranks {incoming.status.value}"
            )

        existing_distance = existing.distance_from_midpoint()
        incoming_distance = incoming.distance_from_midpoint()

        if incoming_distance > existing_distance:
            return (
                ConflictResolution.REPLACE_BY_DISTANCE,
                f"Same status, farther from range midpoint "
                f"({incoming_distance:.4g} > {existing_distance:.4g})"
            )

        return (
            ConflictResolution.KEEP_EXISTING,
            "Same status, not farther from range midpoint"
        )

    def merge(
        self,
        documents: Iterable[Sequence[MeasurementRecord]]
    ) -> List[MeasurementRecord]:
        """
        Merge per-document measurement lists.

        Args:
            documents: One list per source document, in upload order

        Returns:
            Deduplicated list, first-seen name order
        """
        kept: Dict[str, MeasurementRecord] = {}
        replaced = 0

        for measurements in documents:
            for incoming in measurements:
                existing = kept.get(incoming.name)

                if existing is None:
                    kept[incoming.name] = incoming
                    continue

                resolution, reasoning = self.resolve(existing, incoming)
                if resolution is not ConflictResolution.KEEP_EXISTING:
                    logger.debug(f"{incoming.name}: {reasoning}")
                    # assignment to an existing key keeps its position
                    kept[incoming.name] = incoming
                    replaced += 1

        if replaced:
            logger.info(f"Merged {len(kept)} measurements ({replaced} duplicates replaced)")

        return list(kept.values())


def merge_measurements(
    documents: Iterable[Sequence[MeasurementRecord]]
) -> List[MeasurementRecord]:
    """
    Convenience function to merge measurement lists from multiple documents.

    Never fails; no documents gives an empty list.
    """
    return ConflictResolver().merge(documents)
