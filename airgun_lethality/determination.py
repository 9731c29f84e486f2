#!/usr/bin/env python3
"""
Determination Policy for the Air Gun Lethality Analyzer

Combines the per-shot ballistics and the statistical engine into a
final Verdict for one batch of shots:
- is_lethal: strict rule, max unit-area energy >= threshold
- stats / interval / test: the statistical picture of the batch

The strict rule overrides nothing and is overridden by nothing; a
single shot at the threshold marks the batch lethal even when the mean
and the t-test say otherwise. Consumers get both signals.

Data flow:
    ShotInput -> build_shot_records -> describe -> confidence_interval_95
              -> one_sample_t_test -> Verdict
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple

from .ballistics import LETHALITY_THRESHOLD, ShotInput, ShotRecord, build_shot_records
from .policy import Interpretation, is_strictly_lethal
from .stats import (
    ConfidenceInterval,
    DescriptiveStats,
    HypothesisTestResult,
    confidence_interval_95,
    describe,
    one_sample_t_test,
)


@dataclass(frozen=True)
class Verdict:
    """
    Lethality determination for one batch of shots.

    Attributes:
        is_lethal: Strict rule result (any shot >= threshold)
        stats: Descriptive statistics of the batch
        interval: 95% confidence interval of the mean unit-area energy
        test: One-sample t-test against the threshold
        threshold: Threshold the batch was judged against (J/cm^2)
    """
    is_lethal: bool
    stats: DescriptiveStats
    interval: ConfidenceInterval
    test: HypothesisTestResult
    threshold: float = LETHALITY_THRESHOLD

    @property
    def has_verdict(self) -> bool:
        """False for an empty batch; no conclusion may be presented."""
        return self.stats.count > 0

    @property
    def statistically_lethal(self) -> bool:
        """The t-test alone supports lethality."""
        return self.test.interpretation is Interpretation.LETHAL_SIGNIFICANT

    @property
    def statistics_disagree(self) -> bool:
        """Strict rule and statistical reading point in different directions."""
        if not self.has_verdict:
            return False
        return self.is_lethal != self.statistically_lethal

    @property
    def summary_line(self) -> str:
        """Short status line for display."""
        if not self.has_verdict:
            return "No shots recorded; verdict withheld"
        if self.is_lethal:
            return (
                f"LETHAL: max {self.stats.max_unit_energy:.2f} J/cm² "
                f">= {self.threshold:g} J/cm²"
            )
        return (
            f"NON-LETHAL: max {self.stats.max_unit_energy:.2f} J/cm² "
            f"< {self.threshold:g} J/cm²"
        )


def determine(
    records: Sequence[ShotRecord],
    threshold: float = LETHALITY_THRESHOLD
) -> Verdict:
    """
    Run the statistical engine and the policy over a complete batch.

    Args:
        records: Every shot record of the batch
        threshold: Lethality threshold (J/cm^2)

    Returns:
        Verdict; for an empty batch is_lethal is False and has_verdict is False
    """
    stats = describe(records)
    if stats.count == 0:
        return Verdict(
            is_lethal=False,
            stats=stats,
            interval=ConfidenceInterval(0.0, 0.0),
            test=HypothesisTestResult.insufficient(),
            threshold=threshold,
        )

    interval = confidence_interval_95(
        stats.mean_unit_energy, stats.std_dev_unit_energy, stats.count
    )
    test = one_sample_t_test(
        stats.mean_unit_energy, stats.std_dev_unit_energy, stats.count, threshold
    )
    return Verdict(
        is_lethal=is_strictly_lethal(stats.max_unit_energy, threshold),
        stats=stats,
        interval=interval,
        test=test,
        threshold=threshold,
    )


def analyze_shots(
    inputs: Iterable[ShotInput],
    threshold: float = LETHALITY_THRESHOLD
) -> Tuple[Tuple[ShotRecord, ...], Verdict]:
    """
    Validate inputs, derive records and determine the verdict.

    Raises:
        InvalidInputError: If any shot has a non-positive or non-finite field
    """
    records = build_shot_records(inputs)
    return records, determine(records, threshold)
