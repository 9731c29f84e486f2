"""
Lethality determination rules.

Two independent signals are produced for every batch:
- the strict rule: any single shot at or above the threshold is lethal
- the statistical interpretation of the one-sample t-test on the mean

They can disagree (one hot shot in a cold batch) and are kept apart.
"""

from enum import Enum


# Significance level for the one-sample t-test
SIGNIFICANCE_LEVEL = 0.05


class Interpretation(str, Enum):
    """Categorical reading of the hypothesis test."""
    LETHAL_SIGNIFICANT = "Statistically Significant: Lethal (Reject H₀)"
    ABOVE_NOT_SIGNIFICANT = "Above Threshold but Not Statistically Significant"
    SAFE_SIGNIFICANT = "Statistically Significant: Safe/Non-Lethal"
    BELOW_WITHIN_MARGIN = "Below Threshold (Within Margin of Error)"
    INSUFFICIENT_DATA = "Insufficient data"


def interpret(mean_unit_energy: float, p_value: float, threshold: float) -> Interpretation:
    """
    Classify a test outcome with the fixed decision table.

    Rows are evaluated in order and the first match wins:

    | mean vs threshold | p-value | label                  |
    |-------------------|---------|------------------------|
    | mean > threshold  | < 0.05  | LETHAL_SIGNIFICANT     |
    | mean > threshold  | >= 0.05 | ABOVE_NOT_SIGNIFICANT  |
    | mean <= threshold | < 0.05  | SAFE_SIGNIFICANT       |
    | mean <= threshold | >= 0.05 | BELOW_WITHIN_MARGIN    |
    """
    significant = p_value < SIGNIFICANCE_LEVEL
    if mean_unit_energy > threshold:
        if significant:
            return Interpretation.LETHAL_SIGNIFICANT
        return Interpretation.ABOVE_NOT_SIGNIFICANT
    if significant:
        return Interpretation.SAFE_SIGNIFICANT
    return Interpretation.BELOW_WITHIN_MARGIN


def is_strictly_lethal(max_unit_energy: float, threshold: float) -> bool:
    """A batch is lethal if its hottest shot reaches the threshold (inclusive)."""
    return max_unit_energy >= threshold
