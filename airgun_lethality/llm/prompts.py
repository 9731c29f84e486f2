"""
Prompts for the forensic report generator.

The prompt carries the legal standard, the projectile specification
(or the list of distinct values when ammunition was mixed), the raw
per-shot energies and the hypothesis test, and asks for a short formal
appraisal conclusion.
"""

from typing import List, Optional, Sequence

from ..ballistics import ProjectileParams, ShotRecord
from ..determination import Verdict


FORENSIC_SYSTEM_PROMPT = """
You are a professional Forensic Ballistics Expert (Witness for the Court).
Write in a formal, objective, and authoritative tone suitable for a legal report.
"""

FORENSIC_REPORT_PROMPT = """
Task: Write a formal "Conclusion of Appraisal" (鑑定結論) regarding the potential lethality of an air gun based on the provided test data.

Legal Standard: An air gun is considered to have "potential lethality" (具有殺傷力) if the kinetic energy per unit area of the metal projectile exceeds {threshold:g} J/cm².

{ammunition_section}

Test Results (Kinetic Energy per Unit Area):
- Raw Data:
{shot_lines}

- Sample Size: {count}
- Mean: {mean:.2f} J/cm²
- Max: {max:.2f} J/cm²
- Standard Deviation: {std_dev:.3f}
- 95% Confidence Interval: [{ci_lower:.2f}, {ci_upper:.2f}] J/cm²

Statistical Hypothesis Test (One-Sample t-Test against {threshold:g} J/cm²):
- T-Statistic: {t_statistic:.3f}
- Degrees of Freedom: {df}
- P-Value: {p_value:.4f}
- Conclusion: {interpretation}
- Reject Null Hypothesis (H0: <= {threshold:g}): {reject_null}

Strict Rule Result: {strict_result}

Instructions:
1. Explicitly compare the test results (Mean and Max) against the statutory standard of {threshold:g} J/cm².
2. Include a dedicated section discussing the **Statistical Significance** of the findings. Mention the t-test results to support whether the data proves the gun is lethal or non-lethal with 95% confidence.
3. If ANY shot exceeds {threshold:g} J/cm², the conclusion MUST state the gun is capable of inflicting injury ("Potentially Lethal").
4. If all shots are well below {threshold:g} J/cm², state it is non-lethal.
5. Keep it concise (under 200 words).
6. Use standard Markdown for formatting.
"""


def _distinct_sorted(values: Sequence[float]) -> List[float]:
    return sorted(set(values))


def _format_values(values: Sequence[float]) -> str:
    return ", ".join(f"{v:g}" for v in values)


def is_mixed_ammunition(records: Sequence[ShotRecord]) -> bool:
    """True when weights or diameters vary across the batch."""
    weights = {r.weight_grams for r in records}
    diameters = {r.diameter_mm for r in records}
    return len(weights) > 1 or len(diameters) > 1


def describe_ammunition(
    records: Sequence[ShotRecord],
    params: Optional[ProjectileParams] = None,
) -> str:
    """
    Build the test-parameter section of the prompt.

    Mixed batches enumerate every distinct weight and diameter. A uniform
    batch states the single projectile it was fired with; params is used
    only when there are no records to read the specification from.
    """
    if is_mixed_ammunition(records):
        weights = _distinct_sorted([r.weight_grams for r in records])
        diameters = _distinct_sorted([r.diameter_mm for r in records])
        return "\n".join([
            "Test Parameters: Mixed Ammunition Used",
            f"- Projectile Weights: {_format_values(weights)} g",
            f"- Projectile Diameters: {_format_values(diameters)} mm",
        ])

    if records:
        diameter_mm = records[0].diameter_mm
        weight_grams = records[0].weight_grams
    elif params is not None:
        diameter_mm = params.diameter_mm
        weight_grams = params.weight_grams
    else:
        return "Test Parameters: not recorded"

    return "\n".join([
        "Test Parameters:",
        f"- Projectile Diameter: {diameter_mm:g} mm",
        f"- Projectile Weight: {weight_grams:g} g",
    ])


def format_shot_lines(records: Sequence[ShotRecord]) -> str:
    """One line per shot: weight, diameter and unit-area energy."""
    return "\n".join(
        f"  Shot {r.sequence_index} ({r.weight_grams:g}g, {r.diameter_mm:g}mm): "
        f"{r.unit_area_energy:.2f} J/cm²"
        for r in records
    )


def build_forensic_prompt(
    verdict: Verdict,
    params: Optional[ProjectileParams],
    records: Sequence[ShotRecord],
) -> str:
    """
    Build the user prompt for the appraisal conclusion.

    Args:
        verdict: Determination for the batch
        params: Projectile parameters set by the operator
        records: Shot records the verdict was computed from

    Returns:
        Complete prompt string
    """
    stats = verdict.stats
    test = verdict.test
    threshold = verdict.threshold
    strict_result = (
        f"At least one shot reached {threshold:g} J/cm² (Potentially Lethal)"
        if verdict.is_lethal
        else f"No shot reached {threshold:g} J/cm²"
    )

    return FORENSIC_REPORT_PROMPT.format(
        threshold=threshold,
        ammunition_section=describe_ammunition(records, params),
        shot_lines=format_shot_lines(records),
        count=stats.count,
        mean=stats.mean_unit_energy,
        max=stats.max_unit_energy,
        std_dev=stats.std_dev_unit_energy,
        ci_lower=verdict.interval.lower,
        ci_upper=verdict.interval.upper,
        t_statistic=test.t_statistic,
        df=test.degrees_of_freedom,
        p_value=test.p_value,
        interpretation=test.interpretation.value,
        reject_null="YES" if test.reject_null else "NO",
        strict_result=strict_result,
    )
