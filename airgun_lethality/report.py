"""
Analysis Report formatting for the Air Gun Lethality Analyzer.

Renders an AnalysisResult for display, including:
- Per-shot table (velocity, projectile, energy, unit-area energy)
- Descriptive statistics and 95% confidence interval
- One-sample t-test against the threshold
- Strict lethality verdict, kept separate from the statistical reading
- Multiple output formats (text, JSON, markdown)

An empty batch produces a report that withholds the verdict.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from .analysis import AnalysisResult
from .ballistics import velocity_for_unit_energy


# =============================================================================
# CONSTANTS
# =============================================================================

# Line widths for report formatting
REPORT_WIDTH = 65
SEPARATOR_CHAR = "="
SUB_SEPARATOR_CHAR = "-"

WITHHELD_MESSAGE = "No shots recorded. Verdict withheld."


@dataclass
class AnalysisReport:
    """
    Display wrapper around one analysis run.

    Attributes:
        result: The analysis run to render.
        title: Report heading.
    """
    result: AnalysisResult
    title: str = "KINETIC ENERGY ANALYSIS"

    @property
    def verdict_label(self) -> str:
        verdict = self.result.verdict
        if not verdict.has_verdict:
            return "WITHHELD"
        return "POTENTIALLY LETHAL" if verdict.is_lethal else "NON-LETHAL"

    @property
    def threshold_velocity(self) -> Optional[float]:
        """Velocity at which the batch's projectile reaches the threshold (uniform batches only)."""
        records = self.result.records
        if not records:
            return None
        projectiles = {(r.diameter_mm, r.weight_grams) for r in records}
        if len(projectiles) > 1:
            return None
        diameter_mm, weight_grams = projectiles.pop()
        return velocity_for_unit_energy(self.result.verdict.threshold, diameter_mm, weight_grams)

    # -------------------------------------------------------------------------
    # Text Output Format
    # -------------------------------------------------------------------------

    def to_text(self) -> str:
        """
        Generate human-readable analysis summary.

        Returns:
            Formatted text report.
        """
        verdict = self.result.verdict
        stats = verdict.stats
        test = verdict.test
        lines = []

        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append(self.title.center(REPORT_WIDTH))
        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append(f"Threshold: {verdict.threshold:g} J/cm²")
        lines.append("")

        if not verdict.has_verdict:
            lines.append(WITHHELD_MESSAGE)
            lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
            return "\n".join(lines)

        lines.append("SHOTS:")
        lines.append(f"  {'#':>3} {'v (m/s)':>9} {'d (mm)':>7} {'w (g)':>7} {'E (J)':>8} {'J/cm²':>8}")
        for r in self.result.records:
            flag = " *" if r.unit_area_energy >= verdict.threshold else ""
            lines.append(
                f"  {r.sequence_index:>3} {r.velocity:>9.1f} {r.diameter_mm:>7.2f} "
                f"{r.weight_grams:>7.3f} {r.energy_joules:>8.3f} {r.unit_area_energy:>8.2f}{flag}"
            )
        lines.append("")

        lines.append("STATISTICS:")
        lines.append(f"  {'Shots:':<22}{stats.count:>10}")
        lines.append(f"  {'Mean velocity:':<22}{stats.mean_velocity:>10.2f} m/s")
        lines.append(f"  {'Mean energy:':<22}{stats.mean_unit_energy:>10.2f} J/cm²")
        lines.append(f"  {'Std deviation:':<22}{stats.std_dev_unit_energy:>10.3f} J/cm²")
        lines.append(f"  {'Min / Max:':<22}{stats.min_unit_energy:>10.2f} / {stats.max_unit_energy:.2f} J/cm²")
        lines.append(
            f"  {'95% CI:':<22}[{verdict.interval.lower:.2f}, {verdict.interval.upper:.2f}] J/cm²"
        )
        threshold_velocity = self.threshold_velocity
        if threshold_velocity is not None:
            lines.append(f"  {'Threshold velocity:':<22}{threshold_velocity:>10.1f} m/s")
        lines.append("")

        lines.append("HYPOTHESIS TEST (H0: mean <= threshold):")
        lines.append(f"  {'t statistic:':<22}{test.t_statistic:>10.3f}")
        lines.append(f"  {'Degrees of freedom:':<22}{test.degrees_of_freedom:>10}")
        lines.append(f"  {'p-value:':<22}{test.p_value:>10.4f}")
        lines.append(f"  {'Reject H0:':<22}{'YES' if test.reject_null else 'NO':>10}")
        lines.append(f"  {test.interpretation.value}")
        lines.append("")

        lines.append(SUB_SEPARATOR_CHAR * REPORT_WIDTH)
        lines.append(f"VERDICT: {self.verdict_label}")
        lines.append(f"  {verdict.summary_line}")
        if verdict.statistics_disagree:
            lines.append("  Note: strict rule and t-test disagree; both are reported.")

        if self.result.report_text:
            lines.append("")
            lines.append(SUB_SEPARATOR_CHAR * REPORT_WIDTH)
            lines.append("APPRAISAL CONCLUSION:")
            lines.append(self.result.report_text)

        lines.append(SEPARATOR_CHAR * REPORT_WIDTH)
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # JSON Output Format
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Structured view of the run for serialization."""
        verdict = self.result.verdict
        stats = verdict.stats
        test = verdict.test
        return {
            "threshold": verdict.threshold,
            "has_verdict": verdict.has_verdict,
            "is_lethal": verdict.is_lethal,
            "threshold_velocity": self.threshold_velocity,
            "statistics_disagree": verdict.statistics_disagree,
            "shots": [
                {
                    "shot_id": r.shot_id,
                    "sequence_index": r.sequence_index,
                    "velocity": r.velocity,
                    "diameter_mm": r.diameter_mm,
                    "weight_grams": r.weight_grams,
                    "energy_joules": r.energy_joules,
                    "unit_area_energy": r.unit_area_energy,
                }
                for r in self.result.records
            ],
            "stats": {
                "count": stats.count,
                "mean_velocity": stats.mean_velocity,
                "mean_unit_energy": stats.mean_unit_energy,
                "std_dev_unit_energy": stats.std_dev_unit_energy,
                "min_unit_energy": stats.min_unit_energy,
                "max_unit_energy": stats.max_unit_energy,
            },
            "confidence_interval_95": [verdict.interval.lower, verdict.interval.upper],
            "test": {
                "t_statistic": test.t_statistic,
                "p_value": test.p_value,
                "degrees_of_freedom": test.degrees_of_freedom,
                "critical_value": test.critical_value,
                "reject_null": test.reject_null,
                "interpretation": test.interpretation.value,
            },
            "report_text": self.result.report_text,
            "status": self.result.status.value,
        }

    def to_json(self) -> str:
        """
        Generate structured JSON report.

        Returns:
            JSON string with complete analysis data.
        """
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    # -------------------------------------------------------------------------
    # Markdown Output Format
    # -------------------------------------------------------------------------

    def to_markdown(self) -> str:
        """
        Generate markdown-formatted report.

        Returns:
            Markdown string.
        """
        verdict = self.result.verdict
        stats = verdict.stats
        test = verdict.test
        lines = []

        lines.append(f"# {self.title.title()}")
        lines.append("")

        if not verdict.has_verdict:
            lines.append(WITHHELD_MESSAGE)
            return "\n".join(lines)

        lines.append("## Verdict")
        lines.append("")
        lines.append(f"- **Strict rule:** {self.verdict_label}")
        lines.append(f"- **Statistical reading:** {test.interpretation.value}")
        lines.append(f"- **Threshold:** {verdict.threshold:g} J/cm²")
        lines.append("")

        lines.append("## Shots")
        lines.append("")
        lines.append("| # | Velocity (m/s) | Diameter (mm) | Weight (g) | Energy (J) | J/cm² |")
        lines.append("|---|---|---|---|---|---|")
        for r in self.result.records:
            lines.append(
                f"| {r.sequence_index} | {r.velocity:.1f} | {r.diameter_mm:g} | "
                f"{r.weight_grams:g} | {r.energy_joules:.3f} | {r.unit_area_energy:.2f} |"
            )
        lines.append("")

        lines.append("## Statistics")
        lines.append("")
        lines.append(f"- **Shots:** {stats.count}")
        lines.append(f"- **Mean:** {stats.mean_unit_energy:.2f} J/cm²")
        lines.append(f"- **Std deviation:** {stats.std_dev_unit_energy:.3f} J/cm²")
        lines.append(f"- **Range:** {stats.min_unit_energy:.2f} to {stats.max_unit_energy:.2f} J/cm²")
        lines.append(
            f"- **95% CI:** [{verdict.interval.lower:.2f}, {verdict.interval.upper:.2f}] J/cm²"
        )
        lines.append(
            f"- **t-test:** t = {test.t_statistic:.3f}, df = {test.degrees_of_freedom}, "
            f"p = {test.p_value:.4f}"
        )

        if self.result.report_text:
            lines.append("")
            lines.append("## Appraisal Conclusion")
            lines.append("")
            lines.append(self.result.report_text)

        return "\n".join(lines)
