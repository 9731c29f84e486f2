#!/usr/bin/env python3
"""
Statistical Engine for the Air Gun Lethality Analyzer

Implements, without a statistics library:
- Descriptive statistics over a batch of shot records
- 95% confidence interval for the mean unit-area energy
- One-sample Student's t-test against the lethality threshold
- The special-function machinery behind the test:
  - Gamma function (Lanczos approximation, g=7, 9 coefficients)
  - Student's t probability density
  - Simpson's rule integration for the tail probability

Hypotheses:
- H0: population mean unit-area energy <= threshold
- H1: population mean unit-area energy > threshold

The reported p-value is the tail probability P(T > |t|) of the observed
deviation, whichever side of the threshold the sample mean falls on.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

from .ballistics import ShotRecord
from .policy import SIGNIFICANCE_LEVEL, Interpretation, interpret


# =============================================================================
# CONSTANTS
# =============================================================================

# Lanczos approximation parameters (g=7, n=9)
LANCZOS_G = 7
LANCZOS_COEFFICIENTS = (
    0.99999999999980993,
    676.5203681218851,
    -1259.1392167224028,
    771.32342877765313,
    -176.61502916214059,
    12.507343278686905,
    -0.13857109526572012,
    9.9843695780195716e-6,
    1.5056327351493116e-7,
)

# Simpson's rule subintervals for the t-distribution tail
SIMPSON_INTERVALS = 1000

# Large-sample z critical value (two-tailed, 95%)
Z_CRITICAL_95 = 1.96

# Small-sample correction numerator for the t critical value approximation
T_CRITICAL_CORRECTION = 2.4

# P-value when no test can be performed (df <= 0)
INCONCLUSIVE_P_VALUE = 0.5


# =============================================================================
# SPECIAL FUNCTIONS
# =============================================================================

def gamma(z: float) -> float:
    """
    Gamma function via the Lanczos approximation.

    Uses the reflection formula Gamma(z) = pi / (sin(pi z) * Gamma(1 - z))
    for z < 0.5.

    Args:
        z: Real argument (not a non-positive integer)

    Returns:
        Gamma(z)
    """
    if z < 0.5:
        return math.pi / (math.sin(math.pi * z) * gamma(1.0 - z))

    z -= 1.0
    x = _lanczos_series(z)
    t = z + LANCZOS_G + 0.5
    try:
        return math.sqrt(2.0 * math.pi) * t ** (z + 0.5) * math.exp(-t) * x
    except OverflowError:
        return math.inf


def log_gamma(z: float) -> float:
    """
    Natural log of Gamma(z) for z >= 0.5, same Lanczos series as gamma().

    Stays finite where gamma() itself overflows (z above ~171).
    """
    z -= 1.0
    x = _lanczos_series(z)
    t = z + LANCZOS_G + 0.5
    return 0.5 * math.log(2.0 * math.pi) + (z + 0.5) * math.log(t) - t + math.log(x)


def _lanczos_series(z: float) -> float:
    x = LANCZOS_COEFFICIENTS[0]
    for i in range(1, len(LANCZOS_COEFFICIENTS)):
        x += LANCZOS_COEFFICIENTS[i] / (z + i)
    return x


def student_t_pdf(t: float, df: float) -> float:
    """
    Probability density of Student's t-distribution.

    f(t) = Gamma((df+1)/2) / (sqrt(df*pi) * Gamma(df/2)) * (1 + t^2/df)^(-(df+1)/2)

    The Gamma ratio is taken in log space so large samples do not overflow.

    Args:
        t: Point at which to evaluate the density
        df: Degrees of freedom (> 0)

    Returns:
        Density at t
    """
    return _t_density(df)(t)


def _t_density(df: float) -> Callable[[float], float]:
    """Student t density for fixed df, with the Gamma normalizer computed once."""
    gamma_ratio = math.exp(log_gamma((df + 1.0) / 2.0) - log_gamma(df / 2.0))
    normalizer = gamma_ratio / math.sqrt(df * math.pi)
    power = -(df + 1.0) / 2.0

    def density(t: float) -> float:
        return normalizer * (1.0 + (t * t) / df) ** power

    return density


def simpson_integrate(
    func: Callable[[float], float],
    lower: float,
    upper: float,
    intervals: int = SIMPSON_INTERVALS
) -> float:
    """
    Composite Simpson's rule.

    Args:
        func: Integrand
        lower: Lower limit
        upper: Upper limit
        intervals: Number of subintervals (must be even and positive)

    Returns:
        Approximation of the integral of func from lower to upper
    """
    if intervals <= 0 or intervals % 2:
        raise ValueError(f"Simpson's rule needs an even number of intervals, got {intervals}")

    h = (upper - lower) / intervals
    total = func(lower) + func(upper)
    for i in range(1, intervals, 2):
        total += 4.0 * func(lower + i * h)
    for i in range(2, intervals - 1, 2):
        total += 2.0 * func(lower + i * h)
    return (h / 3.0) * total


def t_tail_probability(t_statistic: float, df: float) -> float:
    """
    One-tailed probability P(T > |t|) for Student's t with df degrees of freedom.

    By symmetry the area right of zero is exactly 0.5, so the tail is
    0.5 minus the integral of the density from 0 to |t|. The result is
    clamped to [0, 0.5] to absorb integration overshoot.

    Args:
        t_statistic: Observed t statistic (sign is ignored)
        df: Degrees of freedom

    Returns:
        Tail probability in [0, 0.5]; 0.5 when df <= 0
    """
    if df <= 0:
        return INCONCLUSIVE_P_VALUE

    abs_t = abs(t_statistic)
    integral = simpson_integrate(_t_density(df), 0.0, abs_t)
    p_tail = 0.5 - integral
    return min(max(p_tail, 0.0), 0.5)


def t_critical_95(df: int) -> float:
    """
    Approximate two-tailed 95% critical t value.

    Closed form 1.96 + 2.4/df, converging on the z value as df grows and
    slightly wider than the exact value for small samples.
    """
    if df > 0:
        return Z_CRITICAL_95 + T_CRITICAL_CORRECTION / df
    return Z_CRITICAL_95


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass(frozen=True)
class DescriptiveStats:
    """
    Summary of a batch of shots.

    Attributes:
        count: Number of shots in the batch
        mean_velocity: Mean muzzle velocity (m/s)
        mean_unit_energy: Mean unit-area energy (J/cm^2)
        std_dev_unit_energy: Sample standard deviation (n-1) of unit-area energy
        min_unit_energy: Lowest unit-area energy
        max_unit_energy: Highest unit-area energy
    """
    count: int
    mean_velocity: float
    mean_unit_energy: float
    std_dev_unit_energy: float
    min_unit_energy: float
    max_unit_energy: float

    @classmethod
    def empty(cls) -> DescriptiveStats:
        """Neutral defaults for an empty batch."""
        return cls(0, 0.0, 0.0, 0.0, 0.0, 0.0)

    @property
    def standard_error(self) -> float:
        """Standard error of the mean unit-area energy."""
        if self.count == 0:
            return 0.0
        return self.std_dev_unit_energy / math.sqrt(self.count)

    @property
    def coefficient_of_variation(self) -> float:
        """Relative spread of unit-area energy (std dev / mean)."""
        if self.mean_unit_energy == 0:
            return 0.0
        return self.std_dev_unit_energy / self.mean_unit_energy


@dataclass(frozen=True)
class ConfidenceInterval:
    """Bounds on the population mean unit-area energy (95%)."""
    lower: float
    upper: float

    def __iter__(self) -> Iterator[float]:
        yield self.lower
        yield self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class HypothesisTestResult:
    """
    Outcome of the one-sample t-test against the threshold.

    Attributes:
        t_statistic: (mean - threshold) / standard error, 0 when SE is 0
        p_value: One-tailed tail probability of |t|, in [0, 0.5]
        degrees_of_freedom: n - 1
        critical_value: Critical t used for the confidence interval
        reject_null: True when p_value < 0.05
        interpretation: Decision-table label
    """
    t_statistic: float
    p_value: float
    degrees_of_freedom: int
    critical_value: float
    reject_null: bool
    interpretation: Interpretation

    @classmethod
    def insufficient(cls) -> HypothesisTestResult:
        """Placeholder result when there is nothing to test."""
        return cls(
            t_statistic=0.0,
            p_value=INCONCLUSIVE_P_VALUE,
            degrees_of_freedom=0,
            critical_value=0.0,
            reject_null=False,
            interpretation=Interpretation.INSUFFICIENT_DATA,
        )


# =============================================================================
# ENGINE OPERATIONS
# =============================================================================

def describe(records: Sequence[ShotRecord]) -> DescriptiveStats:
    """
    Descriptive statistics of a batch of shot records.

    The standard deviation uses the n-1 divisor, falling back to 1 for a
    single shot (which has zero deviation from its own mean).

    Args:
        records: Shot records of the batch

    Returns:
        DescriptiveStats; neutral defaults for an empty batch
    """
    n = len(records)
    if n == 0:
        return DescriptiveStats.empty()

    energies = [r.unit_area_energy for r in records]
    mean_velocity = math.fsum(r.velocity for r in records) / n
    min_energy = min(energies)
    max_energy = max(energies)

    if min_energy == max_energy:
        # Identical shots: exact mean, no rounding residue in the spread
        mean_energy = energies[0]
        variance = 0.0
    else:
        mean_energy = math.fsum(energies) / n
        squared = math.fsum((e - mean_energy) ** 2 for e in energies)
        variance = squared / ((n - 1) or 1)

    return DescriptiveStats(
        count=n,
        mean_velocity=mean_velocity,
        mean_unit_energy=mean_energy,
        std_dev_unit_energy=math.sqrt(variance),
        min_unit_energy=min_energy,
        max_unit_energy=max_energy,
    )


def confidence_interval_95(mean: float, std_dev: float, n: int) -> ConfidenceInterval:
    """
    95% confidence interval for the population mean.

    The lower bound is clamped at 0 since unit-area energy cannot be
    negative.

    Args:
        mean: Sample mean
        std_dev: Sample standard deviation
        n: Sample size

    Returns:
        ConfidenceInterval; [0, 0] for an empty sample
    """
    if n <= 0:
        return ConfidenceInterval(0.0, 0.0)

    t_critical = t_critical_95(n - 1)
    standard_error = std_dev / math.sqrt(n)
    margin = t_critical * standard_error
    return ConfidenceInterval(max(0.0, mean - margin), mean + margin)


def one_sample_t_test(
    mean: float,
    std_dev: float,
    n: int,
    threshold: float
) -> HypothesisTestResult:
    """
    One-sample t-test of the mean against the threshold.

    Args:
        mean: Sample mean unit-area energy
        std_dev: Sample standard deviation
        n: Sample size
        threshold: Reference value (the lethality threshold)

    Returns:
        HypothesisTestResult; the insufficient-data result when n is 0
    """
    if n <= 0:
        return HypothesisTestResult.insufficient()

    standard_error = std_dev / math.sqrt(n)
    t_statistic = 0.0
    if standard_error > 0:
        t_statistic = (mean - threshold) / standard_error

    df = n - 1
    p_value = t_tail_probability(t_statistic, df) if df > 0 else INCONCLUSIVE_P_VALUE

    return HypothesisTestResult(
        t_statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        critical_value=t_critical_95(df),
        reject_null=p_value < SIGNIFICANCE_LEVEL,
        interpretation=interpret(mean, p_value, threshold),
    )
