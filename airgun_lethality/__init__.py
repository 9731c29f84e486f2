"""Air gun lethality analyzer: ballistics, statistics and determination."""

from .ballistics import (
    # Constants
    LETHALITY_THRESHOLD,
    DEFAULT_PROJECTILE,
    SAMPLE_VELOCITIES,
    # Types
    ProjectileParams,
    ShotInput,
    ShotRecord,
    BallisticResult,
    # Functions
    compute_energy,
    cross_section_area_cm2,
    velocity_for_unit_energy,
    validate_shot_input,
    build_shot_records,
    shots_from_velocities,
    apply_projectile,
)

from .stats import (
    DescriptiveStats,
    ConfidenceInterval,
    HypothesisTestResult,
    gamma,
    student_t_pdf,
    t_tail_probability,
    describe,
    confidence_interval_95,
    one_sample_t_test,
)

from .policy import SIGNIFICANCE_LEVEL, Interpretation, interpret, is_strictly_lethal
from .determination import Verdict, determine, analyze_shots
from .errors import InvalidInputError, ReportGenerationError

__all__ = [
    # Ballistics - Constants
    "LETHALITY_THRESHOLD",
    "DEFAULT_PROJECTILE",
    "SAMPLE_VELOCITIES",
    # Ballistics - Types
    "ProjectileParams",
    "ShotInput",
    "ShotRecord",
    "BallisticResult",
    # Ballistics - Functions
    "compute_energy",
    "cross_section_area_cm2",
    "velocity_for_unit_energy",
    "validate_shot_input",
    "build_shot_records",
    "shots_from_velocities",
    "apply_projectile",
    # Statistics
    "DescriptiveStats",
    "ConfidenceInterval",
    "HypothesisTestResult",
    "gamma",
    "student_t_pdf",
    "t_tail_probability",
    "describe",
    "confidence_interval_95",
    "one_sample_t_test",
    # Policy
    "SIGNIFICANCE_LEVEL",
    "Interpretation",
    "interpret",
    "is_strictly_lethal",
    # Determination
    "Verdict",
    "determine",
    "analyze_shots",
    # Errors
    "InvalidInputError",
    "ReportGenerationError",
]
