#!/usr/bin/env python3
"""
Ballistics Calculator for the Air Gun Lethality Analyzer

Converts a single shot's chronograph reading into the quantities the
lethality standard is written in:
- Kinetic energy of the projectile (Joules)
- Kinetic energy per unit cross-sectional area (J/cm^2)

Physics:
- KE = 0.5 * m * v^2 with m in kg and v in m/s
- Cross-section A = pi * r^2 with r in cm (r = diameter_mm / 20)
- Unit-area energy = KE / A

Example:
- 6 mm / 0.20 g BB at 125 m/s: KE = 1.5625 J, A = 0.2827 cm^2,
  unit-area energy = 5.53 J/cm^2
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .errors import InvalidInputError


# =============================================================================
# CONSTANTS
# =============================================================================

# Statutory lethality threshold (J/cm^2), the Taiwan/Japan air gun standard
LETHALITY_THRESHOLD = 20.0

# Conversion factors
GRAMS_PER_KG = 1000.0
MM_DIAMETER_TO_CM_RADIUS = 20.0

# Demonstration chronograph series (m/s) for a standard 6 mm / 0.20 g BB
SAMPLE_VELOCITIES: Tuple[float, ...] = (
    125.4, 126.1, 124.8, 125.9, 127.2, 126.5, 125.0, 124.5, 126.8, 125.5,
)


# =============================================================================
# PROJECTILE AND SHOT TYPES
# =============================================================================

@dataclass(frozen=True)
class ProjectileParams:
    """
    Projectile specification shared by a batch of shots.

    Attributes:
        diameter_mm: Projectile diameter in millimetres
        weight_grams: Projectile weight in grams
    """
    diameter_mm: float
    weight_grams: float

    @property
    def mass_kg(self) -> float:
        """Projectile mass in kilograms."""
        return self.weight_grams / GRAMS_PER_KG

    @property
    def area_cm2(self) -> float:
        """Cross-sectional area in square centimetres."""
        return cross_section_area_cm2(self.diameter_mm)


# Standard 6 mm BB
DEFAULT_PROJECTILE = ProjectileParams(diameter_mm=6.0, weight_grams=0.2)


def _new_shot_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ShotInput:
    """
    One chronograph reading as entered by the operator.

    Diameter and weight are carried per shot, so a batch may mix
    ammunition types.

    Attributes:
        velocity: Muzzle velocity in m/s
        diameter_mm: Projectile diameter in millimetres
        weight_grams: Projectile weight in grams
        shot_id: Opaque unique identity of the reading
    """
    velocity: float
    diameter_mm: float
    weight_grams: float
    shot_id: str = field(default_factory=_new_shot_id)

    @property
    def projectile(self) -> ProjectileParams:
        """Projectile parameters of this shot."""
        return ProjectileParams(self.diameter_mm, self.weight_grams)


@dataclass(frozen=True)
class BallisticResult:
    """Energy figures for a single shot."""
    energy_joules: float
    unit_area_energy: float


@dataclass(frozen=True)
class ShotRecord:
    """
    A shot together with its derived energy figures.

    Records are built with ShotRecord.from_input() and never modified;
    a change of projectile parameters produces new records.

    Attributes:
        shot_id: Identity carried over from the ShotInput
        sequence_index: 1-based position in the batch (display only)
        velocity: Muzzle velocity in m/s
        diameter_mm: Projectile diameter in millimetres
        weight_grams: Projectile weight in grams
        energy_joules: Kinetic energy in Joules
        unit_area_energy: Kinetic energy per unit area in J/cm^2
    """
    shot_id: str
    sequence_index: int
    velocity: float
    diameter_mm: float
    weight_grams: float
    energy_joules: float
    unit_area_energy: float

    @classmethod
    def from_input(cls, shot: ShotInput, sequence_index: int) -> ShotRecord:
        """
        Derive a record from a shot input.

        Args:
            shot: Validated shot input
            sequence_index: 1-based position of the shot in its batch

        Returns:
            ShotRecord with energy fields computed from the input
        """
        result = compute_energy(shot.velocity, shot.diameter_mm, shot.weight_grams)
        return cls(
            shot_id=shot.shot_id,
            sequence_index=sequence_index,
            velocity=shot.velocity,
            diameter_mm=shot.diameter_mm,
            weight_grams=shot.weight_grams,
            energy_joules=result.energy_joules,
            unit_area_energy=result.unit_area_energy,
        )

    @property
    def area_cm2(self) -> float:
        """Cross-sectional area of the projectile in cm^2."""
        return cross_section_area_cm2(self.diameter_mm)


# =============================================================================
# ENERGY CALCULATIONS
# =============================================================================

def cross_section_area_cm2(diameter_mm: float) -> float:
    """Cross-sectional area (cm^2) of a round projectile of given diameter (mm)."""
    radius_cm = diameter_mm / MM_DIAMETER_TO_CM_RADIUS
    return math.pi * radius_cm ** 2


def compute_energy(
    velocity: float,
    diameter_mm: float,
    weight_grams: float
) -> BallisticResult:
    """
    Calculate kinetic energy and unit-area energy for one shot.

    Inputs are not validated here. A zero diameter gives an infinite
    unit-area energy, so callers reject non-positive values first
    (see validate_shot_input).

    Args:
        velocity: Muzzle velocity in m/s
        diameter_mm: Projectile diameter in millimetres
        weight_grams: Projectile weight in grams

    Returns:
        BallisticResult with energy in J and unit-area energy in J/cm^2
    """
    mass_kg = weight_grams / GRAMS_PER_KG
    energy_joules = 0.5 * mass_kg * velocity ** 2
    area_cm2 = cross_section_area_cm2(diameter_mm)
    if area_cm2 == 0:
        # IEEE semantics: x / 0 = inf, 0 / 0 = nan
        return BallisticResult(energy_joules, math.inf if energy_joules else math.nan)
    return BallisticResult(energy_joules, energy_joules / area_cm2)


def velocity_for_unit_energy(
    target_unit_energy: float,
    diameter_mm: float,
    weight_grams: float
) -> float:
    """
    Muzzle velocity at which a projectile reaches a given unit-area energy.

    Inverse of compute_energy: v = sqrt(2 * U * A / m).

    Args:
        target_unit_energy: Unit-area energy in J/cm^2
        diameter_mm: Projectile diameter in millimetres
        weight_grams: Projectile weight in grams

    Returns:
        Velocity in m/s
    """
    mass_kg = weight_grams / GRAMS_PER_KG
    area_cm2 = cross_section_area_cm2(diameter_mm)
    return math.sqrt(2.0 * target_unit_energy * area_cm2 / mass_kg)


# =============================================================================
# BATCH CONSTRUCTION
# =============================================================================

def _is_positive_finite(value: float) -> bool:
    try:
        return math.isfinite(value) and value > 0
    except TypeError:
        return False


def validate_shot_input(shot: ShotInput) -> None:
    """
    Reject a shot that the calculator cannot handle.

    Raises:
        InvalidInputError: If velocity, diameter or weight is not a
            positive finite number
    """
    for field_name in ("velocity", "diameter_mm", "weight_grams"):
        value = getattr(shot, field_name)
        if not _is_positive_finite(value):
            raise InvalidInputError(field_name, value, shot.shot_id)


def build_shot_records(inputs: Iterable[ShotInput]) -> Tuple[ShotRecord, ...]:
    """
    Validate shot inputs and derive their records in order.

    Args:
        inputs: Shot inputs in entry order

    Returns:
        Tuple of ShotRecord with sequence_index 1..n

    Raises:
        InvalidInputError: On the first invalid shot
    """
    inputs = list(inputs)
    for shot in inputs:
        validate_shot_input(shot)
    return tuple(
        ShotRecord.from_input(shot, index)
        for index, shot in enumerate(inputs, start=1)
    )


def shots_from_velocities(
    velocities: Sequence[float],
    params: ProjectileParams = DEFAULT_PROJECTILE
) -> List[ShotInput]:
    """Single-ammo mode: one ShotInput per velocity, all sharing params."""
    return [
        ShotInput(velocity=v, diameter_mm=params.diameter_mm, weight_grams=params.weight_grams)
        for v in velocities
    ]


def apply_projectile(
    inputs: Iterable[ShotInput],
    params: ProjectileParams
) -> List[ShotInput]:
    """
    Re-apply one projectile specification to every shot.

    Identities are kept; new inputs are returned and the originals are
    left untouched.
    """
    return [
        ShotInput(
            velocity=shot.velocity,
            diameter_mm=params.diameter_mm,
            weight_grams=params.weight_grams,
            shot_id=shot.shot_id,
        )
        for shot in inputs
    ]
