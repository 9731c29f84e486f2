"""
Exception types for the air gun lethality analyzer.

Numeric code never raises for valid inputs; these exceptions mark the two
places where something outside the engine can go wrong: shot data that
should never have reached the calculator, and the external report service.
"""


class InvalidInputError(ValueError):
    """A shot has a non-positive or non-finite velocity, diameter or weight."""

    def __init__(self, field_name: str, value: object, shot_id: object = None):
        self.field_name = field_name
        self.value = value
        self.shot_id = shot_id
        where = f" (shot {shot_id})" if shot_id is not None else ""
        super().__init__(
            f"{field_name} must be a positive finite number, got {value!r}{where}"
        )


class ReportGenerationError(RuntimeError):
    """The external text-generation service could not produce a report."""
