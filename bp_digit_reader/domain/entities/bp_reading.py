"""
Blood Pressure Reading Entity

The systolic / diastolic / pulse triple read from a monitor display.
"""

from dataclasses import dataclass
from typing import Tuple, Dict


@dataclass(frozen=True)
class BPReading:
    """
    Output triple of the reading pipeline.

    A value of 0 means "not determined".
    """

    systolic: int = 0
    diastolic: int = 0
    pulse: int = 0

    def __post_init__(self) -> None:
        for name, value in (
            ("systolic", self.systolic),
            ("diastolic", self.diastolic),
            ("pulse", self.pulse),
        ):
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @property
    def is_complete(self) -> bool:
        """All three values were determined."""
        return self.systolic > 0 and self.diastolic > 0 and self.pulse > 0

    @property
    def is_zero(self) -> bool:
        return self.systolic == 0 and self.diastolic == 0 and self.pulse == 0

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.systolic, self.diastolic, self.pulse)

    def to_dict(self) -> Dict[str, int]:
        return {
            "systolic": self.systolic,
            "diastolic": self.diastolic,
            "pulse": self.pulse,
        }

    def __str__(self) -> str:
        def fmt(value: int) -> str:
            return str(value) if value > 0 else "-"
        return f"{fmt(self.systolic)}/{fmt(self.diastolic)} pulse {fmt(self.pulse)}"

    @classmethod
    def zero(cls) -> "BPReading":
        return cls()
