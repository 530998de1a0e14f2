"""Closed interval of the real line."""

from dataclasses import dataclass

from ...partitioning.region import Location
from ....spec.errors import MathIllegalArgumentError


@dataclass(frozen=True)
class Interval:
    lower: float
    upper: float

    def __post_init__(self):
        if self.upper < self.lower:
            raise MathIllegalArgumentError(
                f"Interval upper bound {self.upper} is below lower bound {self.lower}"
            )

    def get_inf(self) -> float:
        return self.lower

    def get_sup(self) -> float:
        return self.upper

    def get_size(self) -> float:
        return self.upper - self.lower

    def get_barycenter(self) -> float:
        return 0.5 * (self.lower + self.upper)

    def check_point(self, point: float, tolerance: float) -> Location:
        if point < self.lower - tolerance or point > self.upper + tolerance:
            return Location.OUTSIDE
        if self.lower + tolerance < point < self.upper - tolerance:
            return Location.INSIDE
        return Location.BOUNDARY
