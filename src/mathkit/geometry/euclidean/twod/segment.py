"""Line segments of the plane."""

from dataclasses import dataclass
from typing import Optional

from .line import Line
from .vector2d import Vector2D


@dataclass(frozen=True)
class Segment:
    """
    Part of a line between two points. Either end is None for a segment
    extending to infinity on that side.
    """
    start: Optional[Vector2D]
    end: Optional[Vector2D]
    line: Line

    def distance(self, point: Vector2D) -> float:
        """Distance from point to the closest point of the (finite) segment."""
        dx = self.end.x - self.start.x
        dy = self.end.y - self.start.y
        r = ((point.x - self.start.x) * dx + (point.y - self.start.y) * dy) / (dx * dx + dy * dy)
        if r < 0 or r > 1:
            return min(point.distance(self.start), point.distance(self.end))
        return point.distance(Vector2D(self.start.x + r * dx, self.start.y + r * dy))
