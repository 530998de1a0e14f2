"""The plane: points, oriented lines, segments and polygon sets."""

from .vector2d import Vector2D
from .line import Line, LineTransform
from .segment import Segment
from .sub_line import SubLine
from .polygons_set import PolygonsSet
