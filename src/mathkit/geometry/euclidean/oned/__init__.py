"""The real line: points, oriented points and interval sets."""

from .vector1d import Vector1D
from .oriented_point import OrientedPoint, SubOrientedPoint
from .interval import Interval
from .intervals_set import IntervalsSet
