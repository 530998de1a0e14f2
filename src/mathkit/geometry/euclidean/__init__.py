"""Euclidean spaces of dimension 1, 2 and 3."""

from . import oned
from . import twod
from . import threed
