import numpy as np

from transforms import identity
from utils import color

"""
Procedural color patterns.

A pattern is sampled in its own space: a world point is first taken into the
shape's object space with the shape's inverse transform, then the pattern's
transform maps the object-space point into pattern space.
"""

WHITE = color(1, 1, 1)
BLACK = color(0, 0, 0)


class Pattern:
    """Base class; subclasses implement pattern_at in pattern space."""

    def __init__(self, transform=None):
        self.transform = identity() if transform is None else transform

    def pattern_at(self, pattern_point):
        raise NotImplementedError

    def pattern_at_object(self, object_point):
        return self.pattern_at(self.transform @ object_point)

    def pattern_at_shape(self, shape, world_point):
        """Color of this pattern on a shape at a world-space point."""
        return self.pattern_at_object(shape.inverse @ world_point)


class _TwoColorPattern(Pattern):

    def __init__(self, a=WHITE, b=BLACK, transform=None):
        Pattern.__init__(self, transform)
        self.a = np.array(a, dtype=np.float64)
        self.b = np.array(b, dtype=np.float64)


class StripePattern(_TwoColorPattern):
    """Alternates between a and b on unit intervals of x."""

    def pattern_at(self, p):
        if int(np.floor(p[0])) % 2 == 0:
            return self.a
        return self.b


class GradientPattern(_TwoColorPattern):
    """Linear blend from a to b across every unit interval of x."""

    def pattern_at(self, p):
        fraction = p[0] - np.floor(p[0])
        return self.a + (self.b - self.a) * fraction


class RingPattern(_TwoColorPattern):
    """Concentric unit-width rings around the y axis."""

    def pattern_at(self, p):
        if int(np.floor(np.sqrt(p[0] * p[0] + p[2] * p[2]))) % 2 == 0:
            return self.a
        return self.b


class CheckerPattern(_TwoColorPattern):
    """3D checkerboard of unit cubes."""

    def pattern_at(self, p):
        if int(np.floor(p[0]) + np.floor(p[1]) + np.floor(p[2])) % 2 == 0:
            return self.a
        return self.b


class BlendPattern(Pattern):

    def __init__(self, first, second, transform=None):
        """Average of two patterns.

        Parameters:
          first, second : Pattern -- the patterns to blend; each still applies
                          its own transform on top of this pattern's space
        """
        Pattern.__init__(self, transform)
        self.first = first
        self.second = second

    def pattern_at(self, p):
        return (self.first.pattern_at_object(p) + self.second.pattern_at_object(p)) * 0.5
