"""
Copyright 2024 The Ray Optics Simulation authors and contributors

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import math


class RaySegment:
    """
    One straight leg of a traced ray.

    A trace is an ordered list of segments where each segment starts where the
    previous one ended. Segments are produced fresh by every trace and are
    never modified afterwards.

    Attributes:
        start (dict): Starting point with keys 'x' and 'y'
        end (dict): End point with keys 'x' and 'y'
        color (RGBColor): Display color of the ray
        wavelength (float or None): Wavelength in nm the color was derived from
    """

    __slots__ = ('start', 'end', 'color', 'wavelength')

    def __init__(self, start, end, color, wavelength=None):
        """
        Initialize a segment.

        Args:
            start (dict): Starting point {'x': float, 'y': float}
            end (dict): End point {'x': float, 'y': float}
            color (RGBColor): Display color
            wavelength (float or None): Wavelength in nm (default: None)
        """
        self.start = start
        self.end = end
        self.color = color
        self.wavelength = wavelength

    @property
    def dx(self):
        return self.end['x'] - self.start['x']

    @property
    def dy(self):
        return self.end['y'] - self.start['y']

    @property
    def length(self):
        return math.hypot(self.dx, self.dy)

    @property
    def direction(self):
        """
        Unit direction vector of the segment.

        Returns:
            tuple: (dx, dy) normalized, or (0.0, 0.0) for a zero-length segment
        """
        length = self.length
        if length == 0:
            return (0.0, 0.0)
        return (self.dx / length, self.dy / length)

    @property
    def angle(self):
        """Direction of travel in radians, in (-pi, pi]."""
        return math.atan2(self.dy, self.dx)

    def to_json(self):
        return {
            'start': dict(self.start),
            'end': dict(self.end),
            'color': self.color.css,
            'wavelength': self.wavelength,
        }

    def __eq__(self, other):
        if not isinstance(other, RaySegment):
            return NotImplemented
        return (self.start == other.start and self.end == other.end and
                self.color == other.color and self.wavelength == other.wavelength)

    def __repr__(self):
        """String representation for debugging."""
        return (f"RaySegment(start=({self.start['x']:.2f}, {self.start['y']:.2f}), "
                f"end=({self.end['x']:.2f}, {self.end['y']:.2f}), color={self.color.css})")
