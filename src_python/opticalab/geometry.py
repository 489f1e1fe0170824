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

"""
Bench geometry and point helpers.

Points are plain dicts with 'x' and 'y' keys, like everywhere else in the
package. The bench spans [0, width] x [0, height] and the optical axis is the
horizontal line y = height / 2.
"""

import math

from .constants import (
    BENCH_WIDTH,
    BENCH_HEIGHT,
    ELEMENT_HEIGHT,
    ELEMENT_WIDTH,
    LASER_ORIGIN_X,
)


def point(x, y):
    """Create a point dict."""
    return {'x': x, 'y': y}


def distance(p1, p2):
    """Euclidean distance between two points."""
    return math.hypot(p2['x'] - p1['x'], p2['y'] - p1['y'])


def clamp(value, low, high):
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def as_number(value, name):
    """
    Check a number read from a scene file.

    Args:
        value: The parsed JSON value
        name (str): Field name for the error message

    Returns:
        int or float: value, unchanged

    Raises:
        ValueError: If value is not a finite int or float
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return value


def as_object(value, name):
    """Check that a value read from a scene file is a JSON object."""
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object, got {type(value).__name__}")
    return value


class BenchGeometry:
    """
    Fixed dimensions of the optical bench.

    Attributes:
        width (float): Horizontal extent of the bench
        height (float): Vertical extent of the bench
        aperture (float): Vertical extent of every element, centered on the axis
        element_width (float): Drawn width of an element, used to keep elements on the bench
        element_thickness (float): Width of the band after an element's position that counts as a hit
        origin (dict): Laser launch point
    """

    serializable_defaults = {
        'width': BENCH_WIDTH,
        'height': BENCH_HEIGHT,
        'aperture': ELEMENT_HEIGHT,
        'element_width': ELEMENT_WIDTH,
    }

    def __init__(self, width=BENCH_WIDTH, height=BENCH_HEIGHT, aperture=ELEMENT_HEIGHT,
                 element_width=ELEMENT_WIDTH, element_thickness=None, origin=None):
        self.width = width
        self.height = height
        self.aperture = aperture
        self.element_width = element_width
        self.element_thickness = element_width / 10 if element_thickness is None else element_thickness
        if origin is None:
            # The laser sits on the optical axis
            origin = point(LASER_ORIGIN_X, height / 2)
        self.origin = origin

    @classmethod
    def from_json(cls, json_obj):
        """
        Build a geometry from a scene file's "bench" object.

        Args:
            json_obj (dict or None): Keys 'width', 'height', 'aperture',
                'element_width' and 'origin' ({'x', 'y'}), all optional

        Returns:
            BenchGeometry: The geometry, with defaults for missing keys

        Raises:
            ValueError: If the object or one of its numbers is malformed
        """
        json_obj = as_object(json_obj if json_obj is not None else {}, 'bench')
        kwargs = {key: as_number(json_obj.get(key, default), f"bench {key}")
                  for key, default in cls.serializable_defaults.items()}
        if 'origin' in json_obj:
            origin = as_object(json_obj['origin'], 'bench origin')
            kwargs['origin'] = point(float(as_number(origin.get('x'), 'bench origin x')),
                                     float(as_number(origin.get('y'), 'bench origin y')))
        return cls(**kwargs)

    def to_json(self):
        """Serialize to the scene file's "bench" object."""
        return {
            'width': self.width,
            'height': self.height,
            'aperture': self.aperture,
            'element_width': self.element_width,
            'origin': dict(self.origin),
        }

    @property
    def axis_y(self):
        """Vertical coordinate of the optical axis."""
        return self.height / 2

    @property
    def aperture_top(self):
        return self.axis_y - self.aperture / 2

    @property
    def aperture_bottom(self):
        return self.axis_y + self.aperture / 2

    @property
    def min_position(self):
        """Smallest allowed element position."""
        return self.element_width / 2

    @property
    def max_position(self):
        """Largest allowed element position."""
        return self.width - self.element_width / 2

    def clamp_position(self, x):
        """Clamp an element position so the element stays on the bench."""
        return clamp(x, self.min_position, self.max_position)

    def contains(self, p):
        """True if the point lies on the bench, edges included."""
        return 0 <= p['x'] <= self.width and 0 <= p['y'] <= self.height

    def is_outside(self, p):
        """True if the point lies strictly outside the bench."""
        return not self.contains(p)

    def is_interior(self, p):
        """True if the point lies strictly inside the bench, off every edge."""
        return 0 < p['x'] < self.width and 0 < p['y'] < self.height

    def __repr__(self):
        return (f"BenchGeometry(width={self.width}, height={self.height}, "
                f"aperture={self.aperture}, origin={self.origin})")
