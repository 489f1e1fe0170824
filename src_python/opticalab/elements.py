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
Thin optical elements placed along the bench.

Every element sits on the optical axis, has no thickness and the same fixed
vertical aperture. Only its kind, horizontal position and signed focal length
vary.
"""

import uuid
from enum import Enum

from .constants import DEFAULT_FOCAL_LENGTH, MAX_FOCAL_LENGTH, MIN_FOCAL_LENGTH
from .geometry import as_number, clamp


class ElementKind(Enum):
    """The closed set of element kinds. Values match the scene file 'type' strings."""
    CONVEX_LENS = 'convex-lens'
    CONCAVE_LENS = 'concave-lens'
    PLANE_MIRROR = 'plane-mirror'
    CONVEX_MIRROR = 'convex-mirror'
    CONCAVE_MIRROR = 'concave-mirror'

    @property
    def is_mirror(self):
        return self in (ElementKind.PLANE_MIRROR, ElementKind.CONVEX_MIRROR, ElementKind.CONCAVE_MIRROR)

    @property
    def is_lens(self):
        return self in (ElementKind.CONVEX_LENS, ElementKind.CONCAVE_LENS)

    @property
    def has_focus(self):
        """Lenses and curved mirrors have focal points; the plane mirror does not."""
        return self is not ElementKind.PLANE_MIRROR

    @property
    def focal_sign(self):
        """-1 for diverging kinds (concave lens, convex mirror), +1 otherwise."""
        if self in (ElementKind.CONCAVE_LENS, ElementKind.CONVEX_MIRROR):
            return -1
        return 1


def signed_focal_length(kind, value):
    """
    Apply the kind's sign convention and the magnitude limits to a focal length.

    Args:
        kind (ElementKind): Element kind that decides the sign
        value (float): Requested focal length; only its magnitude is used

    Returns:
        float: Focal length with magnitude in [MIN_FOCAL_LENGTH, MAX_FOCAL_LENGTH]
    """
    return kind.focal_sign * clamp(abs(value), MIN_FOCAL_LENGTH, MAX_FOCAL_LENGTH)


def new_element_id():
    """Opaque id that stays with an element for its lifetime."""
    return f'elem-{uuid.uuid4().hex[:12]}'


class OpticalElement:
    """
    A lens or mirror on the bench.

    Instances are treated as values by the tracer, which only reads them.
    The scene replaces or updates them through its mutators.

    Attributes:
        id (str): Opaque unique identifier
        kind (ElementKind): What the element is
        position (float): Horizontal coordinate of the element's center
        focal_length (float): Signed focal length (positive = converging).
            Ignored for plane mirrors.
    """

    def __init__(self, kind, position, focal_length=None, id=None):
        """
        Initialize an element.

        Args:
            kind (ElementKind or str): Element kind, or its 'type' string
            position (float): Horizontal position on the bench
            focal_length (float or None): Signed focal length. If None, the
                kind's default (+/-100) is used. Stored as given so callers can
                build arbitrary test setups; mutators go through
                signed_focal_length().
            id (str or None): Identifier; a fresh one is generated if None

        Raises:
            ValueError: If kind is not a known element type
        """
        self.kind = ElementKind(kind)
        self.position = position
        if focal_length is None:
            focal_length = self.kind.focal_sign * DEFAULT_FOCAL_LENGTH
        self.focal_length = focal_length
        self.id = id if id is not None else new_element_id()

    @classmethod
    def from_json(cls, json_obj):
        """
        Build an element from a scene file entry.

        Args:
            json_obj (dict): Keys 'type' (required), 'x', 'focalLength', 'id'

        Returns:
            OpticalElement: The element

        Raises:
            KeyError: If 'type' is missing
            ValueError: If 'type' is unknown or a number field is malformed
        """
        focal_length = json_obj.get('focalLength')
        if focal_length is not None:
            focal_length = as_number(focal_length, 'element focalLength')
        return cls(
            kind=json_obj['type'],
            position=float(as_number(json_obj.get('x', 0.0), 'element x')),
            focal_length=focal_length,
            id=json_obj.get('id'),
        )

    def to_json(self):
        return {
            'id': self.id,
            'type': self.kind.value,
            'x': self.position,
            'focalLength': self.focal_length,
        }

    def copy(self):
        return OpticalElement(self.kind, self.position, self.focal_length, id=self.id)

    def focal_points(self):
        """
        Positions of the two focal points on the axis.

        Returns:
            tuple or None: (left_x, right_x), or None for a plane mirror
        """
        if not self.kind.has_focus:
            return None
        reach = abs(self.focal_length)
        return (self.position - reach, self.position + reach)

    def __eq__(self, other):
        if not isinstance(other, OpticalElement):
            return NotImplemented
        return (self.id == other.id and self.kind is other.kind and
                self.position == other.position and self.focal_length == other.focal_length)

    def __repr__(self):
        return (f"OpticalElement(id={self.id!r}, kind={self.kind.value}, "
                f"position={self.position}, focal_length={self.focal_length})")
