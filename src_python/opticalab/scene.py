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

import logging
import math

from .constants import (
    GREEN_WAVELENGTH,
    MAX_WAVELENGTH,
    MIN_WAVELENGTH,
    NEW_ELEMENT_SPACING,
)
from .elements import ElementKind, OpticalElement, signed_focal_length
from .geometry import BenchGeometry, as_number, as_object, clamp
from .tracer import RayTracer

logger = logging.getLogger(__name__)


def normalize_degrees(angle):
    """
    Wrap an angle in degrees into (-180, 180].

    Args:
        angle (float): Any finite angle in degrees

    Returns:
        float: The equivalent angle in (-180, 180]
    """
    angle = angle % 360.0
    if angle > 180.0:
        angle -= 360.0
    return angle


class Scene:
    """
    Container for the bench elements and the laser settings.

    This is the mutable state the interactive layer edits. Every mutator keeps
    the element invariants: positions stay on the bench and focal lengths keep
    their kind's sign with a magnitude in [10, 300]. The trace is recomputed
    from a snapshot on every call to trace(); nothing is cached.

    Attributes:
        geometry (BenchGeometry): Bench dimensions and laser origin
        elements (list): OpticalElement objects in insertion order
        laser_angle (float): Launch angle in degrees, in (-180, 180]
        laser_wavelength (int): Laser wavelength in nm, in [380, 780]
        warning (str or None): Warning from the last trace, if any
    """

    def __init__(self, geometry=None):
        """Initialize an empty scene with default settings."""
        self.geometry = geometry if geometry is not None else BenchGeometry()
        self.elements = []
        self.laser_angle = 0.0
        self.laser_wavelength = GREEN_WAVELENGTH
        self.warning = None

    @classmethod
    def from_json(cls, json_obj):
        """
        Build a scene from a parsed scene file.

        Element positions and focal lengths are passed through the same clamps
        as the interactive mutators.

        Args:
            json_obj (dict): Object with optional 'bench', 'laser' and 'elements' keys

        Returns:
            Scene: The loaded scene

        Raises:
            KeyError: If an element entry has no 'type'
            ValueError: If an element 'type' is unknown, or the file does not
                have the expected shape (objects, a list of elements, numbers)
        """
        as_object(json_obj, 'scene')
        scene = cls(BenchGeometry.from_json(json_obj.get('bench')))
        laser = as_object(json_obj.get('laser', {}), 'laser')
        scene.set_laser_angle(as_number(laser.get('angle', 0.0), 'laser angle'))
        scene.set_wavelength(as_number(laser.get('wavelength', GREEN_WAVELENGTH), 'laser wavelength'))
        entries = json_obj.get('elements', [])
        if not isinstance(entries, list):
            raise ValueError(f"elements must be a list, got {type(entries).__name__}")
        for entry in entries:
            element = OpticalElement.from_json(as_object(entry, 'element'))
            element.position = scene.geometry.clamp_position(element.position)
            element.focal_length = signed_focal_length(element.kind, element.focal_length)
            scene.elements.append(element)
        return scene

    def to_json(self):
        return {
            'bench': self.geometry.to_json(),
            'laser': {'angle': self.laser_angle, 'wavelength': self.laser_wavelength},
            'elements': [element.to_json() for element in self.elements],
        }

    def get_element(self, element_id):
        """
        Look up an element by id.

        Raises:
            KeyError: If no element has this id
        """
        for element in self.elements:
            if element.id == element_id:
                return element
        raise KeyError(element_id)

    def add_element(self, kind, position=None, focal_length=None):
        """
        Add a new element to the bench.

        Args:
            kind (ElementKind or str): Element kind
            position (float or None): Position; defaults to the bench center
                shifted right by 30 units per element already on the bench
            focal_length (float or None): Focal length; defaults to +/-100
                depending on the kind. Only the magnitude is used.

        Returns:
            OpticalElement: The new element
        """
        kind = ElementKind(kind)
        if position is None:
            position = self.geometry.width / 2 + len(self.elements) * NEW_ELEMENT_SPACING
        element = OpticalElement(kind, self.geometry.clamp_position(position))
        if focal_length is not None:
            element.focal_length = signed_focal_length(kind, focal_length)
        self.elements.append(element)
        logger.debug("Added %r", element)
        return element

    def remove_element(self, element_id):
        """
        Remove an element. Unknown ids are ignored.

        Args:
            element_id (str): Id of the element to remove
        """
        self.elements = [element for element in self.elements if element.id != element_id]
        logger.debug("Removed element %s", element_id)

    def clear(self):
        """Remove all elements."""
        self.elements.clear()
        self.warning = None

    def update_element(self, element_id, position=None, focal_length=None):
        """
        Change an element's position and/or focal length, applying the clamps.

        Args:
            element_id (str): Id of the element
            position (float or None): New position, or None to keep it
            focal_length (float or None): New focal length (magnitude used),
                or None to keep it

        Returns:
            OpticalElement: The updated element

        Raises:
            KeyError: If no element has this id
        """
        element = self.get_element(element_id)
        if position is not None:
            element.position = self.geometry.clamp_position(position)
            if element.position != position:
                logger.debug("Clamped position of %s from %s to %s", element_id, position, element.position)
        if focal_length is not None:
            element.focal_length = signed_focal_length(element.kind, focal_length)
            if element.focal_length != focal_length:
                logger.debug("Clamped focal length of %s from %s to %s",
                             element_id, focal_length, element.focal_length)
        return element

    def drag_element(self, element_id, pointer_x):
        """Move an element to follow a pointer along the bench."""
        return self.update_element(element_id, position=pointer_x)

    def drag_focal_point(self, element_id, pointer_x):
        """
        Set the focal length from a dragged focal point marker.

        The marker's distance from the element becomes the focal length
        magnitude; the sign comes from the element kind.

        Args:
            element_id (str): Id of the element
            pointer_x (float): Horizontal pointer position

        Returns:
            OpticalElement: The updated element
        """
        element = self.get_element(element_id)
        return self.update_element(element_id, focal_length=abs(pointer_x - element.position))

    def set_laser_angle(self, angle):
        """
        Set the launch angle in degrees, normalized into (-180, 180].

        Raises:
            ValueError: If angle is NaN or infinite
        """
        if not math.isfinite(angle):
            raise ValueError(f"laser angle must be finite, got {angle!r}")
        self.laser_angle = normalize_degrees(angle)

    def rotate_laser(self, delta):
        """
        Turn the laser by a dial movement.

        Args:
            delta (float): Change in degrees; wrapped into [-180, 180] first
        """
        if delta > 180:
            delta -= 360
        elif delta < -180:
            delta += 360
        self.set_laser_angle(self.laser_angle + delta)

    def set_wavelength(self, wavelength):
        """
        Set the laser wavelength, rounded to whole nm and clamped to the visible range.

        Raises:
            ValueError: If wavelength is NaN or infinite
        """
        if not math.isfinite(wavelength):
            raise ValueError(f"laser wavelength must be finite, got {wavelength!r}")
        self.laser_wavelength = int(clamp(round(wavelength), MIN_WAVELENGTH, MAX_WAVELENGTH))

    def trace(self):
        """
        Trace the laser through the current elements.

        Returns:
            list: RaySegment objects for the current state
        """
        self.warning = None
        segments = RayTracer(self.geometry).trace(
            [element.copy() for element in self.elements],
            self.laser_angle,
            self.laser_wavelength,
        )
        if not segments:
            self.warning = f"No ray traced from laser origin {self.geometry.origin}"
        return segments
