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
Sequential ray tracing along a one-dimensional optical bench.

The ray visits the elements once each, in ascending position order, then runs
to the bench edge it is heading for. Known approximations:

- A ray never re-enters an element it has already passed in sort order, even
  if a mirror sends it back through that element.
- A (nearly) vertical ray runs straight to the top or bottom edge and does not
  interact with elements.
"""

import logging
import math

from .color import wavelength_to_color
from .constants import (
    FOCAL_LENGTH_EPSILON,
    MIN_RAY_SEGMENT_LENGTH,
    VERTICAL_RAY_EPSILON,
)
from .elements import ElementKind
from .geometry import BenchGeometry, clamp, distance, point
from .segment import RaySegment

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


def normalize_angle(angle):
    """Wrap an angle in radians into [0, 2*pi)."""
    angle = angle % TWO_PI
    # float rounding can land exactly on 2*pi for tiny negative inputs
    if angle >= TWO_PI:
        angle = 0.0
    return angle


def deflect(element, angle, y_rel):
    """
    New ray direction after striking an element.

    Paraxial model: a lens bends the ray by -y_rel / f, a curved mirror
    reflects it and bends it by twice that. The factor of two is deliberate
    and must not be folded into a single formula.

    Args:
        element (OpticalElement): The element that was struck
        angle (float): Incoming direction in radians
        y_rel (float): Offset of the hit point from the optical axis

    Returns:
        float: Outgoing direction in radians
    """
    kind = element.kind
    focal_length = element.focal_length

    if kind is ElementKind.PLANE_MIRROR:
        return normalize_angle(math.pi - angle)

    if kind.is_mirror:
        if abs(focal_length) < FOCAL_LENGTH_EPSILON:
            # Flat limit of a curved mirror
            return normalize_angle(math.pi - angle)
        return normalize_angle(math.pi - angle + (-2 * y_rel) / focal_length)

    if abs(focal_length) < FOCAL_LENGTH_EPSILON:
        # Infinite power is not modeled; treat as plane glass
        return angle
    return angle + (-y_rel) / focal_length


class RayTracer:
    """
    Traces a single monochromatic ray across a bench of thin elements.

    The tracer holds only the bench geometry. Each call to trace() works on
    local state, so one instance can be shared and called repeatedly (or
    concurrently) with different inputs.

    Attributes:
        geometry (BenchGeometry): Bench bounds, element aperture and laser origin
    """

    def __init__(self, geometry=None):
        """
        Initialize the tracer.

        Args:
            geometry (BenchGeometry or None): Bench to trace on (default: the
                standard 800x400 bench)
        """
        self.geometry = geometry if geometry is not None else BenchGeometry()

    def trace(self, elements, angle_deg, wavelength_nm):
        """
        Trace the laser ray through the elements.

        This is the main entry point. It:
        1. Sorts the elements by position (stable for equal positions)
        2. Visits each element once, then the bench edge the ray points at
        3. Refracts or reflects the ray at every element it strikes
        4. Stops as soon as the ray leaves the bench

        Args:
            elements (list): OpticalElement objects, in any order. Not modified.
            angle_deg (float): Launch angle in degrees from the horizontal
            wavelength_nm (float): Laser wavelength, used for the ray color

        Returns:
            list: RaySegment objects forming a connected polyline from the
                  laser origin to the point where the ray leaves the bench
        """
        geometry = self.geometry
        color = wavelength_to_color(wavelength_nm)
        segments = []

        if geometry.is_outside(geometry.origin):
            logger.debug("Laser origin %s is off the bench, nothing to trace", geometry.origin)
            return segments
        if not math.isfinite(angle_deg):
            logger.warning("Cannot trace a ray at non-finite angle %r", angle_deg)
            return segments

        ordered = sorted(elements, key=lambda element: element.position)
        last_index = len(ordered) - 1
        cursor = point(geometry.origin['x'], geometry.origin['y'])
        angle = math.radians(angle_deg)
        logger.debug("Tracing %d element(s) from %s at %.3f deg, %s nm",
                     len(ordered), cursor, angle_deg, wavelength_nm)

        # The final index stands for the bench edge after the last element
        for index in range(len(ordered) + 1):
            element = ordered[index] if index <= last_index else None
            cos_a = math.cos(angle)
            sin_a = math.sin(angle)

            if abs(cos_a) < VERTICAL_RAY_EPSILON:
                edge_y = geometry.height if sin_a > 0 else 0
                self._emit(segments, cursor, point(cursor['x'], edge_y), color, wavelength_nm)
                logger.debug("Vertical ray runs to y=%s, stopping", edge_y)
                break

            boundary_x = element.position if element is not None else self._edge_toward(cos_a)
            t = (boundary_x - cursor['x']) / cos_a
            target = point(boundary_x, cursor['y'] + t * sin_a)

            if t < 0 and element is not None:
                # The ray is heading away from this element
                if index < last_index:
                    logger.debug("Element %s is behind the ray, skipping", element.id)
                    continue
                edge_x = self._edge_toward(cos_a)
                t_edge = (edge_x - cursor['x']) / cos_a
                target = point(edge_x, cursor['y'] + t_edge * sin_a)
                logger.debug("Last element %s is behind the ray, heading for x=%s", element.id, edge_x)

            if geometry.is_outside(target):
                exit_point = self._exit_point(cursor, target)
                self._emit(segments, cursor, exit_point, color, wavelength_nm)
                logger.debug("Ray leaves the bench at %s", exit_point)
                break

            cursor = self._emit(segments, cursor, target, color, wavelength_nm)

            if element is not None and self._strikes(element, target):
                y_rel = target['y'] - geometry.axis_y
                angle = deflect(element, angle, y_rel)
                logger.debug("Hit %s %s at y_rel=%.3f, new angle %.5f rad",
                             element.kind.value, element.id, y_rel, angle)
            elif element is not None:
                logger.debug("Missed %s %s at %s", element.kind.value, element.id, target)

        if segments and geometry.is_interior(segments[-1].end):
            last = segments[-1]
            self._emit(segments, last.end, self._extend_to_edge(last.end, last.angle),
                       color, wavelength_nm)
            logger.debug("Extended the final leg to the bench edge")

        return segments

    def _edge_toward(self, cos_a):
        """The vertical bench edge a ray with this horizontal component heads for."""
        return self.geometry.width if cos_a > 0 else 0

    def _strikes(self, element, p):
        """
        Check whether a boundary point lies on an element.

        Args:
            element (OpticalElement): The candidate element
            p (dict): Point on the element's vertical line (or a bench edge)

        Returns:
            bool: True if p is within the element's hit band and aperture
        """
        geometry = self.geometry
        return (element.position <= p['x'] <= element.position + geometry.element_thickness and
                geometry.aperture_top <= p['y'] <= geometry.aperture_bottom)

    def _emit(self, segments, start, end, color, wavelength_nm):
        """
        Append a segment unless it is degenerate.

        Returns:
            dict: The new cursor. A degenerate leg leaves the cursor on start,
                  which keeps the polyline exactly connected.
        """
        if distance(start, end) < MIN_RAY_SEGMENT_LENGTH:
            return start
        segments.append(RaySegment(start, end, color, wavelength_nm))
        return end

    def _exit_point(self, start, end):
        """
        Point where the leg start->end crosses the bench boundary.

        Args:
            start (dict): Point on the bench
            end (dict): Point off the bench

        Returns:
            dict: The crossing point, with the crossed coordinate set exactly
                  on the edge
        """
        width, height = self.geometry.width, self.geometry.height
        dx = end['x'] - start['x']
        dy = end['y'] - start['y']
        edge_x = width if end['x'] > width else (0 if end['x'] < 0 else None)
        edge_y = height if end['y'] > height else (0 if end['y'] < 0 else None)
        s_x = (edge_x - start['x']) / dx if edge_x is not None else math.inf
        s_y = (edge_y - start['y']) / dy if edge_y is not None else math.inf

        if s_x <= s_y:
            return point(edge_x, clamp(start['y'] + s_x * dy, 0, height))
        return point(clamp(start['x'] + s_y * dx, 0, width), edge_y)

    def _extend_to_edge(self, p, angle):
        """
        Extend a ray from p in direction angle to the first bench edge it meets.

        Args:
            p (dict): Point strictly inside the bench
            angle (float): Direction in radians

        Returns:
            dict: Point on the bench edge, clamped into bounds
        """
        width, height = self.geometry.width, self.geometry.height
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)

        if abs(cos_a) < VERTICAL_RAY_EPSILON:
            x, y = p['x'], (height if sin_a > 0 else 0)
        elif abs(sin_a) < VERTICAL_RAY_EPSILON:
            x, y = (width if cos_a > 0 else 0), p['y']
        else:
            edge_x = width if cos_a > 0 else 0
            edge_y = height if sin_a > 0 else 0
            tx = (edge_x - p['x']) / cos_a
            ty = (edge_y - p['y']) / sin_a
            if 0 < tx < ty:
                x, y = edge_x, p['y'] + tx * sin_a
            elif ty > 0:
                x, y = p['x'] + ty * cos_a, edge_y
            else:
                x, y = p['x'], p['y']

        return point(clamp(x, 0, width), clamp(y, 0, height))


def trace(elements, origin, angle_deg, wavelength_nm, bench_width, bench_height,
          element_aperture_height, element_thickness=None):
    """
    Trace one ray with all bench parameters passed explicitly.

    Args:
        elements (list): OpticalElement objects, in any order
        origin (dict): Launch point {'x': float, 'y': float}
        angle_deg (float): Launch angle in degrees
        wavelength_nm (float): Wavelength in nm
        bench_width (float): Bench width
        bench_height (float): Bench height
        element_aperture_height (float): Vertical aperture of every element
        element_thickness (float or None): Hit band width after each element's
            position (default: a tenth of the standard element width)

    Returns:
        list: RaySegment objects, see RayTracer.trace()
    """
    geometry = BenchGeometry(width=bench_width, height=bench_height,
                             aperture=element_aperture_height,
                             element_thickness=element_thickness, origin=origin)
    return RayTracer(geometry).trace(elements, angle_deg, wavelength_nm)
