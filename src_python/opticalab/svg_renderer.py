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

import svgwrite

from .constants import FOCAL_POINT_RADIUS
from .elements import ElementKind

# Body color per kind, used for both fill and outline
CYAN = '#22d3ee'
PINK = '#ec4899'
GRAY = '#969696'
BODY_COLORS = {
    ElementKind.CONVEX_LENS: CYAN,
    ElementKind.CONCAVE_LENS: PINK,
    ElementKind.CONVEX_MIRROR: CYAN,
    ElementKind.CONCAVE_MIRROR: PINK,
    ElementKind.PLANE_MIRROR: GRAY,
}
FOCAL_POINT_COLOR = '#ffff00'
LASER_COLOR = '#ff0000'


def curve_bulge(focal_length):
    """How far a drawn surface curve bows out; stronger elements bow more."""
    return min(40, 5000 / abs(focal_length)) if focal_length else 40


class SVGRenderer:
    """
    SVG renderer for the optics bench.

    The SVG is organized into three layers:
    - objects: Bench decorations and optical elements (below rays)
    - rays: The traced laser path
    - labels: Text annotations (above everything)

    Attributes:
        geometry (BenchGeometry): Bench being drawn
        dwg (svgwrite.Drawing): The SVG drawing object
        layer_objects (svgwrite.Group): Group for object elements
        layer_rays (svgwrite.Group): Group for ray elements
        layer_labels (svgwrite.Group): Group for label elements
    """

    def __init__(self, geometry, background='black'):
        """
        Initialize the SVG renderer.

        Args:
            geometry (BenchGeometry): Bench dimensions; the viewBox covers the bench
            background (str): Background fill color (default: 'black')
        """
        self.geometry = geometry
        width, height = geometry.width, geometry.height

        # profile='tiny' disables strict validation of presentation attributes
        self.dwg = svgwrite.Drawing(size=(f'{width}px', f'{height}px'), profile='tiny')
        self.dwg.viewbox(0, 0, width, height)

        self.dwg.add(self.dwg.rect(insert=(0, 0), size=(width, height), fill=background))

        # Create layers as groups (bottom to top)
        self.layer_objects = self.dwg.add(self.dwg.g(id='objects'))
        self.layer_rays = self.dwg.add(self.dwg.g(id='rays'))
        self.layer_labels = self.dwg.add(self.dwg.g(id='labels'))

    def draw_scene(self, scene, segments=None):
        """
        Draw a whole scene: axis, laser, elements and the traced ray.

        Args:
            scene (Scene): Scene to draw
            segments (list or None): Traced segments; traced from the scene if None
        """
        if segments is None:
            segments = scene.trace()
        self.draw_optical_axis()
        self.draw_laser(scene.laser_angle)
        for index, segment in enumerate(segments):
            self.draw_ray_segment(segment, index)
        for element in scene.elements:
            self.draw_element(element)

    def draw_optical_axis(self):
        axis_y = self.geometry.axis_y
        self.layer_objects.add(self.dwg.line(
            start=(0, axis_y),
            end=(self.geometry.width, axis_y),
            stroke=CYAN,
            stroke_opacity=0.3,
            stroke_dasharray='5,5'
        ))

    def draw_laser(self, angle_deg):
        """
        Draw the laser housing at the launch point, rotated to the launch angle.

        Args:
            angle_deg (float): Launch angle in degrees
        """
        origin = self.geometry.origin
        group = self.dwg.g(transform=f"translate({origin['x']}, {origin['y']}) rotate({angle_deg})")
        group.add(self.dwg.rect(insert=(-15, -10), size=(30, 20), fill=LASER_COLOR, fill_opacity=0.7, rx=3))
        group.add(self.dwg.rect(insert=(10, -3), size=(20, 6), fill='#ff6464', fill_opacity=0.8, rx=2))
        self.layer_objects.add(group)

    def draw_ray_segment(self, segment, index=0, opacity=0.8, stroke_width=2.5):
        """
        Draw one leg of the traced ray.

        Args:
            segment (RaySegment): The segment to draw
            index (int): Position of the segment in the trace, used in its id
            opacity (float): Opacity 0.0-1.0 (default: 0.8)
            stroke_width (float): Line width in pixels (default: 2.5)
        """
        p1 = segment.start
        p2 = segment.end

        # Skip segments with invalid coordinates
        if not all(math.isfinite(value) for value in (p1['x'], p1['y'], p2['x'], p2['y'])):
            return

        ray_id = f'ray-{index}'
        if segment.wavelength is not None:
            ray_id += f'-w{segment.wavelength:.0f}'

        self.layer_rays.add(self.dwg.line(
            start=(p1['x'], p1['y']),
            end=(p2['x'], p2['y']),
            stroke=segment.color.css,
            stroke_width=stroke_width,
            stroke_opacity=opacity,
            stroke_linecap='round',
            id=ray_id
        ))

    def draw_element(self, element):
        """
        Draw an element body, its kind glyph, focal points and label.

        Args:
            element (OpticalElement): The element to draw
        """
        geometry = self.geometry
        x = element.position
        top = geometry.aperture_top
        color = BODY_COLORS[element.kind]

        self.layer_objects.add(self.dwg.rect(
            insert=(x - geometry.element_width / 2, top),
            size=(geometry.element_width, geometry.aperture),
            fill=color,
            fill_opacity=0.5,
            stroke=color,
            stroke_opacity=0.8,
            stroke_width=1.5,
            rx=3
        ))

        p1 = {'x': x, 'y': top}
        p2 = {'x': x, 'y': geometry.aperture_bottom}
        if element.kind.is_lens:
            self.draw_lens(x, element.focal_length)
        elif element.kind is ElementKind.PLANE_MIRROR:
            self.draw_line_segment(p1, p2, color='white', stroke_width=3)
        else:
            # Convex mirrors bow toward +x, concave ones toward -x
            bulge = curve_bulge(element.focal_length)
            if element.kind is ElementKind.CONCAVE_MIRROR:
                bulge = -bulge
            self._draw_curve(x, bulge)

        focal_points = element.focal_points()
        if focal_points is not None:
            for focal_x in focal_points:
                self.draw_point({'x': focal_x, 'y': geometry.axis_y},
                                color=FOCAL_POINT_COLOR, radius=FOCAL_POINT_RADIUS, label='F')

        self.layer_labels.add(self.dwg.text(
            element.kind.value,
            insert=(x, top - 5),
            fill='gray',
            font_size='10px',
            font_family='sans-serif',
            text_anchor='middle'
        ))

    def _draw_curve(self, x, bulge):
        """Quadratic curve across the aperture at x, bowing by bulge."""
        geometry = self.geometry
        d = (f"M {x},{geometry.aperture_top} "
             f"Q {x + bulge},{geometry.axis_y} {x},{geometry.aperture_bottom}")
        self.layer_objects.add(self.dwg.path(d=d, stroke='white', stroke_width=3, fill='none'))

    def draw_point(self, point, color='white', radius=3, label=None):
        """
        Draw a point (circle).

        Args:
            point (dict): Point with 'x' and 'y' keys
            color (str): Fill color (default: 'white')
            radius (float): Circle radius in pixels (default: 3)
            label (str or None): Optional text label shown below the point
        """
        self.layer_objects.add(self.dwg.circle(
            center=(point['x'], point['y']),
            r=radius,
            fill=color,
            fill_opacity=0.7,
            stroke='white',
            stroke_width=1
        ))

        if label:
            self.layer_labels.add(self.dwg.text(
                label,
                insert=(point['x'], point['y'] + radius + 10),
                fill=color,
                font_size='10px',
                font_family='sans-serif',
                text_anchor='middle'
            ))

    def draw_line_segment(self, p1, p2, color='gray', stroke_width=2):
        """
        Draw a line segment (for element glyphs).

        Args:
            p1 (dict): Start point with 'x' and 'y' keys
            p2 (dict): End point with 'x' and 'y' keys
            color (str): Stroke color (default: 'gray')
            stroke_width (float): Line width in pixels (default: 2)
        """
        self.layer_objects.add(self.dwg.line(
            start=(p1['x'], p1['y']),
            end=(p2['x'], p2['y']),
            stroke=color,
            stroke_width=stroke_width
        ))

    def draw_lens(self, x, focal_length, color='white'):
        """
        Draw a thin lens glyph across the aperture at x.

        A converging lens gets arrowheads pointing away from the axis at both
        ends, a diverging one gets them pointing back toward the axis.

        Args:
            x (float): Element position
            focal_length (float): Signed focal length (positive=converging)
            color (str): Glyph color (default: 'white')
        """
        geometry = self.geometry
        top, bottom = geometry.aperture_top, geometry.aperture_bottom
        self.draw_line_segment({'x': x, 'y': top}, {'x': x, 'y': bottom}, color=color, stroke_width=3)

        # Arrowheads scale with the drawn element body
        size = geometry.element_width / 4
        if focal_length > 0:
            self._draw_arrowhead(x, top, top + size, size, color)
            self._draw_arrowhead(x, bottom, bottom - size, size, color)
        else:
            self._draw_arrowhead(x, top + size, top, size, color)
            self._draw_arrowhead(x, bottom - size, bottom, size, color)

    def _draw_arrowhead(self, x, tip_y, base_y, size, color):
        """Triangle with its tip at (x, tip_y) and a base of width 2*size at base_y."""
        points = [(x, tip_y), (x - size, base_y), (x + size, base_y)]
        self.layer_objects.add(self.dwg.polygon(points=points, fill=color))

    def save(self, filename):
        """Write the drawing to filename."""
        self.dwg.saveas(filename)

    def to_string(self):
        """The drawing as an SVG document string (no XML declaration)."""
        return self.dwg.tostring()
