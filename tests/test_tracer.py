"""Tests for sequential ray tracing across the bench.

Covers:
- Empty bench exits (horizontal, vertical, oblique)
- Plane, curved mirror and thin lens deflection
- Missed and skipped elements
- No re-entry into elements already passed
- Degenerate inputs (zero focal length, duplicate positions, bad origin)
- Polyline connectivity and idempotence
"""

import math

import pytest

from opticalab.color import wavelength_to_color
from opticalab.elements import ElementKind, OpticalElement
from opticalab.geometry import BenchGeometry, point
from opticalab.tracer import RayTracer, deflect, normalize_angle, trace


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _trace(elements, angle=0.0, origin=(50, 200), wavelength=550):
    """Trace on the standard 800x400 bench with a 160 unit aperture."""
    return trace(elements, point(*origin), angle, wavelength, 800, 400, 160)


def _element(kind, position, focal_length=None):
    return OpticalElement(kind, position, focal_length)


def _assert_connected(segments):
    for previous, following in zip(segments, segments[1:]):
        assert previous.end == following.start


def _assert_direction(segment, angle, abs_tol=1e-9):
    dx, dy = segment.direction
    assert dx == pytest.approx(math.cos(angle), abs=abs_tol)
    assert dy == pytest.approx(math.sin(angle), abs=abs_tol)


# ---------------------------------------------------------------------------
# Empty bench
# ---------------------------------------------------------------------------

class TestEmptyBench:

    def test_horizontal_exit(self):
        segments = _trace([], angle=0)
        assert len(segments) == 1
        assert segments[0].start == {'x': 50, 'y': 200}
        assert segments[0].end['x'] == pytest.approx(800)
        assert segments[0].end['y'] == pytest.approx(200)

    def test_backwards_exit(self):
        segments = _trace([], angle=180)
        assert len(segments) == 1
        assert segments[0].end['x'] == pytest.approx(0)
        assert segments[0].end['y'] == pytest.approx(200)

    @pytest.mark.parametrize("angle, edge_y", [(90, 400), (-90, 0)])
    def test_vertical_exit(self, angle, edge_y):
        segments = _trace([], angle=angle)
        assert len(segments) == 1
        assert segments[0].end == {'x': 50, 'y': edge_y}

    def test_oblique_exit_is_clamped_to_the_bench(self):
        segments = _trace([], angle=30)
        assert len(segments) == 1
        end = segments[0].end
        assert end['y'] == pytest.approx(400)
        assert end['x'] == pytest.approx(50 + 200 / math.tan(math.radians(30)))

    def test_oblique_exit_through_the_side(self):
        segments = _trace([], angle=150)
        assert len(segments) == 1
        end = segments[0].end
        assert end['x'] == pytest.approx(0)
        assert end['y'] == pytest.approx(200 + 50 * math.tan(math.radians(30)))


# ---------------------------------------------------------------------------
# Mirrors
# ---------------------------------------------------------------------------

class TestMirrors:

    def test_plane_mirror_reverses_the_ray(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 400)])
        assert len(segments) == 2
        assert segments[0].end == {'x': 400, 'y': 200}
        _assert_direction(segments[1], math.pi)
        assert segments[1].end['x'] == pytest.approx(0)
        assert segments[1].end['y'] == pytest.approx(200)

    def test_plane_mirror_reflects_oblique_ray(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 400)], angle=10)
        assert len(segments) == 2
        _assert_direction(segments[1], math.pi - math.radians(10))

    def test_concave_mirror_adds_double_deflection(self):
        mirror = _element(ElementKind.CONCAVE_MIRROR, 400, 100)
        segments = _trace([mirror], origin=(50, 250))
        # y_rel = 50, delta = -2 * 50 / 100
        _assert_direction(segments[1], math.pi - 1.0)
        assert segments[1].end['y'] == pytest.approx(400)

    def test_convex_mirror_adds_double_deflection(self):
        mirror = _element(ElementKind.CONVEX_MIRROR, 400, -100)
        segments = _trace([mirror], origin=(50, 250))
        _assert_direction(segments[1], math.pi + 1.0)
        assert segments[1].end['y'] == pytest.approx(0)

    def test_zero_focal_length_mirror_acts_flat(self):
        mirror = _element(ElementKind.CONCAVE_MIRROR, 400, 0.0)
        segments = _trace([mirror], origin=(50, 250))
        _assert_direction(segments[1], math.pi)


# ---------------------------------------------------------------------------
# Lenses
# ---------------------------------------------------------------------------

class TestLenses:

    def test_on_axis_ray_is_undeviated(self):
        segments = _trace([_element(ElementKind.CONVEX_LENS, 400, 100)])
        assert len(segments) == 2
        _assert_direction(segments[1], 0.0)

    def test_convex_lens_bends_toward_axis(self):
        segments = _trace([_element(ElementKind.CONVEX_LENS, 400, 100)], origin=(50, 250))
        assert segments[0].end == {'x': 400, 'y': 250}
        # y_rel = 50 above the axis, delta = -50 / 100
        assert segments[1].angle == pytest.approx(-0.5)
        assert segments[1].dy < 0
        assert segments[1].end['x'] == pytest.approx(800)
        assert segments[1].end['y'] == pytest.approx(250 + 400 * math.tan(-0.5))

    def test_concave_lens_bends_away_from_axis(self):
        segments = _trace([_element(ElementKind.CONCAVE_LENS, 400, -100)], origin=(50, 250))
        assert segments[1].angle == pytest.approx(0.5)
        assert segments[1].end['y'] == pytest.approx(400)

    def test_deflection_scales_with_focal_length(self):
        segments = _trace([_element(ElementKind.CONVEX_LENS, 400, 250)], origin=(50, 250))
        assert segments[1].angle == pytest.approx(-50 / 250)

    def test_zero_focal_length_lens_passes_through(self):
        segments = _trace([_element(ElementKind.CONVEX_LENS, 400, 0.0)], origin=(50, 250))
        assert len(segments) == 2
        _assert_direction(segments[1], 0.0)

    def test_two_lenses_in_sequence(self):
        elements = [
            _element(ElementKind.CONVEX_LENS, 300, 200),
            _element(ElementKind.CONCAVE_LENS, 500, -200),
        ]
        segments = _trace(elements, origin=(50, 240))
        assert len(segments) == 3
        assert segments[1].angle == pytest.approx(-40 / 200)
        y_rel = segments[1].end['y'] - 200
        assert segments[2].angle == pytest.approx(-40 / 200 + y_rel / 200)


# ---------------------------------------------------------------------------
# Misses, skips and ordering
# ---------------------------------------------------------------------------

class TestBoundaries:

    def test_ray_outside_aperture_misses(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 400)], origin=(50, 350))
        assert len(segments) == 2
        assert segments[0].end == {'x': 400, 'y': 350}
        _assert_direction(segments[1], 0.0)
        assert segments[1].end['x'] == pytest.approx(800)

    def test_aperture_edge_counts_as_hit(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 400)], origin=(50, 280))
        _assert_direction(segments[1], math.pi)

    def test_element_behind_the_laser_is_skipped(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 20)])
        assert len(segments) == 1
        assert segments[0].end['x'] == pytest.approx(800)

    def test_several_elements_behind_the_laser(self):
        elements = [_element(ElementKind.PLANE_MIRROR, 20), _element(ElementKind.PLANE_MIRROR, 30)]
        segments = _trace(elements)
        assert len(segments) == 1
        assert segments[0].end['x'] == pytest.approx(800)

    def test_elements_ahead_of_a_backward_ray_are_skipped(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 400)], angle=180)
        assert len(segments) == 1
        assert segments[0].end['x'] == pytest.approx(0)

    def test_elements_are_visited_in_position_order(self):
        elements = [_element(ElementKind.PLANE_MIRROR, 600), _element(ElementKind.CONVEX_LENS, 300)]
        segments = _trace(elements)
        assert segments[0].end == {'x': 300, 'y': 200}
        assert segments[1].end == {'x': 600, 'y': 200}

    def test_duplicate_positions_are_each_visited(self):
        elements = [_element(ElementKind.PLANE_MIRROR, 400), _element(ElementKind.PLANE_MIRROR, 400)]
        segments = _trace(elements)
        # The second mirror turns the ray around again at the same point
        assert len(segments) == 2
        assert segments[1].start == {'x': 400, 'y': 200}
        assert segments[1].end['x'] == pytest.approx(800)

    def test_reflected_ray_does_not_reenter_passed_elements(self):
        elements = [
            _element(ElementKind.CONVEX_LENS, 300, 300),
            _element(ElementKind.PLANE_MIRROR, 500),
        ]
        segments = _trace(elements, origin=(50, 210))
        assert len(segments) == 3
        reflected = segments[-1]
        assert reflected.start['x'] == 500
        assert reflected.end['x'] == pytest.approx(0)
        # Still inside the lens aperture on the way back, but not deflected
        y_at_lens = reflected.start['y'] + reflected.dy * (200 / 500)
        assert 120 <= y_at_lens <= 280
        _assert_direction(reflected, math.pi - segments[1].angle)

    def test_steep_ray_leaves_before_reaching_element(self):
        segments = _trace([_element(ElementKind.CONVEX_LENS, 400)], angle=80)
        assert len(segments) == 1
        assert segments[0].end['y'] == pytest.approx(400)
        assert segments[0].end['x'] == pytest.approx(50 + 200 / math.tan(math.radians(80)))

    def test_vertical_ray_ignores_elements(self):
        segments = _trace([_element(ElementKind.PLANE_MIRROR, 50)], angle=90)
        assert len(segments) == 1
        assert segments[0].end == {'x': 50, 'y': 400}


# ---------------------------------------------------------------------------
# Degenerate input and output properties
# ---------------------------------------------------------------------------

class TestDegenerateInput:

    def test_origin_outside_bench_gives_no_segments(self):
        assert _trace([], origin=(-10, 200)) == []
        assert _trace([_element(ElementKind.PLANE_MIRROR, 400)], origin=(50, 500)) == []

    def test_non_finite_angle_gives_no_segments(self):
        assert _trace([], angle=math.nan) == []

    def test_out_of_range_wavelength_is_black(self):
        segments = _trace([], wavelength=300)
        assert segments[0].color.css == 'rgb(0, 0, 0)'


SCENE = [
    OpticalElement(ElementKind.CONVEX_LENS, 200, 80),
    OpticalElement(ElementKind.CONCAVE_LENS, 350, -120),
    OpticalElement(ElementKind.CONCAVE_MIRROR, 600, 150),
]


class TestTraceProperties:

    @pytest.mark.parametrize("angle", [-170, -90, -45, -10, -3, 0, 3, 10, 45, 90, 135, 180])
    def test_polyline_is_connected_and_on_bench(self, angle):
        segments = _trace(SCENE, angle=angle, origin=(50, 230))
        assert segments
        assert segments[0].start == {'x': 50, 'y': 230}
        _assert_connected(segments)
        bench = BenchGeometry()
        for segment in segments:
            assert bench.contains(segment.end)
            assert segment.length > 0

    def test_every_segment_carries_the_laser_color(self):
        segments = _trace(SCENE, origin=(50, 230), wavelength=650)
        for segment in segments:
            assert segment.color == wavelength_to_color(650)
            assert segment.wavelength == 650

    def test_idempotent(self):
        first = _trace(SCENE, angle=3, origin=(50, 230))
        second = _trace(SCENE, angle=3, origin=(50, 230))
        assert first == second

    def test_input_is_not_modified(self):
        elements = [
            OpticalElement(ElementKind.PLANE_MIRROR, 600, id='b'),
            OpticalElement(ElementKind.CONVEX_LENS, 300, 90, id='a'),
        ]
        snapshot = [element.copy() for element in elements]
        _trace(elements, origin=(50, 230))
        assert elements == snapshot

    @pytest.mark.parametrize("angle", [-60, -30, -7, 7, 30, 60, 120, 170])
    def test_last_point_is_exactly_on_an_edge(self, angle):
        end = _trace(SCENE, angle=angle, origin=(50, 230))[-1].end
        assert end['x'] in (0, 800) or end['y'] in (0, 400)

    def test_bounded_number_of_segments(self):
        segments = _trace(SCENE, angle=2, origin=(50, 230))
        assert len(segments) <= len(SCENE) + 2


class TestRayTracer:

    def test_default_geometry(self):
        segments = RayTracer().trace([], 0, 550)
        assert segments[0].start == {'x': 50, 'y': 200.0}
        assert segments[0].end['x'] == pytest.approx(800)

    def test_custom_geometry_and_hit_band(self):
        geometry = BenchGeometry(width=400, height=200, aperture=20, element_thickness=0.0,
                                 origin=point(10, 100))
        segments = RayTracer(geometry).trace([OpticalElement(ElementKind.PLANE_MIRROR, 200)], 0, 550)
        assert segments[0].end == {'x': 200, 'y': 100}
        _assert_direction(segments[1], math.pi)

    @pytest.mark.parametrize("start, angle, expected", [
        ((400, 200), 0.0, (800, 200)),
        ((400, 200), math.pi / 2, (400, 400)),
        ((400, 200), math.pi / 4, (600, 400)),
        ((400, 200), math.pi + 0.1, (0, 200 - 400 * math.tan(0.1))),
    ])
    def test_extend_to_edge(self, start, angle, expected):
        end = RayTracer()._extend_to_edge(point(*start), angle)
        assert end['x'] == pytest.approx(expected[0])
        assert end['y'] == pytest.approx(expected[1])

    @pytest.mark.parametrize("end, edge", [
        ((800, -233.0), ('y', 0)),
        ((800, 633.0), ('y', 400)),
        ((-10, 190.0), ('x', 0)),
        ((900, 150.0), ('x', 800)),
        ((900, -500.0), ('y', 0)),
    ])
    def test_exit_point_lies_exactly_on_the_crossed_edge(self, end, edge):
        exit_point = RayTracer()._exit_point(point(50, 200), point(*end))
        key, value = edge
        assert exit_point[key] == value
        assert BenchGeometry().contains(exit_point)


class TestDeflect:

    def test_plane_mirror_result_is_normalized(self):
        mirror = OpticalElement(ElementKind.PLANE_MIRROR, 400)
        assert deflect(mirror, math.pi + 0.5, 30) == pytest.approx(2 * math.pi - 0.5)

    def test_plane_mirror_ignores_offset(self):
        mirror = OpticalElement(ElementKind.PLANE_MIRROR, 400)
        assert deflect(mirror, 0.2, 70) == pytest.approx(math.pi - 0.2)

    def test_lens_is_not_normalized(self):
        lens = OpticalElement(ElementKind.CONVEX_LENS, 400, 10)
        assert deflect(lens, 0.0, 80) == pytest.approx(-8.0)

    def test_normalize_angle(self):
        assert normalize_angle(-1e-17) == 0.0
        assert normalize_angle(3 * math.pi) == pytest.approx(math.pi)
        assert 0 <= normalize_angle(-7.0) < 2 * math.pi
