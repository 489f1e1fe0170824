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
Constants used throughout the optics bench.

The bench dimensions are the defaults of the interactive lab. Every layer
receives them through a BenchGeometry value, so nothing below is read as a
hidden global by the tracer.
"""

# Bench dimensions (bench units, one unit per SVG pixel)
BENCH_WIDTH = 800
BENCH_HEIGHT = 400

# The laser sits at the left edge, on the optical axis
LASER_ORIGIN_X = 50

# Nominal element footprint. The hit band used by the tracer is a tenth
# of the drawn width, starting at the element's position.
ELEMENT_WIDTH = 40
ELEMENT_HEIGHT = 160

# Focal length limits applied by every mutator (magnitude)
MIN_FOCAL_LENGTH = 10
MAX_FOCAL_LENGTH = 300
DEFAULT_FOCAL_LENGTH = 100

# New elements are spread out from the bench center by this step
NEW_ELEMENT_SPACING = 30

# Visible range accepted by the laser controls (nanometers)
MIN_WAVELENGTH = 380
MAX_WAVELENGTH = 780
GREEN_WAVELENGTH = 550  # Default laser wavelength

# |cos(angle)| below this is treated as a vertical ray
VERTICAL_RAY_EPSILON = 1e-6

# |focal length| below this makes a lens a pass-through
FOCAL_LENGTH_EPSILON = 1e-6

# Minimum ray segment length to avoid emitting degenerate legs
MIN_RAY_SEGMENT_LENGTH = 1e-6

# Radius of the focal point markers drawn on the axis
FOCAL_POINT_RADIUS = 8
