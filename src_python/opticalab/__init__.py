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
Opticalab: a virtual optics bench for tracing a laser through lenses and mirrors.
"""

from .color import RGBColor, wavelength_to_color
from .elements import ElementKind, OpticalElement
from .geometry import BenchGeometry
from .scene import Scene
from .segment import RaySegment
from .tracer import RayTracer, trace

__all__ = [
    'BenchGeometry',
    'ElementKind',
    'OpticalElement',
    'RGBColor',
    'RaySegment',
    'RayTracer',
    'Scene',
    'trace',
    'wavelength_to_color',
]
