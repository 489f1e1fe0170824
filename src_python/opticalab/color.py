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
Wavelength to display color conversion.

A piecewise-linear approximation of the visible spectrum: six bands produce
raw red/green/blue weights, an intensity factor fades the ends of the range
and a fixed gamma is applied before scaling to 0-255.
"""

from typing import NamedTuple

GAMMA = 0.8

# (start, end) of each band in nanometers
VIOLET_BLUE = (380, 440)
BLUE_CYAN = (440, 490)
CYAN_GREEN = (490, 510)
GREEN_YELLOW = (510, 580)
YELLOW_RED = (580, 645)
RED = (645, 780)

# Intensity is 1.0 between these and fades linearly to 0 at the range ends
FADE_IN_END = 420
FADE_OUT_START = 700


class RGBColor(NamedTuple):
    """An integer display color, each channel in 0-255."""
    r: int
    g: int
    b: int

    @property
    def css(self):
        """CSS/SVG color string, e.g. 'rgb(255, 0, 0)'."""
        return f'rgb({self.r}, {self.g}, {self.b})'

    def __str__(self):
        return self.css


def _rising(nm, band):
    start, end = band
    return (nm - start) / (end - start)


def _falling(nm, band):
    start, end = band
    return -(nm - end) / (end - start)


def _raw_weights(nm):
    """Raw (r, g, b) weights in [0, 1] before intensity and gamma."""
    if VIOLET_BLUE[0] <= nm < VIOLET_BLUE[1]:
        return _falling(nm, VIOLET_BLUE), 0.0, 1.0
    if BLUE_CYAN[0] <= nm < BLUE_CYAN[1]:
        return 0.0, _rising(nm, BLUE_CYAN), 1.0
    if CYAN_GREEN[0] <= nm < CYAN_GREEN[1]:
        return 0.0, 1.0, _falling(nm, CYAN_GREEN)
    if GREEN_YELLOW[0] <= nm < GREEN_YELLOW[1]:
        return _rising(nm, GREEN_YELLOW), 1.0, 0.0
    if YELLOW_RED[0] <= nm < YELLOW_RED[1]:
        return 1.0, _falling(nm, YELLOW_RED), 0.0
    if RED[0] <= nm <= RED[1]:
        return 1.0, 0.0, 0.0
    return 0.0, 0.0, 0.0


def intensity_factor(nm):
    """
    Perceptual brightness factor for a wavelength.

    Args:
        nm (float): Wavelength in nanometers

    Returns:
        float: 1.0 in the middle of the visible range, fading linearly to 0.0
               at 380 nm and 780 nm, and 0.0 outside the range.
    """
    if nm < VIOLET_BLUE[0] or nm > RED[1]:
        return 0.0
    if nm > FADE_OUT_START:
        return (RED[1] - nm) / (RED[1] - FADE_OUT_START)
    if nm < FADE_IN_END:
        return (nm - VIOLET_BLUE[0]) / (FADE_IN_END - VIOLET_BLUE[0])
    return 1.0


def wavelength_to_color(nm):
    """
    Map a wavelength to an RGB display color.

    Any number is accepted. Wavelengths outside the visible range come out
    black; those near the ends come out dimmed.

    Args:
        nm (float): Wavelength in nanometers

    Returns:
        RGBColor: The display color
    """
    factor = intensity_factor(nm)
    return RGBColor(*(round(255 * (weight * factor) ** GAMMA) for weight in _raw_weights(nm)))
