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
Command line entry point: trace a scene file and print or render the result.
"""

import argparse
import json
import logging
import sys

from .scene import Scene
from .svg_renderer import SVGRenderer

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """
    Parse command line arguments.

    Args:
        argv (list or None): Arguments without the program name (default: sys.argv[1:])

    Returns:
        argparse.Namespace: Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='opticalab',
        description='Trace a laser ray through lenses and mirrors on an optical bench.',
    )
    parser.add_argument('scene', help='Scene JSON file (bench, laser and elements)')
    parser.add_argument('--angle', type=float, default=None,
                        help='Override the laser angle in degrees')
    parser.add_argument('--wavelength', type=float, default=None,
                        help='Override the laser wavelength in nm (380-780)')
    parser.add_argument('--svg', metavar='OUT', default=None,
                        help='Write the rendered bench to this SVG file instead of printing segments')
    parser.add_argument('--json', action='store_true',
                        help='Print the segments as a JSON list')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser.parse_args(argv)


def load_scene(path):
    """
    Read a scene file.

    Args:
        path (str): Path to a JSON scene file

    Returns:
        Scene: The loaded scene
    """
    logger.info("Loading scene from %s", path)
    with open(path, encoding='utf-8') as handle:
        return Scene.from_json(json.load(handle))


def format_segment(segment):
    return (f"{segment.start['x']:.2f},{segment.start['y']:.2f} -> "
            f"{segment.end['x']:.2f},{segment.end['y']:.2f} {segment.color.css}")


def run(args):
    """
    Trace the scene described by the parsed arguments.

    Args:
        args (argparse.Namespace): Parsed arguments

    Returns:
        int: Process exit status
    """
    scene = load_scene(args.scene)
    if args.angle is not None:
        scene.set_laser_angle(args.angle)
    if args.wavelength is not None:
        scene.set_wavelength(args.wavelength)

    segments = scene.trace()
    if scene.warning:
        logger.warning(scene.warning)

    if args.svg:
        renderer = SVGRenderer(scene.geometry)
        renderer.draw_scene(scene, segments)
        renderer.save(args.svg)
        logger.info("Wrote %d segment(s) to %s", len(segments), args.svg)
    elif args.json:
        print(json.dumps([segment.to_json() for segment in segments], indent=2))
    else:
        for segment in segments:
            print(format_segment(segment))
    return 0


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )
    try:
        return run(args)
    except (OSError, ValueError, KeyError) as exc:
        # json.JSONDecodeError is a ValueError
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
