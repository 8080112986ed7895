import argparse
import logging
import sys
import time

import numpy as np

from ray import render_image, MAX_DEPTH
from scenes import EXAMPLES
from transforms import DegenerateTransformError
from utils import MalformedMeshError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


def setup_logging(level="INFO"):
    """Send log records from every module to the console."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root


def render(camera, world, output_path=None, depth=MAX_DEPTH, processes=0, show=False):
    """Render a scene, then save and/or display it.  Returns the Canvas."""
    canvas = render_image(camera, world, depth, processes)
    if output_path is not None:
        canvas.save(output_path)
        logger.info("wrote %s", output_path)
    if show:
        canvas.show()
    return canvas


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render one of the example scenes.")
    parser.add_argument('--scene', choices=sorted(EXAMPLES), default='default')
    parser.add_argument('--obj', help="OBJ file for the mesh scene (default: built-in octahedron)")
    parser.add_argument('--width', type=int, default=160)
    parser.add_argument('--height', type=int, default=90)
    parser.add_argument('--fov', type=float, default=np.pi / 3, help="field of view in radians")
    parser.add_argument('--depth', type=int, default=MAX_DEPTH, help="reflection/refraction bounces")
    parser.add_argument('--processes', type=int, default=0,
                        help="worker processes; 0 renders in this process, -1 uses one per CPU")
    parser.add_argument('--output', default=None, help="PNG file to write")
    parser.add_argument('--show', action='store_true', help="display the result in a window")
    parser.add_argument('--log-level', default='INFO')
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        if args.scene == 'mesh' and args.obj:
            with open(args.obj) as f:
                scene = EXAMPLES['mesh'](args.width, args.height, args.fov, obj_file=f)
        else:
            scene = EXAMPLES[args.scene](args.width, args.height, args.fov)
    except (MalformedMeshError, DegenerateTransformError, OSError, ValueError) as e:
        logger.error("could not build scene %r: %s", args.scene, e)
        return 1

    if args.output is None and not args.show:
        args.output = '%s.png' % args.scene

    start_time = time.time()
    processes = None if args.processes < 0 else args.processes
    render(scene.camera, scene.world, args.output, args.depth, processes, args.show)
    logger.info("total time %.2f seconds", time.time() - start_time)
    return 0


if __name__ == '__main__':
    sys.exit(main())
