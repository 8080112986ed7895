import logging
import os
import tempfile
import unittest
import numpy as np
from PIL import Image
import cli
from scenes import EXAMPLES, SceneDef


class TestScenes(unittest.TestCase):

    def test_examples_render(self):
        for name, build in EXAMPLES.items():
            scene = build(8, 6)
            self.assertIsInstance(scene, SceneDef)
            image = scene.render(depth=2)
            self.assertEqual(image.pixels.shape, (6, 8, 3))
            # every example puts something in front of the camera
            self.assertTrue(np.any(image.pixels > 0), name)

    def test_render_to_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'default.png')
            self.assertIsNone(EXAMPLES['default'](4, 3).render(path))
            self.assertTrue(os.path.exists(path))


class TestSetupLogging(unittest.TestCase):

    def test_one_handler_across_calls(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        root.handlers = []
        try:
            cli.setup_logging('WARNING')
            cli.setup_logging('DEBUG')
            self.assertEqual(len(root.handlers), 1)
            self.assertEqual(root.level, logging.DEBUG)
        finally:
            root.handlers = handlers
            root.setLevel(level)


class TestMain(unittest.TestCase):

    def test_writes_png(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, 'glass.png')
            status = cli.main(['--scene', 'glass', '--width', '5', '--height', '4',
                               '--depth', '2', '--output', path, '--log-level', 'WARNING'])
            self.assertEqual(status, 0)
            with Image.open(path) as im:
                self.assertEqual(im.size, (5, 4))

    def test_mesh_from_obj_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            obj = os.path.join(tmp, 'tri.obj')
            with open(obj, 'w') as f:
                f.write("v 0 1 0\nv -1 0 0\nv 1 0 0\nf 1 2 3\n")
            path = os.path.join(tmp, 'mesh.png')
            status = cli.main(['--scene', 'mesh', '--obj', obj, '--width', '4', '--height', '3',
                               '--output', path, '--log-level', 'WARNING'])
            self.assertEqual(status, 0)
            self.assertTrue(os.path.exists(path))

    def test_bad_mesh_fails(self):
        with tempfile.TemporaryDirectory() as tmp:
            obj = os.path.join(tmp, 'bad.obj')
            with open(obj, 'w') as f:
                f.write("v 0 1 0\nf 1 2 3\n")
            with self.assertLogs('cli', level='ERROR'):
                status = cli.main(['--scene', 'mesh', '--obj', obj, '--log-level', 'WARNING'])
            self.assertEqual(status, 1)

    def test_missing_mesh_fails(self):
        with self.assertLogs('cli', level='ERROR'):
            status = cli.main(['--scene', 'mesh', '--obj', '/nonexistent/model.obj', '--log-level', 'WARNING'])
        self.assertEqual(status, 1)


if __name__ == '__main__':
    unittest.main()
