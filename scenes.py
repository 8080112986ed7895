import io

import numpy as np

from geometry import Sphere, Plane, Cube, Cylinder, Model, glass_sphere
from materials import Material
from patterns import StripePattern, GradientPattern, RingPattern, CheckerPattern, BlendPattern
from ray import Camera, PointLight, World, default_world, render_image, MAX_DEPTH
from transforms import chain, translation, scaling, rotation_x, rotation_y, rotation_z, view_transform
from utils import color, point, vector


class SceneDef(object):
    def __init__(self, camera, world):
        self.camera = camera
        self.world = world

    def render(self, output_path=None, depth=MAX_DEPTH, processes=0):
        """Render the scene; write a PNG if output_path is given, else return the Canvas."""
        canvas = render_image(self.camera, self.world, depth, processes)
        if output_path is None:
            return canvas
        canvas.save(output_path)


def DefaultWorldExample(hsize=160, vsize=90, field_of_view=np.pi / 3):
    camera = Camera(hsize, vsize, field_of_view,
                    view_transform(point(0, 1.5, -5), point(0, 0, 0), vector(0, 1, 0)))
    return SceneDef(camera=camera, world=default_world())


def GlassSpheresExample(hsize=160, vsize=90, field_of_view=np.pi / 3):
    floor = Plane(material=Material(
        pattern=CheckerPattern(color(0.15, 0.15, 0.15), color(0.85, 0.85, 0.85)),
        specular=0.0, reflective=0.1))

    # a glass ball with an air bubble inside it
    glass = glass_sphere(translation(0, 1, 0))
    glass.material.color = color(0.1, 0.1, 0.1)
    glass.material.diffuse = 0.1
    bubble = Sphere(chain(scaling(0.5, 0.5, 0.5), translation(0, 1, 0)), Material(
        color(1, 1, 1), ambient=0.0, diffuse=0.0, specular=0.9, shininess=300.0,
        reflective=0.9, transparency=0.9, refractive_index=1.0000034))

    red = Sphere(chain(scaling(0.6, 0.6, 0.6), translation(-1.8, 0.6, 2.5)),
                 Material(color(0.9, 0.2, 0.2), diffuse=0.7, specular=0.3))
    blue = Sphere(chain(scaling(0.6, 0.6, 0.6), translation(1.8, 0.6, 2.5)),
                  Material(color(0.2, 0.3, 0.9), diffuse=0.7, specular=0.3, reflective=0.3))

    world = World([floor, glass, bubble, red, blue],
                  [PointLight(point(-10, 10, -10), color(1, 1, 1))])
    camera = Camera(hsize, vsize, field_of_view,
                    view_transform(point(0, 2.5, -5), point(0, 1, 0), vector(0, 1, 0)))
    return SceneDef(camera=camera, world=world)


def PatternsExample(hsize=160, vsize=90, field_of_view=np.pi / 3):
    floor = Plane(material=Material(
        pattern=BlendPattern(StripePattern(color(0.9, 0.9, 0.9), color(0.3, 0.5, 0.3)),
                             StripePattern(color(0.9, 0.9, 0.9), color(0.3, 0.5, 0.3),
                                           rotation_y(np.pi / 2))),
        specular=0.0))
    ringed = Sphere(translation(-1.5, 1, 0.5), Material(
        pattern=RingPattern(color(0.8, 0.3, 0.1), color(1, 0.8, 0.4), scaling(5, 5, 5)),
        diffuse=0.7, specular=0.3))
    striped = Sphere(chain(scaling(0.5, 0.5, 0.5), translation(0, 0.5, -0.75)), Material(
        pattern=StripePattern(color(0.1, 0.4, 0.9), color(1, 1, 1),
                              chain(rotation_z(np.pi / 4), scaling(4, 4, 4))),
        diffuse=0.7, specular=0.3))
    box = Cube(chain(scaling(0.5, 0.5, 0.5), rotation_y(np.pi / 5), translation(1.5, 0.5, 0.5)),
               Material(pattern=GradientPattern(color(1, 0, 0), color(0, 0, 1),
                                                chain(translation(1, 0, 0), scaling(0.5, 1, 1))),
                        diffuse=0.7))
    post = Cylinder(0, 2, closed=True,
                    transform=chain(scaling(0.3, 1, 0.3), translation(0.5, 0, 2)),
                    material=Material(color(0.9, 0.9, 0.3), reflective=0.2))

    world = World([floor, ringed, striped, box, post],
                  [PointLight(point(-10, 10, -10), color(1, 1, 1))])
    camera = Camera(hsize, vsize, field_of_view,
                    view_transform(point(0, 2, -5), point(0, 0.8, 0), vector(0, 1, 0)))
    return SceneDef(camera=camera, world=world)


# an octahedron with per-vertex normals, so it loads as smooth triangles
OCTAHEDRON_OBJ = """\
# octahedron
v 1 0 0
v -1 0 0
v 0 1 0
v 0 -1 0
v 0 0 1
v 0 0 -1
vn 1 0 0
vn -1 0 0
vn 0 1 0
vn 0 -1 0
vn 0 0 1
vn 0 0 -1
f 1//1 3//3 5//5
f 3//3 2//2 5//5
f 2//2 4//4 5//5
f 4//4 1//1 5//5
f 3//3 1//1 6//6
f 2//2 3//3 6//6
f 4//4 2//2 6//6
f 1//1 4//4 6//6
"""

def MeshExample(hsize=160, vsize=90, field_of_view=np.pi / 3, obj_file=None):
    """A mesh standing on a checkered beach; obj_file defaults to a built-in octahedron."""
    if obj_file is None:
        obj_file = io.StringIO(OCTAHEDRON_OBJ)
    model = Model.from_obj(
        obj_file,
        transform=chain(rotation_x(-np.pi / 8), rotation_y(np.pi / 6), translation(0, 1, 0)),
        material=Material(color(0.9, 0.7, 0.3), ambient=0.2, specular=0.5, reflective=0.1))

    water = Plane(material=Material(pattern=CheckerPattern(color(0.2, 0.4, 0.8), color(0.9, 0.9, 1.0)),
                                    reflective=0.3))
    beach = Cube(chain(scaling(5, 1, 1), translation(0, 0, 4)),
                 Material(color(0.9, 0.85, 0.6), specular=0.1))

    world = World([model, water, beach], [PointLight(point(0, 20, -3), color(1, 1, 1))])
    camera = Camera(hsize, vsize, field_of_view,
                    view_transform(point(0, 3, -6), point(0, 1, 0), vector(0, 1, 0)))
    return SceneDef(camera=camera, world=world)


EXAMPLES = {
    'default': DefaultWorldExample,
    'glass': GlassSpheresExample,
    'patterns': PatternsExample,
    'mesh': MeshExample,
}
