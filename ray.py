import logging
import multiprocessing
import time

import numpy as np

from canvas import Canvas
from geometry import Sphere, intersect, hit
from materials import Material
from transforms import identity, invert, scaling
from utils import EPSILON, color, point, normalize, magnitude, dot, reflect, refract

"""
Core implementation of the ray tracer: rays, lights, the world and its recursive
shading algorithm, and the camera that turns pixels into rays.
"""

logger = logging.getLogger(__name__)

MAX_DEPTH = 5 # reflection/refraction bounces

BLACK = color(0, 0, 0)
BLACK.flags.writeable = False


class Ray:

    def __init__(self, origin, direction):
        """Create a ray with the given origin and direction.

        Parameters:
          origin : (4,) -- the start point of the ray
          direction : (4,) -- the direction of the ray, a vector (not necessarily normalized)
        """
        self.origin = np.array(origin, np.float64)
        self.direction = np.array(direction, np.float64)

    def position(self, t):
        return self.origin + self.direction * t

    def transform(self, m):
        """A new ray with origin and direction mapped by the matrix m."""
        return Ray(m @ self.origin, m @ self.direction)


class PointLight:
    def __init__(self, position, intensity):
        """Create a point light at given position and with given intensity"""
        self.position = position
        self.intensity = np.array(intensity, np.float64)


class Computations:
    """Everything shade_hit needs to know about one intersection."""

    def __init__(self, t, shape, point, eyev, normalv, reflectv, n1=1.0, n2=1.0):
        self.t = t
        self.shape = shape
        self.point = point
        self.eyev = eyev
        self.reflectv = reflectv
        self.n1 = n1
        self.n2 = n2

        # a normal facing away from the eye means we hit the surface from inside
        self.inside = dot(normalv, eyev) < 0
        if self.inside:
            normalv = -normalv
        self.normalv = normalv

        self.over_point = point + normalv * EPSILON
        self.under_point = point - normalv * EPSILON


def prepare_computations(i, ray, xs=None):
    """Precompute the shading state for intersection i of ray.

    Parameters:
      i : Intersection -- the hit being shaded
      ray : Ray -- the ray that produced it
      xs : list of Intersection -- all intersections along the ray, sorted by t;
           used to work out the refractive indices on either side of the hit
    """
    n1 = n2 = 1.0
    # shapes the ray is currently inside, most recently entered last
    containers = []
    for x in xs or [i]:
        n1 = containers[-1].material.refractive_index if containers else 1.0

        for k, shape in enumerate(containers):
            if shape.id == x.shape.id:
                del containers[k]
                break
        else:
            containers.append(x.shape)

        n2 = containers[-1].material.refractive_index if containers else 1.0

        if x.shape.id == i.shape.id and x.t == i.t:
            break

    p = ray.position(i.t)
    normalv = i.shape.normal_at(p, i)
    return Computations(i.t, i.shape, p, -ray.direction, normalv,
                        reflect(ray.direction, normalv), n1, n2)


def schlick(comps):
    """Schlick's approximation of the Fresnel reflectance at a hit."""
    cos = dot(comps.eyev, comps.normalv)
    if comps.n1 > comps.n2:
        n = comps.n1 / comps.n2
        sin2_t = n * n * (1.0 - cos * cos)
        if sin2_t > 1.0:
            return 1.0
        cos = np.sqrt(1.0 - sin2_t)
    r0 = ((comps.n1 - comps.n2) / (comps.n1 + comps.n2)) ** 2
    return r0 + (1 - r0) * (1 - cos) ** 5


class World:

    def __init__(self, objects=None, lights=None):
        """Create a world containing the given shapes and lights."""
        self.objects = [] if objects is None else list(objects)
        self.lights = [] if lights is None else list(lights)

    def add_object(self, shape):
        self.objects.append(shape)

    def add_light(self, light):
        self.lights.append(light)

    def intersect(self, ray):
        """Every intersection of the ray with the world, sorted by t."""
        xs = []
        for shape in self.objects:
            xs.extend(intersect(shape, ray))
        xs.sort(key=lambda i: i.t)
        return xs

    def is_shadowed(self, p):
        """True if something sits between p and any of the lights."""
        for light in self.lights:
            v = light.position - p
            distance = magnitude(v)
            h = hit(self.intersect(Ray(p, normalize(v))))
            if h is not None and h.t < distance:
                return True
        return False

    def color_at(self, ray, remaining=MAX_DEPTH):
        xs = self.intersect(ray)
        h = hit(xs)
        if h is None:
            return BLACK
        return self.shade_hit(prepare_computations(h, ray, xs), remaining)

    def shade_hit(self, comps, remaining=MAX_DEPTH):
        material = comps.shape.material

        # fully transparent surfaces don't cast shadows on themselves
        if material.transparency >= 1.0:
            shadowed = False
        else:
            shadowed = self.is_shadowed(comps.over_point)

        surface = np.zeros(3)
        for light in self.lights:
            surface = surface + material.lighting(
                comps.shape, light, comps.over_point, comps.eyev, comps.normalv, shadowed)

        reflected = self.reflected_color(comps, remaining)
        refracted = self.refracted_color(comps, remaining)

        if material.reflective > 0 and material.transparency > 0:
            reflectance = schlick(comps)
            return surface + reflected * reflectance + refracted * (1 - reflectance)
        return surface + reflected + refracted

    def reflected_color(self, comps, remaining=MAX_DEPTH):
        reflective = comps.shape.material.reflective
        if reflective == 0 or remaining <= 0:
            return BLACK
        reflect_ray = Ray(comps.over_point, comps.reflectv)
        return self.color_at(reflect_ray, remaining - 1) * reflective

    def refracted_color(self, comps, remaining=MAX_DEPTH):
        transparency = comps.shape.material.transparency
        if transparency == 0 or remaining <= 0:
            return BLACK
        direction = refract(comps.eyev, comps.normalv, comps.n1, comps.n2)
        if direction is None:
            # total internal reflection
            return BLACK
        refract_ray = Ray(comps.under_point, direction)
        return self.color_at(refract_ray, remaining - 1) * transparency


def default_world():
    """Two concentric spheres lit from the upper left front."""
    light = PointLight(point(-10, 10, -10), color(1, 1, 1))
    s1 = Sphere(material=Material(color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    s2 = Sphere(scaling(0.5, 0.5, 0.5), Material(color(0.8, 1.0, 0.6), diffuse=0.7, specular=0.2))
    return World([s1, s2], [light])


class Camera:

    def __init__(self, hsize, vsize, field_of_view, transform=None):
        """Create a camera with given viewing parameters.

        Parameters:
          hsize, vsize : int -- image size in pixels
          field_of_view : float -- angle across the wider image dimension, in radians
          transform : (4,4) -- world-to-camera view transform (see transforms.view_transform)
        """
        if hsize <= 0 or vsize <= 0:
            raise ValueError('image size must be positive, got %dx%d' % (hsize, vsize))
        if not 0 < field_of_view < np.pi:
            raise ValueError('field of view must be between 0 and pi, got %r' % (field_of_view,))
        self.hsize = hsize
        self.vsize = vsize
        self.field_of_view = field_of_view
        self.transform = identity() if transform is None else transform

        half_view = np.tan(field_of_view / 2.0)
        aspect = hsize / vsize
        if aspect >= 1:
            self.half_width = half_view
            self.half_height = half_view / aspect
        else:
            self.half_width = half_view * aspect
            self.half_height = half_view
        self.pixel_size = (self.half_width * 2.0) / hsize

    @property
    def transform(self):
        return self._transform

    @transform.setter
    def transform(self, m):
        self.inverse = invert(m)
        self._transform = m
        self.origin = self.inverse @ point(0, 0, 0)

    def ray_for_pixel(self, px, py):
        """The ray from the eye through the center of pixel (px, py)."""
        xoffset = (px + 0.5) * self.pixel_size
        yoffset = (py + 0.5) * self.pixel_size

        # the camera looks down -z, so +x is to the left
        world_x = self.half_width - xoffset
        world_y = self.half_height - yoffset

        pixel = self.inverse @ point(world_x, world_y, -1)
        return Ray(self.origin, normalize(pixel - self.origin))

    def render(self, world, depth=MAX_DEPTH, processes=0):
        return render_image(self, world, depth, processes)


def render_row(camera, world, y, depth=MAX_DEPTH):
    """Colors of one scanline, as a (hsize, 3) array."""
    row = np.zeros((camera.hsize, 3), np.float64)
    for x in range(camera.hsize):
        row[x] = world.color_at(camera.ray_for_pixel(x, y), depth)
    return row


# per-process render state, set once by the pool initializer
_worker_scene = None

def _init_worker(camera, world, depth):
    global _worker_scene
    _worker_scene = (camera, world, depth)

def _render_worker_row(y):
    camera, world, depth = _worker_scene
    return render_row(camera, world, y, depth)


def render_image(camera, world, depth=MAX_DEPTH, processes=0):
    """Render every pixel the camera sees into a Canvas.

    Parameters:
      camera : Camera -- viewing parameters
      world : World -- the scene; must not be modified while rendering
      depth : int -- reflection/refraction bounce budget per ray
      processes : int -- 0 renders in this process; otherwise the number of worker
                  processes (None for one per CPU) that render scanlines in parallel
    """
    image = Canvas(camera.hsize, camera.vsize)
    logger.info("rendering %dx%d image (depth %d, processes %s)",
                camera.hsize, camera.vsize, depth, processes)
    start = time.time()

    if processes == 0:
        for y in range(camera.vsize):
            logger.debug("rendering row %d/%d", y + 1, camera.vsize)
            image.pixels[y] = render_row(camera, world, y, depth)
    else:
        with multiprocessing.Pool(processes, _init_worker, (camera, world, depth)) as pool:
            rows = pool.map(_render_worker_row, range(camera.vsize))
        for y, row in enumerate(rows):
            image.pixels[y] = row

    logger.info("rendered in %.2f seconds", time.time() - start)
    return image
