import itertools
import logging

import numpy as np

from materials import Material
from transforms import identity, invert, transpose
from utils import EPSILON, point, vector, normalize, dot, cross, equals, read_obj

logger = logging.getLogger(__name__)


class Intersection:
    def __init__(self, shape, t, u=None, v=None, child=None):
        """Create an Intersection with the given data.

        Parameters:
          shape : Shape -- the shape that was hit
          t : float -- the t value of the intersection along the ray
          u, v : float -- barycentric coordinates of the hit, for triangle-like shapes
          child : Shape -- for composite shapes, the part that was actually hit
        """
        self.shape = shape
        self.t = float(t)
        self.u = u
        self.v = v
        self.child = child

    def __repr__(self):
        return 'Intersection(%r, %g)' % (self.shape, self.t)


def intersect(shape, ray):
    """All intersections of a world-space ray with a shape, in no particular order."""
    return shape.local_intersect(ray.transform(shape.inverse))

def hit(intersections):
    """The visible intersection: smallest t greater than zero, or None."""
    visible = [i for i in intersections if i.t > 0]
    if not visible:
        return None
    return min(visible, key=lambda i: i.t)


class Shape:
    """Common base for everything that can be placed in a World.

    Subclasses implement local_intersect and local_normal_at in object space;
    the conversion to and from world space happens here.
    """

    _ids = itertools.count(1)

    def __init__(self, transform=None, material=None):
        self.id = next(Shape._ids)
        self.transform = identity() if transform is None else transform
        self.material = Material() if material is None else material

    def __repr__(self):
        return '%s(id=%d)' % (type(self).__name__, self.id)

    @property
    def transform(self):
        return self._transform

    @transform.setter
    def transform(self, m):
        # invert raises for degenerate transforms, so they never get stored
        inverse = invert(m)
        self._transform = m
        self.inverse = inverse
        self.inverse_transpose = transpose(inverse)

    def local_intersect(self, ray):
        raise NotImplementedError

    def local_normal_at(self, local_point, hit=None):
        raise NotImplementedError

    def normal_at(self, world_point, hit=None):
        """Unit surface normal in world space.

        Parameters:
          world_point : (4,) -- a point on the surface
          hit : Intersection -- the intersection that produced the point, for
                shapes whose normal depends on where exactly they were hit
        """
        local_point = self.inverse @ world_point
        local_normal = self.local_normal_at(local_point, hit)
        world_normal = self.inverse_transpose @ local_normal
        world_normal[3] = 0.0
        return normalize(world_normal)


class Sphere(Shape):
    """The unit sphere centered at the object-space origin."""

    def local_intersect(self, ray):
        sphere_vec = ray.origin - point(0, 0, 0)
        a = dot(ray.direction, ray.direction)
        b = 2 * dot(ray.direction, sphere_vec)
        c = dot(sphere_vec, sphere_vec) - 1.0
        discriminant = b * b - 4 * a * c
        if discriminant < 0:
            return []
        disc_sqrt = np.sqrt(discriminant)
        return [
            Intersection(self, (-b - disc_sqrt) / (2 * a)),
            Intersection(self, (-b + disc_sqrt) / (2 * a)),
        ]

    def local_normal_at(self, local_point, hit=None):
        return local_point - point(0, 0, 0)


def glass_sphere(transform=None):
    material = Material(transparency=1.0, refractive_index=1.5, reflective=0.8,
                        specular=1.0, shininess=300.0)
    return Sphere(transform, material)


class Plane(Shape):
    """The xz plane (y = 0) in object space."""

    def local_intersect(self, ray):
        if abs(ray.direction[1]) < EPSILON:
            return []
        return [Intersection(self, -ray.origin[1] / ray.direction[1])]

    def local_normal_at(self, local_point, hit=None):
        return vector(0, 1, 0)


class Cube(Shape):
    """Axis-aligned cube spanning -1..1 on every axis in object space."""

    @staticmethod
    def _check_axis(origin, direction):
        tmin_numerator = -1.0 - origin
        tmax_numerator = 1.0 - origin
        if abs(direction) >= EPSILON:
            tmin = tmin_numerator / direction
            tmax = tmax_numerator / direction
        else:
            # parallel to the slab: all or nothing, a zero numerator counts as inside
            tmin = -np.inf if tmin_numerator <= 0 else np.inf
            tmax = np.inf if tmax_numerator >= 0 else -np.inf
        if tmin > tmax:
            tmin, tmax = tmax, tmin
        return tmin, tmax

    def local_intersect(self, ray):
        # slab test, one axis at a time
        tmins, tmaxs = zip(*(
            self._check_axis(float(ray.origin[i]), float(ray.direction[i])) for i in range(3)))
        tmin = max(tmins)
        tmax = min(tmaxs)
        if tmin > tmax:
            return []
        return [Intersection(self, tmin), Intersection(self, tmax)]

    def local_normal_at(self, local_point, hit=None):
        x, y, z = (abs(c) for c in local_point[:3])
        maxc = max(x, y, z)
        if maxc == x:
            return vector(local_point[0], 0, 0)
        elif maxc == y:
            return vector(0, local_point[1], 0)
        return vector(0, 0, local_point[2])


class Cylinder(Shape):

    def __init__(self, minimum=-np.inf, maximum=np.inf, closed=False, transform=None, material=None):
        """Create a cylinder of radius 1 around the object-space y axis.

        Parameters:
          minimum, maximum : float -- y extent (exclusive); unbounded by default
          closed : bool -- whether the ends are capped
        """
        Shape.__init__(self, transform, material)
        self.minimum = minimum
        self.maximum = maximum
        self.closed = closed

    @staticmethod
    def _check_cap(ray, t):
        x = ray.origin[0] + t * ray.direction[0]
        z = ray.origin[2] + t * ray.direction[2]
        return x * x + z * z <= 1.0

    def _intersect_caps(self, ray):
        if not self.closed or equals(ray.direction[1], 0.0):
            return []
        xs = []
        for y in (self.minimum, self.maximum):
            t = (y - ray.origin[1]) / ray.direction[1]
            if self._check_cap(ray, t):
                xs.append(Intersection(self, t))
        return xs

    def local_intersect(self, ray):
        dx, dy, dz = ray.direction[:3]
        ox, oy, oz = ray.origin[:3]

        xs = []
        a = dx * dx + dz * dz
        # a ray parallel to the axis can only hit the caps
        if not equals(a, 0.0):
            b = 2 * ox * dx + 2 * oz * dz
            c = ox * ox + oz * oz - 1.0
            disc = b * b - 4 * a * c
            if disc < 0:
                return []
            disc_sqrt = np.sqrt(disc)
            t0 = (-b - disc_sqrt) / (2 * a)
            t1 = (-b + disc_sqrt) / (2 * a)
            if t0 > t1:
                t0, t1 = t1, t0
            for t in (t0, t1):
                y = oy + t * dy
                if self.minimum < y < self.maximum:
                    xs.append(Intersection(self, t))

        return xs + self._intersect_caps(ray)

    def local_normal_at(self, local_point, hit=None):
        x, y, z = local_point[:3]
        dist = x * x + z * z
        if dist < 1 and y >= self.maximum - EPSILON:
            return vector(0, 1, 0)
        elif dist < 1 and y <= self.minimum + EPSILON:
            return vector(0, -1, 0)
        return vector(x, 0, z)


def _barycentric_hit(shape, ray, p1, e1, e2):
    """Moller-Trumbore ray/triangle test; returns a list with at most one Intersection."""
    dir_cross_e2 = cross(ray.direction, e2)
    det = dot(e1, dir_cross_e2)
    if abs(det) < EPSILON:
        return []

    f = 1.0 / det
    p1_to_origin = ray.origin - p1
    u = f * dot(p1_to_origin, dir_cross_e2)
    if u < 0 or u > 1:
        return []

    origin_cross_e1 = cross(p1_to_origin, e1)
    v = f * dot(ray.direction, origin_cross_e1)
    if v < 0 or u + v > 1:
        return []

    t = f * dot(e2, origin_cross_e1)
    return [Intersection(shape, t, u, v)]


class Triangle(Shape):

    def __init__(self, p1, p2, p3, transform=None, material=None):
        """Create a flat-shaded triangle from the given vertices.

        Parameters:
          p1, p2, p3 : (4,) -- the vertices, as points
        """
        Shape.__init__(self, transform, material)
        self.p1 = p1
        self.p2 = p2
        self.p3 = p3
        self.e1 = p2 - p1
        self.e2 = p3 - p1
        self.normal = normalize(cross(self.e2, self.e1))

    def local_intersect(self, ray):
        return _barycentric_hit(self, ray, self.p1, self.e1, self.e2)

    def local_normal_at(self, local_point, hit=None):
        return self.normal


class SmoothTriangle(Triangle):

    def __init__(self, p1, p2, p3, n1, n2, n3, transform=None, material=None):
        """Create a triangle whose normal is interpolated from per-vertex normals.

        Parameters:
          p1, p2, p3 : (4,) -- the vertices, as points
          n1, n2, n3 : (4,) -- the normals at each vertex, as vectors
        """
        Triangle.__init__(self, p1, p2, p3, transform, material)
        self.n1 = n1
        self.n2 = n2
        self.n3 = n3

    def local_normal_at(self, local_point, hit=None):
        if hit is None or hit.u is None:
            raise ValueError('smooth triangle normals need the barycentric hit')
        return self.n2 * hit.u + self.n3 * hit.v + self.n1 * (1 - hit.u - hit.v)


class Model(Shape):
    """A triangle mesh treated as one shape.

    The triangles are expressed in the model's object space; their own
    transforms are not used.  Intersections report the model as their shape
    and remember which triangle was hit, so the model shades and refracts as
    a single solid.
    """

    def __init__(self, triangles, transform=None, material=None):
        Shape.__init__(self, transform, material)
        self.triangles = list(triangles)

    @classmethod
    def from_obj(cls, f, transform=None, material=None):
        """Build a model from an open Wavefront OBJ file.

        If every face carries vertex normals the mesh is built from
        SmoothTriangles, otherwise from flat Triangles.
        """
        material = Material() if material is None else material
        vertices, normals, faces = read_obj(f)
        smooth = bool(faces) and all(ni is not None for face in faces for _, ni in face)

        # hits shade with the model's material, so the faces just share it
        triangles = []
        for face in faces:
            ps = [vertices[vi] for vi, _ in face]
            if smooth:
                ns = [normals[ni] for _, ni in face]
                triangles.append(SmoothTriangle(*(ps + ns), material=material))
            else:
                triangles.append(Triangle(*ps, material=material))

        logger.debug("loaded %d %s triangles", len(triangles), 'smooth' if smooth else 'flat')
        return cls(triangles, transform, material)

    def local_intersect(self, ray):
        xs = []
        for tri in self.triangles:
            for i in tri.local_intersect(ray):
                xs.append(Intersection(self, i.t, i.u, i.v, child=tri))
        return xs

    def local_normal_at(self, local_point, hit=None):
        if hit is None or hit.child is None:
            raise ValueError('model normals need the intersection that hit the model')
        return hit.child.local_normal_at(local_point, hit)
