import logging

import numpy as np

logger = logging.getLogger(__name__)

# tolerance for approximate equality and degenerate-case checks
EPSILON = 1e-5


class MalformedMeshError(ValueError):
    """Raised when a mesh description references data that does not exist."""


def vec(list):
    """Handy shorthand to make a double-precision float array."""
    return np.array(list, dtype=np.float64)

def point(x, y, z):
    """A position in space (w = 1)."""
    return vec([x, y, z, 1.0])

def vector(x, y, z):
    """A direction in space (w = 0)."""
    return vec([x, y, z, 0.0])

def color(r, g, b):
    return vec([r, g, b])

def is_point(t):
    return equals(t[3], 1.0)

def is_vector(t):
    return equals(t[3], 0.0)

def equals(a, b):
    """Componentwise comparison within EPSILON; works on scalars, tuples and matrices."""
    return bool(np.all(np.abs(np.asarray(a) - np.asarray(b)) < EPSILON))


def magnitude(v):
    return float(np.sqrt(np.dot(v, v)))

def normalize(v):
    """Return a unit vector in the direction of the vector v."""
    return v / magnitude(v)

def dot(a, b):
    return float(np.dot(a, b))

def cross(a, b):
    """Cross product of the xyz parts; always a vector."""
    c = np.cross(a[:3], b[:3])
    return vector(c[0], c[1], c[2])

def reflect(v, normal):
    """Reflect v about normal."""
    return v - normal * 2.0 * dot(v, normal)

def refract(eyev, normal, n1, n2):
    """Bend a ray crossing from a medium of index n1 into one of index n2.

    Parameters:
      eyev : (4,) -- unit vector pointing back along the incoming ray
      normal : (4,) -- unit surface normal on the eye side
      n1, n2 : float -- refractive indices on the incoming and outgoing sides
    Return:
      (4,) -- the transmitted direction, or None on total internal reflection
    """
    n_ratio = n1 / n2
    cos_i = dot(eyev, normal)
    sin2_t = n_ratio * n_ratio * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return None
    cos_t = np.sqrt(1.0 - sin2_t)
    return normal * (n_ratio * cos_i - cos_t) - eyev * n_ratio


def clamp(x, low=0.0, high=1.0):
    return min(max(x, low), high)

def to_channel8(x):
    """Map a linear channel value to 0..255 (clamped to [0, 1] first)."""
    return int(np.floor(255.999 * clamp(float(x))))

def pack_rgb(c):
    """Pack a color into a single 0x00RRGGBB integer."""
    return (to_channel8(c[0]) << 16) | (to_channel8(c[1]) << 8) | to_channel8(c[2])


def _parse_index(token, count, kind, lineno):
    try:
        i = int(token)
    except ValueError:
        raise MalformedMeshError('line %d: bad %s index %r' % (lineno, kind, token))
    # negative indices count back from the most recent entry
    if i < 0:
        i = count + i + 1
    if i < 1 or i > count:
        raise MalformedMeshError(
            'line %d: %s index %s out of range (have %d)' % (lineno, kind, token, count))
    return i - 1

def read_obj(f):
    """Read a file in the Wavefront OBJ file format.

    Argument is an open file (or any iterable of lines).
    Returns a tuple (vertices, normals, faces):
      vertices : list of (4,) points
      normals : list of (4,) vectors
      faces : list of triangles, each a list of three (vertex_index, normal_index)
              pairs with 0-based indices; normal_index is None when absent.
    Polygons with more than three vertices are split into a triangle fan.
    Raises MalformedMeshError on unparseable numbers or out-of-range indices.
    """

    vertices = []
    normals = []
    polys = []

    for lineno, line in enumerate(f, 1):
        words = line.split()
        if not words or words[0].startswith('#'):
            continue
        if words[0] in ('v', 'vn'):
            try:
                x, y, z = (float(s) for s in words[1:4])
            except ValueError:
                raise MalformedMeshError('line %d: expected three numbers in %r' % (lineno, line.strip()))
            if words[0] == 'v':
                vertices.append(point(x, y, z))
            else:
                normals.append(vector(x, y, z))
        elif words[0] == 'f':
            if len(words) < 4:
                raise MalformedMeshError('line %d: face needs at least three vertices' % lineno)
            polys.append((lineno, words[1:]))
        else:
            logger.debug("ignoring OBJ statement %r on line %d", words[0], lineno)

    # resolve indices once every vertex and normal has been seen
    faces = []
    for lineno, refs in polys:
        corners = []
        for ref in refs:
            w = ref.split('/')
            vi = _parse_index(w[0], len(vertices), 'vertex', lineno)
            ni = None
            if len(w) > 2 and w[2]:
                ni = _parse_index(w[2], len(normals), 'normal', lineno)
            corners.append((vi, ni))
        for k in range(1, len(corners) - 1):
            faces.append([corners[0], corners[k], corners[k + 1]])

    return vertices, normals, faces
