import numpy as np

from utils import EPSILON, vec, normalize, cross

"""
Matrices and the affine transforms built from them.

Matrices are square NumPy float arrays.  Determinants and inverses are computed
by cofactor expansion rather than numpy.linalg, so every transform-dependent
result in the renderer goes through the routines below.
"""


class DegenerateTransformError(ValueError):
    """Raised when a transform with (near) zero determinant would be inverted."""


def matrix(rows):
    return np.array(rows, dtype=np.float64)

def identity():
    return np.identity(4, dtype=np.float64)

def transpose(m):
    return np.array(m.T)

def submatrix(m, row, col):
    """Copy of m with the given row and column removed."""
    return np.delete(np.delete(m, row, axis=0), col, axis=1)

def minor(m, row, col):
    return determinant(submatrix(m, row, col))

def cofactor(m, row, col):
    result = minor(m, row, col)
    if (row + col) % 2 == 1:
        return -result
    return result

def determinant(m):
    """Laplace expansion along the first row."""
    n = m.shape[0]
    if n == 1:
        return float(m[0, 0])
    if n == 2:
        return float(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])
    det = 0.0
    for col in range(n):
        det += m[0, col] * cofactor(m, 0, col)
    return float(det)

def is_invertible(m):
    return abs(determinant(m)) >= EPSILON

def invert(m):
    """Inverse of m by the adjugate method.

    Raises DegenerateTransformError when m is not invertible.
    """
    det = determinant(m)
    if abs(det) < EPSILON:
        raise DegenerateTransformError('matrix is not invertible (determinant %g)' % det)
    n = m.shape[0]
    result = np.empty((n, n), dtype=np.float64)
    for row in range(n):
        for col in range(n):
            # transposed on the way in
            result[col, row] = cofactor(m, row, col) / det
    return result


def translation(x, y, z):
    m = identity()
    m[0, 3] = x
    m[1, 3] = y
    m[2, 3] = z
    return m

def scaling(x, y, z):
    return np.diag(vec([x, y, z, 1.0]))

def rotation_x(radians):
    c, s = np.cos(radians), np.sin(radians)
    return matrix([
        [1, 0, 0, 0],
        [0, c, -s, 0],
        [0, s, c, 0],
        [0, 0, 0, 1],
    ])

def rotation_y(radians):
    c, s = np.cos(radians), np.sin(radians)
    return matrix([
        [c, 0, s, 0],
        [0, 1, 0, 0],
        [-s, 0, c, 0],
        [0, 0, 0, 1],
    ])

def rotation_z(radians):
    c, s = np.cos(radians), np.sin(radians)
    return matrix([
        [c, -s, 0, 0],
        [s, c, 0, 0],
        [0, 0, 1, 0],
        [0, 0, 0, 1],
    ])

def shearing(xy, xz, yx, yz, zx, zy):
    """Each coordinate moves in proportion to the other two (xy: x in proportion to y, ...)."""
    return matrix([
        [1, xy, xz, 0],
        [yx, 1, yz, 0],
        [zx, zy, 1, 0],
        [0, 0, 0, 1],
    ])

def chain(*transforms):
    """Compose transforms so that the first argument is applied first."""
    result = identity()
    for t in transforms:
        result = t @ result
    return result

def view_transform(eye, target, up):
    """World-to-camera transform for an eye at `eye` looking at `target`.

    Parameters:
      eye : (4,) -- the camera position, a point
      target : (4,) -- the point to look at
      up : (4,) -- approximately which way is up, a vector
    """
    forward = normalize(target - eye)
    left = cross(forward, normalize(up))
    true_up = cross(left, forward)
    orientation = matrix([
        [left[0], left[1], left[2], 0],
        [true_up[0], true_up[1], true_up[2], 0],
        [-forward[0], -forward[1], -forward[2], 0],
        [0, 0, 0, 1],
    ])
    return orientation @ translation(-eye[0], -eye[1], -eye[2])
