import copy

import numpy as np

from utils import color, normalize, dot, reflect


class Material:

    def __init__(self, color=color(1, 1, 1), ambient=0.1, diffuse=0.9, specular=0.9, shininess=200.0,
                 reflective=0.0, transparency=0.0, refractive_index=1.0, pattern=None):
        """
        Create a new material with the given parameters.

        Parameters:
          color : (3,) -- base surface color, used when there is no pattern
          ambient : float -- fraction of the light reflected regardless of geometry
          diffuse : float -- Lambertian reflection coefficient
          specular : float -- Phong highlight coefficient
          shininess : float -- Phong exponent
          reflective : float -- mirror reflection coefficient, in [0, 1]
          transparency : float -- transmission coefficient, in [0, 1]
          refractive_index : float -- index of refraction (1.0 for vacuum/air, 1.5 for glass)
          pattern : Pattern -- optional space-varying color that replaces `color`
        """
        if not 0.0 <= reflective <= 1.0:
            raise ValueError('reflective must be in [0, 1], got %r' % (reflective,))
        if not 0.0 <= transparency <= 1.0:
            raise ValueError('transparency must be in [0, 1], got %r' % (transparency,))
        self.color = np.array(color, dtype=np.float64)
        self.ambient = ambient
        self.diffuse = diffuse
        self.specular = specular
        self.shininess = shininess
        self.reflective = reflective
        self.transparency = transparency
        self.refractive_index = refractive_index
        self.pattern = pattern

    def copy(self, **changes):
        """Shallow copy with some attributes replaced."""
        m = copy.copy(self)
        for name, value in changes.items():
            setattr(m, name, value)
        return m

    def lighting(self, shape, light, point, eyev, normalv, in_shadow=False):
        """Phong shading at a surface point due to one point light.

        Parameters:
          shape : Shape -- the shape being shaded, for pattern lookup
          light : PointLight -- the light
          point : (4,) -- the world-space point being shaded
          eyev : (4,) -- unit vector towards the eye
          normalv : (4,) -- unit surface normal
          in_shadow : bool -- whether the light is blocked; only ambient survives
        Return:
          (3,) -- the color contribution, not clamped
        """
        if self.pattern is not None:
            base = self.pattern.pattern_at_shape(shape, point)
        else:
            base = self.color

        effective_color = base * light.intensity
        ambient = effective_color * self.ambient
        if in_shadow:
            return ambient

        lightv = normalize(light.position - point)
        light_dot_normal = dot(lightv, normalv)
        if light_dot_normal < 0:
            # light is on the other side of the surface
            return ambient

        diffuse = effective_color * self.diffuse * light_dot_normal

        reflectv = reflect(-lightv, normalv)
        reflect_dot_eye = dot(reflectv, eyev)
        if reflect_dot_eye <= 0:
            return ambient + diffuse

        specular = light.intensity * self.specular * reflect_dot_eye ** self.shininess
        return ambient + diffuse + specular
