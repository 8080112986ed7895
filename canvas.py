import matplotlib.pyplot as plt
import numpy as np
from PIL import Image as PIM

from utils import pack_rgb

"""
Pixel buffer for rendered images, and the ways to get it out of the process:
as packed 0x00RRGGBB integers, as a PNG file, or in a matplotlib window.
"""


class Canvas:

    def __init__(self, width, height):
        """Create a black canvas.

        Pixels are stored as linear float RGB in an array of shape (height, width, 3);
        values are only clamped when the canvas is encoded.
        """
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), np.float64)

    def write_pixel(self, x, y, c):
        self.pixels[y, x] = c

    def pixel_at(self, x, y):
        return self.pixels[y, x]

    def to_buffer(self):
        """Row-major array of packed 0x00RRGGBB values, one uint32 per pixel."""
        buffer = np.zeros(self.width * self.height, np.uint32)
        for y in range(self.height):
            for x in range(self.width):
                buffer[x + y * self.width] = pack_rgb(self.pixels[y, x])
        return buffer

    def to_rgb8(self):
        """(height, width, 3) uint8 array with floor(255.999 * clamp(c)) per channel."""
        return np.floor(255.999 * np.clip(self.pixels, 0, 1)).astype(np.uint8)

    def to_image(self):
        return PIM.fromarray(self.to_rgb8())

    def save(self, path):
        self.to_image().save(path)

    def show(self, title=None):
        """Display the canvas in a matplotlib window (blocks until it is closed)."""
        plt.figure()
        plt.imshow(self.to_rgb8(), interpolation='nearest')
        plt.axis('off')
        if title is not None:
            plt.title(title)
        plt.show()
