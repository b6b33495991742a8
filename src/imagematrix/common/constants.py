"""
Constants for the imagematrix transformation engine.
Centralizes kernels, channel limits, parameter domains and defaults.
"""

import numpy as np


# Pixel Buffer Constants
class ImageConstants:
    """Constants related to the RGBA pixel buffer."""

    CHANNELS = 4
    CHANNEL_MIN = 0
    CHANNEL_MAX = 255

    # Channel indices (RGBA order)
    RED = 0
    GREEN = 1
    BLUE = 2
    ALPHA = 3

    OPAQUE = 255
    TRANSPARENT = 0

    # Perceptual luminance weights (ITU-R BT.601)
    LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)


# Point Operator Constants
class PointConstants:
    """Parameter domains and defaults for per-pixel operators."""

    THRESHOLD_MIN = 0
    THRESHOLD_MAX = 255
    THRESHOLD_DEFAULT = 128

    # Brightness/contrast levels: 100 is the identity
    LEVEL_MIN = 0
    LEVEL_MAX = 200
    LEVEL_IDENTITY = 100

    # Contrast factor formula constant (factor = 259(c+255) / (255(259-c)))
    CONTRAST_POLE = 259
    CONTRAST_MIDPOINT = 128

    COLOR_KEY_TOLERANCE_MIN = 0
    COLOR_KEY_TOLERANCE_MAX = 255
    COLOR_KEY_TOLERANCE_DEFAULT = 30


# Convolution Constants
class ConvolutionConstants:
    """Kernels and parameter domains for neighborhood operators."""

    SHARPEN_MIN = 0
    SHARPEN_MAX = 10
    SHARPEN_DEFAULT = 5
    SHARPEN_SCALE = 10.0

    # Integer Gaussian weights, normalized by their sum (159)
    GAUSSIAN_KERNEL = np.array(
        [
            [2, 4, 5, 4, 2],
            [4, 9, 12, 9, 4],
            [5, 12, 15, 12, 5],
            [4, 9, 12, 9, 4],
            [2, 4, 5, 4, 2],
        ],
        dtype=np.float64,
    )
    GAUSSIAN_MARGIN = 2

    SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.float64)
    SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.float64)


# Edge Detection Constants
class EdgeConstants:
    """Constants for the Canny pipeline."""

    STRONG = 255
    WEAK = 128
    NONE = 0

    THRESHOLD_MIN = 0
    THRESHOLD_MAX = 255
    CANNY_LOW_DEFAULT = 50
    CANNY_HIGH_DEFAULT = 150


# Segmentation Constants
class SegmentationConstants:
    """Constants for region segmentation and recoloring."""

    TOLERANCE_MIN = 5
    TOLERANCE_MAX = 50
    TOLERANCE_DEFAULT = 20

    MIN_SIZE_MIN = 10
    MIN_SIZE_MAX = 500
    MIN_SIZE_DEFAULT = 100

    UNLABELED = -1

    # 4-connected neighborhood, scan order: left, right, up, down
    DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))

    # Color scheme parameters (saturation, value)
    RAINBOW_SV = (0.8, 0.9)
    PASTEL_SV = (0.4, 0.95)
    HIGH_CONTRAST_SV = (1.0, 1.0)
    PRESERVE_BRIGHTNESS_SATURATION = 0.8
    GOLDEN_ANGLE = 137.5
    GRAYSCALE_SPAN = 220


# Geometry Constants
class GeometryConstants:
    """Constants for rotation."""

    ANGLE_MIN = -180.0
    ANGLE_MAX = 180.0
    BACKGROUND = (0, 0, 0, 0)


# Pipeline Constants
class PipelineConstants:
    """Constants for the transform pipeline."""

    MAX_STEPS_DEFAULT = 100
    MAX_STEPS_LIMIT = 1000


# System Constants
class SystemConstants:
    """Constants for system operations."""

    # Logging
    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
