"""Constants"""

import cv2

# pylint: disable=too-few-public-methods
class C:
    """Constants"""
    DEFAULT_SIM_THRESHOLD = 0.95
    DEFAULT_JPEG_QUALITY = 95
    DEFAULT_PNG_LEVEL = 3
    DEFAULT_RESAMPLE_FILTER = cv2.INTER_LANCZOS4
    ICON_SIZE = 64
    DEFAULT_JPEG_TEMPLATE = "{counter:03}.jpg"
    DEFAULT_MANIFEST_NAME = "manifest.json"
    RESAMPLE_FILTERS = {'nearest': cv2.INTER_NEAREST,
                        'linear':  cv2.INTER_LINEAR,
                        'cubic':   cv2.INTER_CUBIC,
                        'area':    cv2.INTER_AREA,
                        'lanczos': cv2.INTER_LANCZOS4}
