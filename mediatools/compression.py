"""
Compressions backed by the cv2 codecs. Each one encodes the image and
decodes the result, so the pipeline keeps working with pixel buffers.
"""

from .compress import Compression
from .image_utils import jpeg_encode,jpeg_decode,png_encode,png_decode


def jpeg(quality):
    """Return a Compression that re-encodes images as JPEG with the given quality (1-100)"""
    quality = int(quality)
    if not 1 <= quality <= 100:
        raise ValueError(f"JPEG quality must be between 1 and 100, not {quality}")

    def compress_jpeg(img):
        return jpeg_decode(jpeg_encode(img, quality))

    return Compression(compress_jpeg,
                       tags=[f"compression=jpeg,quality={quality}"],
                       name=f"jpeg@{quality}")


def png(level):
    """Return a lossless Compression that round-trips images through PNG at the given level (0-9)"""
    level = int(level)
    if not 0 <= level <= 9:
        raise ValueError(f"PNG compression level must be between 0 and 9, not {level}")

    def compress_png(img):
        return png_decode(png_encode(img, level))

    return Compression(compress_png,
                       tags=[f"compression=png,level={level}"],
                       name=f"png@{level}")
