"""
Wrappers around the OpenCV and scikit-image calls the pipeline depends on:
pixel-format normalization, the JPEG/PNG codecs, resampling and image similarity.

Everything in the pipeline is a canonical buffer: a numpy array of shape
(height, width, 4) and dtype uint8 in BGRA order with straight (not premultiplied) alpha.

 https://scikit-image.org/docs/stable/api/skimage.metrics.html#skimage.metrics.structural_similarity
"""

import logging

from skimage.metrics import structural_similarity as compare_ssim
import cv2
import numpy as np

from .constants import C

logger = logging.getLogger(__name__)

class NotImageError(RuntimeError):
    """The buffer cannot be interpreted as an image"""

class CodecError(RuntimeError):
    """cv2 could not encode or decode an image"""


def is_canonical(img):
    return (isinstance(img, np.ndarray) and img.dtype == np.uint8
            and img.ndim == 3 and img.shape[2] == 4)


def to_canonical(img):
    """Convert any supported buffer to BGRA uint8.
    Returns img itself if it is already canonical."""
    if is_canonical(img):
        return img
    if img is None:
        raise NotImageError("no image")
    img = np.asarray(img)
    if img.size == 0:
        raise NotImageError(f"empty image of shape {img.shape}")

    if img.dtype == np.uint8:
        pass
    elif img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype == np.bool_:
        img = img.astype(np.uint8) * 255
    elif img.dtype.kind == 'f':
        img = (np.clip(img, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
    else:
        raise NotImageError(f"unsupported pixel type {img.dtype}")

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    img = np.ascontiguousarray(img)

    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    if img.ndim == 3 and img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    if img.ndim == 3 and img.shape[2] == 4:
        return img
    raise NotImageError(f"unsupported image shape {img.shape}")


def freeze(img):
    """Mark a buffer read-only so that it can be shared between ProcessedImages"""
    img.flags.writeable = False
    return img


## codecs. JPEG has no alpha channel, so decoded images are opaque.

def imdecode(data, flags):
    """cv2.imdecode that returns None for empty input instead of failing an assertion"""
    if not data:
        return None
    return cv2.imdecode(np.frombuffer(data, np.uint8), flags)

def jpeg_encode(img, quality=C.DEFAULT_JPEG_QUALITY):
    """Return the JPEG encoding of img as bytes"""
    bgr = cv2.cvtColor(to_canonical(img), cv2.COLOR_BGRA2BGR)
    ok, buf = cv2.imencode('.jpg', bgr, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        raise CodecError(f"encode as JPEG (quality={quality})")
    return buf.tobytes()


def jpeg_decode(data):
    img = imdecode(data, cv2.IMREAD_COLOR)
    if img is None:
        raise CodecError("decode JPEG")
    return to_canonical(img)


def png_encode(img, level=C.DEFAULT_PNG_LEVEL):
    ok, buf = cv2.imencode('.png', to_canonical(img), [cv2.IMWRITE_PNG_COMPRESSION, int(level)])
    if not ok:
        raise CodecError(f"encode as PNG (level={level})")
    return buf.tobytes()


def png_decode(data):
    img = imdecode(data, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise CodecError("decode PNG")
    return to_canonical(img)


def image_decode(data):
    """Decode an image file of any format cv2 understands, keeping alpha if present"""
    img = imdecode(data, cv2.IMREAD_UNCHANGED)
    if img is None:
        raise NotImageError("cv2 cannot decode image")
    return to_canonical(img)


def size_of(img):
    """Return the size in bytes of img encoded as a JPEG at quality 100"""
    return len(jpeg_encode(img, 100))


## resampling

def target_size(shape, width, height):
    """Return the (width, height) to resize an image of the given shape to.
    A zero width or height is derived from the aspect ratio."""
    if width < 0 or height < 0:
        raise ValueError(f"invalid dimensions width={width} height={height}")
    if width == 0 and height == 0:
        raise ValueError("width and height cannot both be 0")
    (src_h, src_w) = shape[:2]
    if height == 0:
        height = max(1, int(round(width * src_h / src_w)))
    elif width == 0:
        width = max(1, int(round(height * src_w / src_h)))
    return (width, height)


def resample(img, width, height=0, interpolation=C.DEFAULT_RESAMPLE_FILTER):
    """Resize img to width x height with the given cv2 interpolation flag"""
    img = to_canonical(img)
    size = target_size(img.shape, width, height)
    logger.debug("resample %s -> %s", img.shape[1::-1], size)
    return cv2.resize(img, size, interpolation=interpolation)


## similarity

def img_sim(imageA, imageB):
    """Similarity of two images on a scale of -1.0 to 1.0. Images of different shapes score 0."""
    # convert the images to grayscale
    grayA = cv2.cvtColor(to_canonical(imageA), cv2.COLOR_BGRA2GRAY)
    grayB = cv2.cvtColor(to_canonical(imageB), cv2.COLOR_BGRA2GRAY)

    # compute the Structural Similarity Index (SSIM) between the two images
    if grayA.shape == grayB.shape:
        return compare_ssim(grayA, grayB)
    return 0


def icon(img, size=C.ICON_SIZE):
    return cv2.resize(to_canonical(img), (size, size), interpolation=cv2.INTER_AREA)


def same_images(a, b, threshold=C.DEFAULT_SIM_THRESHOLD):
    """Return True if a and b show the same picture. The images may have different sizes."""
    return img_sim(icon(a), icon(b)) >= threshold


def equal_images(a, b, threshold=C.DEFAULT_SIM_THRESHOLD):
    """Return True if a and b have the same size and show the same picture."""
    return a.shape[:2] == b.shape[:2] and same_images(a, b, threshold)
