"""
Compressor - a Processor that compresses images with one or more Compressions.

A Compression is the actual implementation, e.g. a JPEG re-encode at a
fixed quality (see mediatools.compression). It may come with tags that are
assigned to every image it compresses, such as "compression=jpeg,quality=75".
"""

import logging

import numpy as np

from .context import ProcessorContext
from .image import Tags,TAG_COMPRESSED,TAG_ORIGINAL
from .image_utils import to_canonical,freeze
from .stage import Processor

logger = logging.getLogger(__name__)


class Compression:
    """Compresses a pixel buffer.
    :param fn: function buffer -> buffer that does the compression.
    :param tags: tags for images compressed by this Compression; an iterable of
                 strings or a function returning one.
    """
    def __init__(self, fn, *, tags=None, name=None):
        self.fn = fn
        self.name = name or getattr(fn, '__name__', 'compression')
        if tags is None:
            self._tags = lambda: Tags()
        elif callable(tags):
            self._tags = lambda: Tags(tags())
        else:
            fixed = Tags(tags)
            self._tags = lambda: fixed

    def __repr__(self):
        return f"<Compression {self.name} tags={list(self.tags())}>"

    def __call__(self, img):
        return self.compress(img)

    def compress(self, img):
        out = to_canonical(self.fn(img))
        # never freeze a buffer the caller still owns
        if out is img or np.shares_memory(out, img):
            out = out.copy()
        return freeze(out)

    def tags(self):
        return self._tags()


def as_compression(c):
    if isinstance(c, Compression):
        return c
    if callable(c):
        return Compression(c)
    raise TypeError(f"{c!r} is not a Compression")


class Compressor(Processor):
    """Compresses images. By default the pipeline's original image is passed
    through untouched to preserve its quality; set compress_original=True to
    compress it too."""
    def __init__(self, compressions, *, compress_original=False):
        self.compressions = [as_compression(c) for c in compressions]
        if not self.compressions:
            raise ValueError("Compressor needs at least one Compression")
        self.compress_original = compress_original

    def __repr__(self):
        return f"<Compressor {[c.name for c in self.compressions]} compress_original={self.compress_original}>"

    def compress(self, img, pctx:ProcessorContext=None):
        """Return one compressed buffer per configured Compression"""
        out = []
        for c in self.compressions:
            if pctx is not None:
                pctx.check()
            out.append(c.compress(img))
        return out

    def process(self, pctx:ProcessorContext):
        pimg = pctx.image
        if pimg.original and not self.compress_original:
            return [pimg.replace()]

        processed = []
        for (i, (c, cimg)) in enumerate(zip(self.compressions, self.compress(pimg.img, pctx))):
            tags = pimg.tags.union(TAG_COMPRESSED, *c.tags())
            # only one output may carry the original marker
            original = pimg.original and i == 0
            if pimg.original and not original:
                tags = tags.without(TAG_ORIGINAL)
            logger.debug("compressed with %s tags=%s", c.name, list(tags))
            processed.append(pimg.replace(img=cimg, tags=tags, original=original))
        return processed


def compress(compression, **kwargs):
    """Return a Compressor that uses a single Compression"""
    return Compressor([compression], **kwargs)


def compress_many(compressions, **kwargs):
    """Return a Compressor that produces one image per Compression"""
    return Compressor(compressions, **kwargs)
