"""
Resizer - a Processor that resizes an image to a set of dimensions.
"""

import logging

from .constants import C
from .context import ProcessorContext
from .dimensions import provider_for
from .image import ProcessedImage,TAG_ORIGINAL,TAG_RESIZED,SIZE_TAG_PREFIX
from .image_utils import resample,to_canonical,freeze
from .stage import Processor

logger = logging.getLogger(__name__)


class Resizer(Processor):
    """Resizes images to a set of dimensions.
    :param dimensions: a DimensionProvider (DimensionList or DimensionMap), a list or a dict.
    :param filter: the cv2 interpolation flag used for resampling. Defaults to Lanczos.
    :param discard_input: if True, the input image is not part of the output.
    """
    def __init__(self, dimensions, *, filter=C.DEFAULT_RESAMPLE_FILTER, discard_input=False):
        self.provider = provider_for(dimensions)
        self.filter = filter
        self.discard_input = discard_input
        # sorted by width, then height. The sort is stable, so equal dimensions keep their order.
        self.named = sorted(self.provider.named_dimensions(), key=lambda pair: pair[0])

    def __repr__(self):
        return f"<Resizer {[str(dim) for (dim, _) in self.named]} discard_input={self.discard_input}>"

    @property
    def dimensions(self):
        return [dim for (dim, _) in self.named]

    def resize(self, img, pctx:ProcessorContext=None):
        """Resize img to every configured dimension and return the list of resized buffers.
        The input image is not included."""
        img = to_canonical(img)
        out = []
        for dim in self.dimensions:
            if pctx is not None:
                pctx.check()
            out.append(freeze(resample(img, dim.width, dim.height, self.filter)))
        return out

    def process(self, pctx:ProcessorContext):
        """Return the input image (unless discard_input) followed by one resized image per dimension."""
        pimg = pctx.image
        base_tags = pimg.tags.without(TAG_ORIGINAL)
        resized = self.resize(pimg.img, pctx)

        processed = []
        for ((dim, name), rimg) in zip(self.named, resized):
            tags = base_tags.union(TAG_RESIZED)
            if name is not None:
                tags = tags.union(SIZE_TAG_PREFIX + name)
            logger.debug("resized to %s tags=%s", dim, list(tags))
            processed.append(ProcessedImage(rimg, tags=tags))

        if self.discard_input:
            return processed
        return [pimg.replace()] + processed


def resize(dimensions, **kwargs):
    """Return a Resizer for the given dimensions. See Resizer for the options."""
    return Resizer(dimensions, **kwargs)
