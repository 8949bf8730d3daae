"""
Tagger - a Processor that adds tags to images and changes nothing else.
"""

from .context import ProcessorContext
from .image import Tags
from .stage import Processor


class Tagger(Processor):
    """Adds tags to images. For each image, fn(ProcessedImage) returns the tags to add."""
    def __init__(self, fn):
        self.fn = fn

    def process(self, pctx:ProcessorContext):
        pimg = pctx.image
        return [pimg.with_tags(*Tags(self.fn(pimg)))]


def tag(tags):
    """Return a Tagger that adds the given tags to every image"""
    fixed = Tags(tags)
    return Tagger(lambda _: fixed)


def tag_by(fn):
    """Return a Tagger that asks fn(ProcessedImage) for the tags of each image"""
    return Tagger(fn)
