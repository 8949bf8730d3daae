"""This module provides the following classes:

Tags - An ordered, duplicate-free set of string labels attached to an image variant.

ProcessedImage - An image variant moving through a Pipeline: a pixel buffer,
                 its Tags, and a flag marking it as the original input image.

Both are values. Operations that "change" them return new objects, so the
Tags of one image can be shared with the images derived from it without any
risk of one stage's changes showing up in another image.

"""
import re

from .utils import unique,contains

TAG_ORIGINAL='original'
TAG_RESIZED='resized'
TAG_COMPRESSED='compressed'
SIZE_TAG_PREFIX='size='


class Tags(tuple):
    """Tags assigned to an image by the processors of a Pipeline.
    Duplicates are removed when the Tags are created."""
    def __new__(cls, tags=()):
        if isinstance(tags, str):
            tags = (tags,)
        return super().__new__(cls, unique(tags))

    def __repr__(self):
        return f"<Tags {list(self)}>"

    def contains(self, tag):
        return contains(tag, self)

    def union(self, *tags):
        """Return new Tags with the given tags appended. Tags that are already present are skipped."""
        return Tags(self + tags)

    def without(self, *tags):
        """Return new Tags without the given tags."""
        return Tags(tag for tag in self if tag not in tags)

    def match(self, pattern):
        """Return the Tags that match pattern. pattern is a regular expression
        (a string or compiled) that is searched for in each tag, or a predicate
        called with each tag."""
        if callable(pattern) and not isinstance(pattern, re.Pattern):
            pred = pattern
        else:
            pred = re.compile(pattern).search
        return Tags(tag for tag in self if pred(tag))


def dimension_name(tags):
    """Return the name from the "size=<name>" tag of a resized image, or None."""
    for tag in tags:
        if tag.startswith(SIZE_TAG_PREFIX):
            return tag[len(SIZE_TAG_PREFIX):]
    return None


class ProcessedImage:
    """An image variant. If original is True, this is the image that was passed
    to Pipeline.run() (possibly transformed by a stage that preserves the marker).
    Processors never modify a ProcessedImage; use replace() or with_tags()."""
    __slots__ = ('_img','_tags','_original')

    def __init__(self, img, *, tags=(), original=False):
        self._img = img
        self._tags = tags if isinstance(tags, Tags) else Tags(tags)
        self._original = bool(original)

    def __repr__(self):
        shape = getattr(self._img, 'shape', None)
        return f"<ProcessedImage shape={shape} original={self._original} tags={list(self._tags)}>"

    @property
    def img(self):
        """The pixel buffer"""
        return self._img

    @property
    def tags(self):
        return self._tags

    @property
    def original(self):
        return self._original

    @property
    def width(self):
        return self._img.shape[1]

    @property
    def height(self):
        return self._img.shape[0]

    def replace(self, **changes):
        """Return a new ProcessedImage with the given fields (img, tags, original) replaced."""
        kwargs = {'tags':self._tags, 'original':self._original}
        img = changes.pop('img', self._img)
        for (k,v) in changes.items():
            if k not in kwargs:
                raise TypeError(f"unknown ProcessedImage field {k!r}")
            kwargs[k] = v
        return ProcessedImage(img, **kwargs)

    def with_tags(self, *tags):
        """Return a copy with the given tags added"""
        return self.replace(tags=self._tags.union(*tags))
