"""
Dimensions for the Resizer.

Dimensions   - a (width, height) pair in pixels. A height of 0 means the
               height is derived from the width, keeping the aspect ratio.
DimensionList - a list of unnamed Dimensions.
DimensionMap  - named Dimensions. Images resized to a named dimension are
                tagged "size=<name>".
"""

import json


class Dimensions(tuple):
    """The width and height of an image, in pixels."""
    def __new__(cls, width, height=0):
        width = int(width)
        height = int(height)
        if width < 0 or height < 0:
            raise ValueError(f"dimensions cannot be negative: width={width} height={height}")
        return super().__new__(cls, (width, height))

    def __getnewargs__(self):
        return tuple(self)

    @property
    def width(self):
        return self[0]

    @property
    def height(self):
        return self[1]

    def __str__(self):
        return f"[width={self.width}, height={self.height}]"

    def __repr__(self):
        return f"Dimensions({self.width}, {self.height})"

    def to_dict(self):
        return {'width':self.width, 'height':self.height}

    @classmethod
    def from_dict(cls, d):
        return cls(d.get('width', 0), d.get('height', 0))

    def to_json(self):
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, s):
        return cls.from_dict(json.loads(s))

    @classmethod
    def of(cls, value):
        """Coerce value to Dimensions. Accepts Dimensions, an int width,
        a (width,) or (width, height) sequence, or a {width, height} dict."""
        if isinstance(value, Dimensions):
            return value
        if isinstance(value, bool):
            raise TypeError(f"cannot make Dimensions from {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, dict):
            return cls.from_dict(value)
        if isinstance(value, (list, tuple)) and 1 <= len(value) <= 2:
            return cls(*value)
        raise TypeError(f"cannot make Dimensions from {value!r}")


class DimensionProvider:
    """Provides dimensions to a Resizer."""
    def dimensions(self):
        """Return the list of Dimensions"""
        return [dim for (dim, _) in self.named_dimensions()]

    def named_dimensions(self):
        """Return a list of (Dimensions, name) pairs. name is None for unnamed dimensions."""
        raise NotImplementedError


class DimensionList(DimensionProvider, list):
    """A list of unnamed Dimensions"""
    def __init__(self, dims=()):
        super().__init__(Dimensions.of(d) for d in dims)

    def named_dimensions(self):
        return [(dim, None) for dim in self]


class DimensionMap(DimensionProvider, dict):
    """Maps names to Dimensions"""
    def __init__(self, dims=None, **kwargs):
        super().__init__()
        for (name, d) in dict(dims or {}, **kwargs).items():
            self[name] = Dimensions.of(d)

    def named_dimensions(self):
        return [(dim, name) for (name, dim) in self.items()]

    def tag(self, dim):
        """Return the name configured for dim, or None"""
        for (name, d) in self.items():
            if d == dim:
                return name
        return None


def provider_for(dimensions):
    """Return a DimensionProvider for a provider, a dict or a list"""
    if isinstance(dimensions, DimensionProvider):
        return dimensions
    if isinstance(dimensions, dict):
        return DimensionMap(dimensions)
    return DimensionList(dimensions)
