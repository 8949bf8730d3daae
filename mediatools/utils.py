"""
Small generic helpers shared by the tag and pipeline code.
"""

def unique(iterable):
    """Return a list of the values in iterable with duplicates removed.
    The first occurrence of each value wins, so the order is stable."""
    seen = set()
    out = []
    for v in iterable:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return out


def contains(value, seq):
    """Return True if value is an element of seq"""
    return any(e == value for e in seq)
