"""
Tests for the Resizer
"""

import cv2
import numpy as np
import pytest

from mediatools.context import Context,ProcessorContext,Cancelled
from mediatools.dimensions import DimensionList,DimensionMap,Dimensions
from mediatools.image import ProcessedImage,Tags
from mediatools.resize import Resizer,resize

def original(img):
    return ProcessedImage(img, tags=Tags(['original']), original=True)

def test_resize_dimension_list(example):
    dimensions = DimensionList([(1920,), (100, 100), (300, 500), (960,), (200, 200), (1280,)])
    resizer = resize(dimensions)
    assert resizer.dimensions == [Dimensions(100, 100), Dimensions(200, 200), Dimensions(300, 500),
                                  Dimensions(960), Dimensions(1280), Dimensions(1920)]

    resized = resizer.resize(example)
    assert len(resized) == len(dimensions)
    for (dim, rimg) in zip(resizer.dimensions, resized):
        assert rimg.shape[1] == dim.width
        if dim.height > 0:
            assert rimg.shape[0] == dim.height
        else:
            assert rimg.shape[0] == round(dim.width * example.shape[0] / example.shape[1])
        assert rimg.dtype == np.uint8
        assert rimg.shape[2] == 4
        assert not rimg.flags.writeable

def test_sort_ties_on_height():
    resizer = Resizer([(300, 500), (300, 200), (100,)])
    assert resizer.dimensions == [Dimensions(100), Dimensions(300, 200), Dimensions(300, 500)]

def test_process_keeps_input_first(small_example):
    resizer = Resizer(DimensionMap({'md':[60], 'sm':[30]}))
    out = resizer.process(ProcessorContext(original(small_example)))
    assert len(out) == 3

    assert out[0].img is small_example
    assert out[0].original
    assert list(out[0].tags) == ['original']

    assert [p.width for p in out[1:]] == [30, 60]
    assert list(out[1].tags) == ['resized', 'size=sm']
    assert list(out[2].tags) == ['resized', 'size=md']
    for p in out[1:]:
        assert not p.original
        assert not p.tags.contains('original')

def test_process_discard_input(small_example):
    resizer = Resizer({'sm':[30], 'md':[60]}, discard_input=True)
    out = resizer.process(ProcessorContext(original(small_example)))
    assert len(out) == 2
    assert not any(p.original for p in out)

def test_process_unnamed_keeps_other_tags(small_example):
    resizer = Resizer([(40, 40)])
    pimg = ProcessedImage(small_example, tags=['compressed', 'foo'])
    out = resizer.process(ProcessorContext(pimg))
    assert list(out[1].tags) == ['compressed', 'foo', 'resized']
    assert list(pimg.tags) == ['compressed', 'foo']
    assert out[1].img.shape == (40, 40, 4)

def test_process_converts_foreign_buffers():
    gray = np.zeros((50, 100), np.uint8)
    out = Resizer([[20]], discard_input=True).process(ProcessorContext(ProcessedImage(gray)))
    assert out[0].img.shape == (10, 20, 4)

def test_resample_filter(small_example):
    nearest = Resizer([[30]], filter=cv2.INTER_NEAREST).resize(small_example)[0]
    lanczos = Resizer([[30]]).resize(small_example)[0]
    assert nearest.shape == lanczos.shape
    assert not np.array_equal(nearest, lanczos)

def test_invalid_dimension(small_example):
    with pytest.raises(ValueError):
        Resizer([(0, 0)]).resize(small_example)

def test_cancelled(small_example):
    ctx = Context.background()
    ctx.cancel()
    with pytest.raises(Cancelled):
        Resizer([[30]]).process(ProcessorContext(original(small_example), ctx))
