"""
Tests for the pipeline engine
"""

import io

import numpy as np
import pytest

from mediatools import compression
from mediatools.compress import compress,compress_many
from mediatools.context import Context,Cancelled,DeadlineExceeded
from mediatools.image import ProcessedImage,dimension_name
from mediatools.image_utils import same_images,CodecError
from mediatools.pipeline import Pipeline,PipelineResult,StageError,InvariantViolation,PipelineError
from mediatools.resize import resize
from mediatools.stage import Processor,ProcessorFunc
from mediatools.tagger import tag,tag_by

SIZES = {'sm':[360], 'md':[640], 'lg':[960]}

def test_empty_pipeline(example):
    result = Pipeline().run(example)
    assert len(result) == 1
    assert result.input is example
    assert result[0].img is example
    assert result[0].original
    assert list(result[0].tags) == ['original']

def test_pipeline_run(example):
    pipe = Pipeline([
        resize(SIZES),
        compress_many([compression.jpeg(75), compression.jpeg(50)]),
        tag(['foo', 'bar']),
        tag_by(lambda p: ['tagby:original' if p.original else 'tagby:non-original']),
    ])
    result = pipe.run(example, Context.background().with_cancel())

    assert len(result.images) == 7
    first = result.images[0]
    assert first.original
    assert same_images(example, first.img)
    assert set(first.tags) == {'original', 'foo', 'bar', 'tagby:original'}

    assert set(result[1].tags) == {'resized', 'size=sm', 'compressed', 'compression=jpeg,quality=75',
                                   'foo', 'bar', 'tagby:non-original'}
    assert set(result[-2].tags) == {'resized', 'size=lg', 'compressed', 'compression=jpeg,quality=75',
                                    'foo', 'bar', 'tagby:non-original'}
    assert set(result[-1].tags) == {'resized', 'size=lg', 'compressed', 'compression=jpeg,quality=50',
                                    'foo', 'bar', 'tagby:non-original'}
    assert [dimension_name(p.tags) for p in result] == [None, 'sm', 'sm', 'md', 'md', 'lg', 'lg']
    assert [p.width for p in result[1:]] == [360, 360, 640, 640, 960, 960]
    assert sum(p.original for p in result) == 1

def test_scenario_exact_tags(example):
    pipe = Pipeline([resize(SIZES),
                     compress_many([compression.jpeg(75), compression.jpeg(50)]),
                     tag(['foo', 'bar'])])
    result = pipe.run(example)
    assert len(result) == 7
    assert set(result[0].tags) == {'original', 'foo', 'bar'}
    assert set(result[-1].tags) == {'resized', 'size=lg', 'compressed', 'compression=jpeg,quality=50',
                                    'foo', 'bar'}

def test_pipeline_compress_original(example):
    pipe = Pipeline([resize(SIZES), compress(compression.jpeg(75), compress_original=True)])
    result = pipe.run(example)
    assert len(result) == 4
    assert result[0].original
    assert result[0].tags.contains('compressed')
    assert result[0].tags.contains('compression=jpeg,quality=75')
    assert result.original() is result[0]

def test_pipeline_resize_discard_input(example):
    pipe = Pipeline([resize(SIZES, discard_input=True), compress(compression.jpeg(75))])
    result = pipe.run(example)
    assert len(result) == 3
    assert not result[0].original
    assert result[0].tags.contains('resized')
    assert result[0].tags.contains('size=sm')
    assert result[0].tags.contains('compressed')
    assert result.original() is None

@pytest.mark.parametrize("n", [0, 1, 3])
def test_resizer_output_count(small_example, n):
    dims = [[10 * (i + 1)] for i in range(n)]
    assert len(Pipeline([resize(dims)]).run(small_example)) == n + 1
    assert len(Pipeline([resize(dims, discard_input=True)]).run(small_example)) == n

def test_result_find_and_match(small_example):
    result = Pipeline([resize({'sm':[30], 'md':[60]}), tag(['x'])]).run(small_example)
    assert isinstance(result, PipelineResult)
    assert len(result.find('size=sm', 'size=md')) == 2
    assert len(result.find('x')) == 3
    assert result.find() == []
    assert [p.width for p in result.match('^size=m')] == [60]
    assert result.original() is result[0]

def split(pctx):
    p = pctx.image
    return [p.with_tags('a'),
            p.replace(original=False, tags=p.tags.without('original')).with_tags('b')]

def drop_b(pctx):
    return [] if pctx.image.tags.contains('b') else [pctx.image]

def test_fan_out_fan_in_order(small_example):
    result = Pipeline([ProcessorFunc(split), ProcessorFunc(split)]).run(small_example)
    assert [list(p.tags) for p in result] == [['original', 'a'], ['a', 'b'], ['b', 'a'], ['b']]
    assert [p.original for p in result] == [True, False, False, False]

    result = Pipeline([ProcessorFunc(split), ProcessorFunc(split), ProcessorFunc(drop_b)]).run(small_example)
    assert len(result) == 1
    assert result[0].original

def test_two_originals_is_an_invariant_violation(small_example):
    def clone(pctx):
        return [pctx.image.replace(), pctx.image.replace()]
    with pytest.raises(InvariantViolation) as excinfo:
        Pipeline([tag(['x']), ProcessorFunc(clone, name='Cloner')]).run(small_example)
    assert 'Cloner' in str(excinfo.value)
    assert 'stage 1' in str(excinfo.value)
    assert excinfo.value.index == 1
    assert isinstance(excinfo.value, PipelineError)

class Failing(Processor):
    def process(self, pctx):
        raise CodecError("encode as JPEG")

def test_stage_error(small_example):
    with pytest.raises(StageError) as excinfo:
        Pipeline([resize([[30]]), Failing()]).run(small_example)
    e = excinfo.value
    assert isinstance(e.__cause__, CodecError)
    assert isinstance(e.stage, Failing)
    assert e.index == 1
    assert str(e).startswith('Failing processor (stage 1)')

def test_bad_return_values(small_example):
    with pytest.raises(StageError):
        Pipeline([ProcessorFunc(lambda pctx: None)]).run(small_example)
    with pytest.raises(StageError):
        Pipeline([ProcessorFunc(lambda pctx: [pctx.image.img])]).run(small_example)

def test_cancelled_before_run(small_example):
    ctx = Context.background()
    ctx.cancel()
    calls = []
    with pytest.raises(Cancelled):
        Pipeline([ProcessorFunc(lambda pctx: calls.append(pctx) or [pctx.image])]).run(small_example, ctx)
    assert calls == []

def test_cancelled_between_stages(small_example):
    ctx = Context.background()
    def cancel_then_pass(pctx):
        ctx.cancel()
        return [pctx.image]
    second = []
    pipe = Pipeline([ProcessorFunc(cancel_then_pass), ProcessorFunc(lambda pctx: second.append(1) or [pctx.image])])
    with pytest.raises(Cancelled) as excinfo:
        pipe.run(small_example, ctx)
    assert not isinstance(excinfo.value, StageError)
    assert second == []

def test_cancellation_from_processor_is_not_wrapped(small_example):
    def too_slow(pctx):
        raise DeadlineExceeded("context deadline exceeded")
    with pytest.raises(DeadlineExceeded):
        Pipeline([ProcessorFunc(too_slow)]).run(small_example)

def test_deadline(small_example):
    with pytest.raises(DeadlineExceeded):
        Pipeline([resize([[30]])]).run(small_example, Context.background().with_timeout(0))

def test_input_not_modified(small_example):
    before = small_example.copy()
    Pipeline([resize([[30]]), compress(compression.jpeg(20), compress_original=True)]).run(small_example)
    assert np.array_equal(before, small_example)

def test_pipeline_is_immutable_sequence():
    stages = [tag(['a']), tag(['b'])]
    pipe = Pipeline(stages)
    stages.append(tag(['c']))
    assert len(pipe) == 2
    assert pipe[0] is stages[0]
    assert isinstance(pipe.processors, tuple)

def test_stats(small_example):
    pipe = Pipeline([resize([[30], [40]]), tag(['x'])])
    pipe.run(small_example)
    pipe.run(small_example)
    assert [st.count for st in pipe.stats] == [2, 6]
    out = io.StringIO()
    pipe.print_stats(out=out)
    lines = out.getvalue().splitlines()
    assert lines[0].startswith('0. Resizer: calls: 2')
    assert lines[1].startswith('1. Tagger: calls: 6')

class Lazy(Processor):
    def process(self, pctx):
        yield pctx.image
        raise OSError("codec blew up")

def test_generator_failure_is_wrapped(small_example):
    with pytest.raises(StageError) as excinfo:
        Pipeline([Lazy()]).run(small_example)
    assert isinstance(excinfo.value.__cause__, OSError)
    assert excinfo.value.index == 0

def test_generator_processor(small_example):
    class Twice(Processor):
        def process(self, pctx):
            yield pctx.image
            yield pctx.image.replace(original=False, tags=['copy'])
    result = Pipeline([Twice()]).run(small_example)
    assert [list(p.tags) for p in result] == [['original'], ['copy']]

def test_verbose_debug_are_keyword_only():
    with pytest.raises(TypeError):
        Pipeline([], True)
    assert len(Pipeline([], verbose=True)) == 0
