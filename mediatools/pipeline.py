"""
Pipeline
"""

import sys
import time
import logging

from .image import ProcessedImage,Tags,TAG_ORIGINAL
from .context import Context,ProcessorContext,Cancelled
from .stage import StageStats,stage_name


logger = logging.getLogger(__name__)

class PipelineError(RuntimeError):
    """Base class for errors that abort a pipeline run"""
    def __init__(self, message, *, stage=None, index=None):
        super().__init__(message)
        self.stage = stage
        self.index = index

class StageError(PipelineError):
    """A processor failed. The processor's exception is the __cause__."""

class InvariantViolation(PipelineError):
    """A processor returned output that breaks the pipeline's rules"""


class PipelineResult:
    """The images produced by a pipeline run, in the order they were produced.
    input is the image that was passed to Pipeline.run()."""
    def __init__(self, images, input):
        self.images = images
        self.input = input

    def __repr__(self):
        return f"<PipelineResult images={len(self.images)}>"

    def __len__(self):
        return len(self.images)

    def __iter__(self):
        return iter(self.images)

    def __getitem__(self, i):
        return self.images[i]

    def original(self):
        """Return the image tagged as the original, or None if the pipeline discarded it.
        Depending on the pipeline, the original may have been transformed by a
        stage; the untouched input is self.input."""
        images = self.find(TAG_ORIGINAL)
        return images[0] if images else None

    def find(self, *tags):
        """Return the images that have at least one of the given tags."""
        return [img for img in self.images if any(img.tags.contains(tag) for tag in tags)]

    def match(self, pattern):
        """Return the images that have at least one tag matching pattern (see Tags.match)."""
        return [img for img in self.images if img.tags.match(pattern)]


class Pipeline:
    """An immutable sequence of Processors that are applied to an image.
    Runs in the caller's thread."""
    def __init__(self, processors=(), *, verbose=False, debug=False):
        self._processors = tuple(processors)
        self.stats = [StageStats(stage_name(p)) for p in self._processors]
        self.count = 0
        if debug:
            logger.setLevel(logging.DEBUG)
        elif verbose:
            logger.setLevel(logging.INFO)

    def __repr__(self):
        return f"<Pipeline {[stage_name(p) for p in self._processors]}>"

    def __len__(self):
        return len(self._processors)

    def __iter__(self):
        return iter(self._processors)

    def __getitem__(self, i):
        return self._processors[i]

    @property
    def processors(self):
        return self._processors

    def run(self, img, ctx:Context=None):
        """Run the pipeline on img and return a PipelineResult.
        Raises StageError or InvariantViolation if a stage fails, and
        Cancelled if ctx is cancelled. Nothing is returned on failure."""
        if ctx is None:
            ctx = Context.background()
        self.count += 1
        logger.info("== run %d: %d stages", self.count, len(self._processors))

        previous = [ProcessedImage(img, tags=Tags([TAG_ORIGINAL]), original=True)]
        for (index, processor) in enumerate(self._processors):
            current = []
            for pimg in previous:
                ctx.check()
                current.extend(self._run_processor(index, processor, ProcessorContext(pimg, ctx)))
            logger.info("<%s> %d images in, %d images out",
                        stage_name(processor), len(previous), len(current))
            previous = current

        return PipelineResult(previous, img)

    def _run_processor(self, index, processor, pctx):
        name = stage_name(processor)
        logger.debug("<%s> processing %s", name, pctx.image)
        t0 = time.time()
        try:
            processed = processor.process(pctx)
            # generators raise while they are consumed
            if processed is not None:
                processed = list(processed)
        except Cancelled:
            raise
        except Exception as e:
            raise StageError(f"{name} processor (stage {index}): {e}",
                             stage=processor, index=index) from e
        finally:
            self.stats[index].add(time.time() - t0)

        if processed is None:
            raise StageError(f"{name} processor (stage {index}) returned None",
                             stage=processor, index=index)
        originals = 0
        for out in processed:
            if not isinstance(out, ProcessedImage):
                raise StageError(f"{name} processor (stage {index}) returned {type(out).__name__}, "
                                 "not ProcessedImage", stage=processor, index=index)
            if out.original:
                originals += 1
            if originals > 1:
                raise InvariantViolation(f"{name} processor (stage {index}) returned more than "
                                         f"one {TAG_ORIGINAL!r} image", stage=processor, index=index)
            if logger.isEnabledFor(logging.DEBUG):
                for t in out.tags:
                    logger.debug("   tag %s", t)
        return processed

    def print_stats(self, out=sys.stdout):
        for (index, st) in enumerate(self.stats):
            print(f"{index}. {st.name}: calls: {st.count}  mean: {st.t_mean:.2}s  stddev: {st.t_stddev:.2}",
                  file=out)
