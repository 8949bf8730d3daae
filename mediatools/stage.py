"""
Processor interface and timing statistics for pipeline stages.
"""

import math
from abc import ABC,abstractmethod

from .context import ProcessorContext


class Processor(ABC):
    """A pipeline stage. Subclasses implement process()."""

    @abstractmethod
    def process(self, pctx:ProcessorContext):
        """Process pctx.image and return a list of ProcessedImages.
        Return [] to drop the image. Raise to abort the pipeline run.
        The input ProcessedImage must not be modified.
        """


class ProcessorFunc(Processor):
    """Allows a function fn(pctx) -> [ProcessedImage] to be used as a Processor"""
    def __init__(self, fn, name=None):
        self.fn = fn
        self.name = name or getattr(fn, '__name__', fn.__class__.__name__)

    def __repr__(self):
        return f"<ProcessorFunc {self.name}>"

    def process(self, pctx:ProcessorContext):
        return self.fn(pctx)


def stage_name(processor):
    """Name of a processor for log and error messages"""
    if isinstance(processor, ProcessorFunc):
        return processor.name
    return processor.__class__.__name__


class StageStats:
    """Call count and timing for one stage of a pipeline"""
    def __init__(self, name):
        self.name    = name
        self.sum_t   = 0
        self.sum_t2  = 0
        self.count   = 0

    def add(self, t):
        self.sum_t  += t
        self.sum_t2 += (t*t)
        self.count  += 1

    @property
    def t_mean(self):
        return self.sum_t / self.count if self.count>0 else float("nan")

    @property
    def t2_mean(self):
        return self.sum_t2 / self.count if self.count>0 else float("nan")

    @property
    def t_variance(self):
        return self.t2_mean - self.t_mean * self.t_mean

    @property
    def t_stddev(self):
        # rounding can make the variance slightly negative
        return math.sqrt(max(self.t_variance, 0.0)) if self.count>0 else float("nan")
