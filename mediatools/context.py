"""
Cancellation for pipeline runs.

A Context is handed to Pipeline.run(). The pipeline checks it before every
processor call, and processors that do long work check it between steps.
Cancellation is cooperative: nothing is interrupted, the next check raises.

ProcessorContext is what a Processor receives: the single image it should
process plus the Context of the run.
"""

import threading
import time


class Cancelled(RuntimeError):
    """The run was cancelled"""

class DeadlineExceeded(Cancelled):
    """The run's deadline passed"""


class Context:
    """Cancellation and deadline state. cancel() may be called from any thread."""
    def __init__(self, *, parent=None, deadline=None):
        self.parent = parent
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline    # in time.monotonic() seconds
        self._cancelled = threading.Event()

    def __repr__(self):
        return f"<Context done={self.done} deadline={self.deadline}>"

    @classmethod
    def background(cls):
        """A Context that is never cancelled unless cancel() is called"""
        return cls()

    def with_cancel(self):
        """Return a child Context. Cancelling the child does not cancel self."""
        return Context(parent=self)

    def with_deadline(self, deadline):
        """Return a child Context that expires at deadline (a time.monotonic() value)"""
        return Context(parent=self, deadline=deadline)

    def with_timeout(self, seconds):
        return self.with_deadline(time.monotonic() + seconds)

    def cancel(self):
        self._cancelled.set()

    def err(self):
        """Return the Cancelled error if the context is done, otherwise None"""
        if self.parent is not None:
            e = self.parent.err()
            if e is not None:
                return e
        if self._cancelled.is_set():
            return Cancelled("context cancelled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceeded("context deadline exceeded")
        return None

    @property
    def done(self):
        return self.err() is not None

    def check(self):
        """Raise Cancelled (or DeadlineExceeded) if the context is done"""
        e = self.err()
        if e is not None:
            raise e


class ProcessorContext:
    """Passed to Processor.process(). Wraps exactly one ProcessedImage."""
    __slots__ = ('image','context')

    def __init__(self, image, ctx=None):
        self.image = image
        self.context = ctx if ctx is not None else Context.background()

    def __repr__(self):
        return f"<ProcessorContext image={self.image!r}>"

    @property
    def original(self):
        """True if the image is the pipeline's original image"""
        return self.image.original

    @property
    def done(self):
        return self.context.done

    def err(self):
        return self.context.err()

    def check(self):
        self.context.check()
