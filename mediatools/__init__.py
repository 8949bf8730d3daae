"""Design document.

Abstractions related to image content:

ProcessedImage - One variant of the input image as it moves through the
        pipeline: a pixel buffer, its Tags, and an "original" flag.

        ProcessedImages are immutable once a stage produces them; a
        stage that wants to change one builds a new one with replace().

        Pixel buffers are numpy arrays. Inside the pipeline every buffer a
        stage produces is canonical: H x W x 4, uint8, BGRA (OpenCV order).

Tags -  An ordered, duplicate-free tuple of strings recording how a variant
        was made ("original", "resized", "size=sm", "compressed",
        "compression=jpeg,quality=75", ...). Adding a tag that is already
        present does nothing.

Dimensions - (width, height) pairs. A height of 0 means "keep the aspect
        ratio". DimensionList holds unnamed dimensions; DimensionMap
        names them so that resized images get a "size=<name>" tag.

Abstractions related to image processing:

Processor - a pipeline stage. It receives a ProcessorContext holding exactly
        one ProcessedImage and returns zero or more ProcessedImages.
        Resizer, Compressor and Tagger are the stock processors.

Context - cancellation and deadline state handed to every processor.
        Cancellation is cooperative: the pipeline checks it before each
        processor call and long-running stages check it themselves.

Pipeline - an immutable sequence of Processors. run() threads a working set
        of images through the stages: every image of the current set is
        handed to the stage, and the stage outputs, concatenated in order,
        become the next working set. At most one image in the set may be
        flagged as the original.

"""

__version__ = "0.3.0"
