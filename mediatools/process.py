"""
Run a pipeline described by a YAML file on an image and write every variant to a directory.

    python -m mediatools.process photo.jpg --config pipeline.yml --outdir out

Each variant is written as a JPEG. manifest.json in the output directory
lists the file name, tags, original flag and size of every variant.
"""

import os
import sys
import json
import logging

from . import storage
from .config import load_config,pipeline_from_config,output_quality,ConfigError
from .constants import C
from .context import Context,Cancelled
from .image_utils import image_decode,jpeg_encode,NotImageError,CodecError
from .pipeline import PipelineError

logger = logging.getLogger(__name__)


def write_result(result, outdir, *, quality=C.DEFAULT_JPEG_QUALITY, template=C.DEFAULT_JPEG_TEMPLATE):
    """Save the images of a PipelineResult to outdir and return the manifest"""
    manifest = []
    for (counter, pimg) in enumerate(result.images):
        name = template.format(counter=counter)
        storage.save(os.path.join(outdir, name), jpeg_encode(pimg.img, quality))
        manifest.append({'file':name,
                         'tags':list(pimg.tags),
                         'original':pimg.original,
                         'width':pimg.width,
                         'height':pimg.height})
    storage.save(os.path.join(outdir, C.DEFAULT_MANIFEST_NAME),
                 json.dumps(manifest, indent=4).encode('utf-8'))
    return manifest


def process_file(path, config, outdir, *, timeout=None, stats=False, out=sys.stdout):
    pipeline = pipeline_from_config(config)
    img = image_decode(storage.load(path))
    ctx = Context.background()
    if timeout is not None:
        ctx = ctx.with_timeout(timeout)
    logger.info("processing %s %s", path, img.shape)
    result = pipeline.run(img, ctx)
    manifest = write_result(result, outdir, quality=output_quality(config))
    if stats:
        pipeline.print_stats(out=out)
    return manifest


def main(argv=None):
    import argparse
    parser = argparse.ArgumentParser(description="Run an image pipeline on an image and save the variants",
                                     formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument("image", help='Image to process')
    parser.add_argument("--config", help='Yaml file describing the pipeline', default='pipeline.yml')
    parser.add_argument("--outdir", help='Directory for the variants', default='out')
    parser.add_argument("--timeout", help='Give up after this many seconds', type=float)
    parser.add_argument("--stats", help='Print per-stage timing', action='store_true')
    parser.add_argument("--loglevel", help='Logging level', default='WARNING')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.loglevel.upper())

    try:
        manifest = process_file(args.image, load_config(args.config), args.outdir,
                                timeout=args.timeout, stats=args.stats)
    except Cancelled as e:
        print(f"Cancelled '{args.image}': {e}", file=sys.stderr)
        return 2
    except (ConfigError, PipelineError, NotImageError, CodecError, ValueError, OSError) as e:
        print(f"Cannot process '{args.image}': {e}", file=sys.stderr)
        return 1
    print(f"{len(manifest)} images written to {args.outdir}")
    return 0


if __name__=="__main__":
    sys.exit(main())
