"""
Build pipelines from YAML configuration files.

Example:

    pipeline:
      - resize:
          dimensions: {sm: [360], md: [640], lg: [960]}
          filter: lanczos
          discard_input: false
      - compress:
          jpeg: [75, 50]
          compress_original: false
      - tag: [foo, bar]
    output:
      quality: 95
"""

import logging

import yaml

from .constants import C
from .pipeline import Pipeline
from .resize import Resizer
from .compress import Compressor
from .tagger import tag
from . import compression

logger = logging.getLogger(__name__)

class ConfigError(ValueError):
    """The configuration is malformed"""


def yaml_items(item):
    if not isinstance(item,list):
        item = [item]
    yield from item


def resize_from_config(cfg):
    if not isinstance(cfg, dict) or 'dimensions' not in cfg:
        raise ConfigError("resize: 'dimensions' is required")
    filter_name = cfg.get('filter', 'lanczos')
    try:
        interpolation = C.RESAMPLE_FILTERS[filter_name]
    except KeyError:
        raise ConfigError(f"resize: unknown filter {filter_name!r}; "
                          f"must be one of {' '.join(sorted(C.RESAMPLE_FILTERS))}") from None
    dims = cfg['dimensions']
    if not isinstance(dims, (dict, list)):
        raise ConfigError("resize: 'dimensions' must be a mapping or a list")
    try:
        return Resizer(dims, filter=interpolation, discard_input=bool(cfg.get('discard_input', False)))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"resize: {e}") from e


def compress_from_config(cfg):
    if not isinstance(cfg, dict):
        raise ConfigError("compress: expected a mapping")
    compressions = []
    try:
        for q in yaml_items(cfg.get('jpeg', [])):
            compressions.append(compression.jpeg(q))
        for level in yaml_items(cfg.get('png', [])):
            compressions.append(compression.png(level))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"compress: {e}") from e
    if not compressions:
        raise ConfigError("compress: at least one of 'jpeg' or 'png' is required")
    return Compressor(compressions, compress_original=bool(cfg.get('compress_original', False)))


def tag_from_config(cfg):
    tags = list(yaml_items(cfg))
    if not all(isinstance(t, str) for t in tags):
        raise ConfigError("tag: tags must be strings")
    return tag(tags)


STAGE_BUILDERS = {'resize':resize_from_config,
                  'compress':compress_from_config,
                  'tag':tag_from_config}


def pipeline_from_config(config, **kwargs):
    """Return the Pipeline described by a parsed configuration"""
    if not isinstance(config, dict) or 'pipeline' not in config:
        raise ConfigError("configuration must have a 'pipeline' list")
    stages = []
    for (i, entry) in enumerate(yaml_items(config['pipeline'] or [])):
        if not isinstance(entry, dict) or len(entry) != 1:
            raise ConfigError(f"pipeline stage {i} must be a mapping with exactly one key")
        ((kind, cfg),) = entry.items()
        if kind not in STAGE_BUILDERS:
            raise ConfigError(f"pipeline stage {i}: unknown stage {kind!r}")
        stages.append(STAGE_BUILDERS[kind](cfg))
        logger.debug("stage %d: %s", i, stages[-1])
    return Pipeline(stages, **kwargs)


def load_config(path):
    with open(path) as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
    if config is None:
        config = {}
    return config


def load_pipeline(path, **kwargs):
    return pipeline_from_config(load_config(path), **kwargs)


def output_quality(config):
    """JPEG quality for the files written by the command line tool"""
    output = config.get('output') or {}
    if not isinstance(output, dict):
        raise ConfigError("output: expected a mapping")
    q = output.get('quality', C.DEFAULT_JPEG_QUALITY)
    if isinstance(q, bool) or not isinstance(q, int) or not 1 <= q <= 100:
        raise ConfigError(f"output: quality must be an integer between 1 and 100, not {q!r}")
    return q
