"""
Storage layer for mediatools.
Handles all get and put operations in a single place, so the command line tool
does not care whether it is given a path or a file: URL.
"""

import urllib.parse
import os
import functools
import logging
from os.path import dirname

@functools.lru_cache(maxsize=4)
def mkdirs(path):
    logging.debug("mkdirs %s",path)
    os.makedirs(path, exist_ok = True)


def local_path(url):
    o = urllib.parse.urlparse(url)
    if o.scheme=='file' or o.scheme=='':
        return urllib.parse.unquote(o.path) if o.scheme=='file' else url
    raise ValueError(f"unknown scheme {o.scheme} in url {url}")


def save(url, data):
    path = local_path(url)
    logging.debug("save %s (%d bytes)",path,len(data))
    if dirname(path):
        mkdirs(dirname(path))
    with open(path,'wb') as f:
        f.write(data)


def load(url):
    with open(local_path(url),'rb') as f:
        return f.read()
