# What it does: Persists objects under .git/objects and reads them back, going through an injected FileSystem
# How it does: An object's SHA-1 picks its path: the first 2 hex chars name a shard directory, the other 38 the file. The stored bytes are the zlib-compressed encoded object
# What data structure it uses: Hash Table (the object database is a content-addressed map from hash to compressed bytes)

import logging
import re
import zlib

from . import objects
from .errors import DecodeError, NotFound

logger = logging.getLogger(__name__)

OBJECTS_DIR = '.git/objects'

_HEX_HASH = re.compile(r'[0-9a-f]{40}')


def shard_path(hex_hash): # '.git/objects/3e/dbc45b...'
    if not _HEX_HASH.fullmatch(hex_hash):
        raise NotFound(f"Not a valid object name: {hex_hash}")
    return f'{OBJECTS_DIR}/{hex_hash[:2]}/{hex_hash[2:]}'


class ObjectStore:

    def __init__(self, fs):
        self.fs = fs

    def object_path(self, hex_hash):
        return shard_path(hex_hash)

    def put(self, obj): # Stores obj and returns its hex hash
        data = objects.encode(obj)
        hex_hash = objects.hash_object(obj)
        path = shard_path(hex_hash)

        # Objects are immutable, an existing one is never rewritten
        if self.fs.exists(path):
            logger.debug("Already stored %s %s", obj.TYPE, hex_hash[:7])
            return hex_hash

        shard_dir = f'{OBJECTS_DIR}/{hex_hash[:2]}'
        try:
            self.fs.stat(shard_dir)
        except NotFound:
            self.fs.create_dir(shard_dir)

        # Written in place, there is no temp file + rename step
        self.fs.write(path, zlib.compress(data))
        logger.debug("Stored %s %s (%d bytes)", obj.TYPE, hex_hash[:7], len(data))
        return hex_hash

    def get_raw(self, hex_hash): # Decompressed "<type> <len>\0<payload>" bytes
        compressed = self.fs.read(self.object_path(hex_hash))
        try:
            return zlib.decompress(compressed)
        except zlib.error as e:
            raise DecodeError(f"Object {hex_hash} is corrupt: {e}")

    def get(self, hex_hash):
        obj = objects.decode(self.get_raw(hex_hash))
        logger.debug("Read %s %s", obj.TYPE, hex_hash[:7])
        return obj
