# The command: kit hash-object [-w] <file>
# What it does: Prints the hash the file would have as a blob, and with -w also stores the blob
# How it does: Builds a Blob from the file bytes (which must be UTF-8 text) and hashes its encoded form "blob <size>\0<content>"

import sys

from utils import objects, repository
from utils.errors import KitError
from utils.fs import DiskFileSystem
from utils.store import ObjectStore


def run(args):
    try:
        with open(args.file, 'rb') as f:
            blob = objects.blob_from_bytes(f.read())

        if args.write:
            repo_root = repository.find_repo_root()
            if not repo_root:
                print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
                sys.exit(1)
            ObjectStore(DiskFileSystem(repo_root)).put(blob)
    except (KitError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    print(objects.hash_object(blob))
