# The command: kit add <file>...
# What it does: Stages files for the next commit by storing their content as blobs and recording them in the index
# How it does: For each file it reads the bytes, builds a Blob, writes it to the object store, stats the file, then replaces any index entry with the same name or hash and writes the index back. Steps run in that order and stop at the first error; an object already written stays written
# What data structure it uses: List (the index entries, in the order they were staged)

import os
import sys

from utils import index, objects, repository
from utils.errors import KitError, NotFound
from utils.fs import DiskFileSystem
from utils.store import ObjectStore


def run(args):
    repo_root = repository.find_repo_root() # Finding the root of the repository
    if not repo_root:
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    fs = DiskFileSystem(repo_root)
    try:
        for file_path in args.files:
            rel_path = _repo_path(file_path, repo_root)
            add_file(fs, rel_path)
            print(f"Added '{rel_path}' to the index.")
    except (KitError, OSError, ValueError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)


def add_file(fs, path):
    """
    Stages one file given by its '/'-separated path relative to the repository root.
    Returns the new index entry.
    """
    content = fs.read(path)
    blob = objects.blob_from_bytes(content)
    ObjectStore(fs).put(blob)

    metadata = fs.stat(path)
    entry = index.entry_from_metadata(path, objects.object_digest(blob), metadata)

    staged = index.update(index.read_index(fs), entry)
    index.write_index(fs, staged)
    return entry


def _repo_path(file_path, repo_root): # Converts a path given on the command line into a repository-relative one
    rel_path = os.path.relpath(os.path.abspath(file_path), repo_root)
    if rel_path in (os.curdir, os.pardir) or rel_path.startswith(os.pardir + os.sep):
        raise NotFound(f"pathspec '{file_path}' is outside the repository")
    return rel_path.replace(os.sep, '/')
