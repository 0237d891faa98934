# The command: kit cat-file <hash>
# What it does: Prints the content of a stored object in readable form
# How it does: Reads the compressed object at its shard path, decompresses and decodes it, then prints the blob text, the tree listing or the commit text

import sys

from utils import objects, repository
from utils.errors import KitError
from utils.fs import DiskFileSystem
from utils.store import ObjectStore


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    try:
        obj = ObjectStore(DiskFileSystem(repo_root)).get(args.hash)
    except (KitError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    text = objects.display(obj)
    print(text, end='' if text.endswith('\n') else '\n')
