# The command: kit ls-files [--stage]
# What it does: Lists the files in the index, with --stage also their mode and blob hash

import sys

from utils import index, repository
from utils.errors import KitError
from utils.fs import DiskFileSystem


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    try:
        staged = index.read_index(DiskFileSystem(repo_root))
    except (KitError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    if not staged.entries:
        return
    if args.stage:
        print(index.display(staged))
    else:
        for entry in staged.entries:
            print(entry.name)
