# The command: kit config <key> <value>
# What it does: Sets a configuration key-value pair, e.g. user.name, which commits use as author and committer
# How it does: It passes the key and value to `write_config` in `utils/config.py`, which parses and rewrites `.git/config`

import sys

from utils import repository
from utils import config as config_utils
from utils.errors import KitError
from utils.fs import DiskFileSystem


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    try: # Set the configuration key-value pair
        config_utils.write_config(DiskFileSystem(repo_root), args.key, args.value)
    except (KitError, OSError, ValueError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Set {args.key} to '{args.value}'")
