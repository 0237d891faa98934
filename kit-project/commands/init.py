# The command: kit init
# What it does: Initializes a new, empty repository by creating the `.git` directory and its internal structure
# How it does: It creates the `objects` and `refs/heads` subdirectories and a `HEAD` file holding a symbolic reference to the 'master' branch. The branch file itself only appears with the first commit
# What data structure it uses: Tree (the file system directory structure is a tree)

import os
import sys

from utils import repository
from utils.fs import DiskFileSystem


def run(args):
    repo_path = os.path.join(os.getcwd(), repository.GIT_DIR)
    try:
        created = repository.init_repository(DiskFileSystem(os.getcwd()))
    except OSError as e:
        print(f"Error initializing repository: {e}", file=sys.stderr)
        sys.exit(1)

    if created:
        print(f"Initialized empty kit repository in {repo_path}/")
    else:
        print(f"Reinitialized existing kit repository in {repo_path}/")
