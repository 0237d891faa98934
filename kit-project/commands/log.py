# The command: kit log
# What it does: Displays the commit history by starting at the current branch and walking backward through the parent links
# How it does: It starts with the commit hash HEAD resolves to, reads the commit object, prints it, then follows its single parent until a commit without one is reached
# What data structure it uses: Linked List traversal (history is linear, every commit has at most one parent)

import sys

from utils import repository
from utils.errors import KitError
from utils.fs import DiskFileSystem
from utils.objects import Commit
from utils.repository import RefStore
from utils.store import ObjectStore


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root: # Check if inside a kit repository
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    fs = DiskFileSystem(repo_root)
    try:
        refs = RefStore(fs)
        commit_hash = refs.current()
        if not commit_hash: # Check if there are any commits
            print(f"fatal: your current branch '{refs.current_branch()}' does not have any commits yet", file=sys.stderr)
            sys.exit(1)

        for current_hash, commit in walk_history(ObjectStore(fs), commit_hash):
            print(f"commit {current_hash}")
            print(f"Author: {commit.author.name} <{commit.author.email}>")
            print(f"Date:   {commit.author.when.strftime('%a %b %d %H:%M:%S %Y %z')}")
            print()
            for line in commit.message.splitlines():
                print(f"    {line}")
            print()
    except (KitError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)


def walk_history(store, commit_hash): # Yields (hash, Commit) from commit_hash back to the root commit
    while commit_hash:
        commit = store.get(commit_hash)
        if not isinstance(commit, Commit):
            raise KitError(f"object {commit_hash} is not a commit")
        yield commit_hash, commit
        commit_hash = commit.parent_hash
