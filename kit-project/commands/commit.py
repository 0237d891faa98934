# The command: kit commit "<message>" (or kit commit -m "<message>")
# What it does: Creates a commit object for everything currently in the index and moves the current branch to it
# How it does: It turns the index into one flat tree object, looks up the commit the current branch points to (the parent, if any), builds a commit with the configured identity and the local time, stores it and rewrites the branch ref. Each step needs the hash produced by the one before, so they run strictly in order
# What data structure it uses: Linked List (each commit points to a single parent, history is linear), Hash Table (the underlying object store)

import logging
import sys
from datetime import datetime

from utils import config, index, objects, repository
from utils.errors import KitError, NotFound
from utils.fs import DiskFileSystem
from utils.objects import Commit, User
from utils.repository import RefStore
from utils.store import ObjectStore

logger = logging.getLogger(__name__)


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a kit repository (or any of the parent directories): .git", file=sys.stderr)
        sys.exit(1)

    fs = DiskFileSystem(repo_root)
    try:
        commit_hash = create_commit(fs, args.message)
        branch = RefStore(fs).current_branch()
    except (KitError, OSError) as e:
        print(f"fatal: {e}", file=sys.stderr)
        sys.exit(1)

    first_line = args.message.splitlines()[0] if args.message else ''
    print(f"[{branch} {commit_hash[:7]}] {first_line}")


def create_commit(fs, message, when=None): # Creates a commit object and updates the current branch. Returns the commit hash
    try:
        staged = index.decode(fs.read(index.INDEX_PATH))
    except NotFound:
        raise NotFound("nothing to commit (no index yet, use 'kit add')")

    store = ObjectStore(fs)
    tree_hash = store.put(objects.tree_from_index(staged))

    refs = RefStore(fs)
    ref = refs.head_ref()
    try:
        parent_hash = refs.resolve(ref)
    except NotFound:
        parent_hash = None # First commit on this branch

    name, email = config.get_user_identity(fs)
    if when is None:
        when = datetime.now().astimezone().replace(microsecond=0)
    user = User(name, email, when)

    if not message.endswith('\n'):
        message += '\n'
    commit = Commit(tree_hash, parent_hash, user, user, message)
    commit_hash = store.put(commit)

    refs.update(ref, commit_hash)
    logger.debug("Moved %s to %s (parent %s)", ref, commit_hash[:7], parent_hash and parent_hash[:7])
    return commit_hash
