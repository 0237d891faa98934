# What it does: Locates the repository and manages the pointer chain HEAD -> ref file -> commit hash
# How it does: `find_repo_root` walks up the directory tree to the folder holding `.git`. RefStore reads `.git/HEAD` (which must be "ref: <path>"), then the ref file it names, and overwrites that ref file after a commit
# What data structure it uses: Linked List (HEAD points to a ref, the ref points to a commit, each commit points to its parent). Uses recursion to find the repo root

import os
import re

from .errors import DecodeError, NotFound, UnsupportedFormat

GIT_DIR = '.git'
HEAD_PATH = f'{GIT_DIR}/HEAD'
DEFAULT_HEAD = 'ref: refs/heads/master\n'
REF_PREFIX = 'ref: '

_HEX_HASH = re.compile(r'[0-9a-f]{40}')


def find_repo_root(path='.'): # Recursively searches for the .git directory to find the repository root
    path = os.path.abspath(path)
    if os.path.isdir(os.path.join(path, GIT_DIR)):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)


def init_repository(fs): # Creates .git with an empty object database and HEAD on master. Returns False if one already exists
    if fs.exists(HEAD_PATH):
        return False
    for directory in (GIT_DIR, f'{GIT_DIR}/objects', f'{GIT_DIR}/refs', f'{GIT_DIR}/refs/heads'):
        if not fs.exists(directory):
            fs.create_dir(directory)
    fs.write(HEAD_PATH, DEFAULT_HEAD.encode())
    return True


def _read_text(fs, path):
    try:
        return fs.read(path).decode('utf-8')
    except UnicodeDecodeError:
        raise DecodeError(f"{path} is not valid UTF-8")


class RefStore:

    def __init__(self, fs):
        self.fs = fs

    def head_ref(self):
        """
        Returns the ref path HEAD points to, e.g. 'refs/heads/master'.
        A detached HEAD (a bare hash) is not supported.
        """
        content = _read_text(self.fs, HEAD_PATH)
        if not content.startswith(REF_PREFIX):
            raise UnsupportedFormat(f"HEAD is not a symbolic ref: {content.strip()!r}")
        return content[len(REF_PREFIX):].strip()

    def resolve(self, ref):
        # A missing ref file raises NotFound, meaning the branch has no commits yet
        hex_hash = _read_text(self.fs, f'{GIT_DIR}/{ref}').strip()
        if not hex_hash:
            raise NotFound(f"{ref} is empty")
        if not _HEX_HASH.fullmatch(hex_hash):
            raise DecodeError(f"{ref} does not contain an object hash: {hex_hash!r}")
        return hex_hash

    def update(self, ref, hex_hash):
        self.fs.write(f'{GIT_DIR}/{ref}', hex_hash.encode('ascii'))

    def current(self): # Commit hash HEAD resolves to, or None before the first commit
        ref = self.head_ref()
        try:
            return self.resolve(ref)
        except NotFound:
            return None

    def current_branch(self): # 'master' for 'refs/heads/master'
        return self.head_ref().split('/')[-1]
