# What it does: The filesystem capability every other module reads and writes through, with a real-disk adapter and an in-memory adapter
# How it does: FileSystem is an abstract base class with six methods. DiskFileSystem joins '/'-separated relative paths onto an explicit root directory. MemoryFileSystem keeps a tree of nested dictionaries
# What data structure it uses: Tree (nested dicts mapping a name to either a sub-dict or the file's bytes)

import abc
import os
from dataclasses import dataclass

from .errors import NotFound

REGULAR_FILE_MODE = 0o100644
DIRECTORY_MODE = 0o040000

_U32 = 0xFFFFFFFF


@dataclass(frozen=True)
class Metadata:
    dev: int
    ino: int
    mode: int
    uid: int
    gid: int
    size: int
    mtime: int
    mtime_nsec: int
    ctime: int
    ctime_nsec: int


class FileSystem(abc.ABC):
    """
    Storage backend. Paths are relative to the repository root and use '/' as the separator.
    Missing paths raise NotFound.
    """

    @abc.abstractmethod
    def read(self, path):
        ...

    @abc.abstractmethod
    def write(self, path, data):
        ...

    @abc.abstractmethod
    def stat(self, path):
        ...

    @abc.abstractmethod
    def create_dir(self, path):
        ...

    @abc.abstractmethod
    def rename(self, src, dst):
        ...

    @abc.abstractmethod
    def remove(self, path):
        ...

    def exists(self, path): # True if stat succeeds
        try:
            self.stat(path)
        except NotFound:
            return False
        return True


class DiskFileSystem(FileSystem):

    def __init__(self, root):
        self.root = os.path.abspath(root)

    def _full_path(self, path):
        return os.path.join(self.root, *path.split('/'))

    def read(self, path):
        try:
            with open(self._full_path(path), 'rb') as f:
                return f.read()
        except FileNotFoundError:
            raise NotFound(f"No such file: {path}")

    def write(self, path, data):
        try:
            with open(self._full_path(path), 'wb') as f:
                f.write(data)
        except FileNotFoundError:
            raise NotFound(f"No such directory for: {path}")

    def stat(self, path):
        try:
            st = os.stat(self._full_path(path))
        except FileNotFoundError:
            raise NotFound(f"No such file: {path}")
        # The index stores every field in 32 bits
        return Metadata(
            dev=st.st_dev & _U32,
            ino=st.st_ino & _U32,
            mode=st.st_mode & _U32,
            uid=st.st_uid & _U32,
            gid=st.st_gid & _U32,
            size=st.st_size & _U32,
            mtime=int(st.st_mtime) & _U32,
            mtime_nsec=st.st_mtime_ns % 1_000_000_000,
            ctime=int(st.st_ctime) & _U32,
            ctime_nsec=st.st_ctime_ns % 1_000_000_000,
        )

    def create_dir(self, path):
        os.makedirs(self._full_path(path), exist_ok=True)

    def rename(self, src, dst):
        try:
            os.replace(self._full_path(src), self._full_path(dst))
        except FileNotFoundError:
            raise NotFound(f"No such file: {src}")

    def remove(self, path):
        try:
            os.remove(self._full_path(path))
        except FileNotFoundError:
            raise NotFound(f"No such file: {path}")


class MemoryFileSystem(FileSystem):
    """
    Filesystem held entirely in memory, seeded with an empty repository on the master branch.
    """

    def __init__(self):
        self.root = {
            '.git': {
                'objects': {},
                'refs': {'heads': {}},
                'HEAD': b'ref: refs/heads/master',
            }
        }

    def _lookup(self, parts, path):
        node = self.root
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                raise NotFound(f"No such file or directory: {path}")
            node = node[part]
        return node

    def _parent(self, path): # Returns (directory dict, final name)
        parts = path.split('/')
        parent = self._lookup(parts[:-1], path)
        if not isinstance(parent, dict):
            raise NotFound(f"Not a directory: {path}")
        return parent, parts[-1]

    def read(self, path):
        node = self._lookup(path.split('/'), path)
        if isinstance(node, dict):
            raise NotFound(f"Is a directory: {path}")
        return node

    def write(self, path, data):
        parent, name = self._parent(path)
        if isinstance(parent.get(name), dict):
            raise NotFound(f"Is a directory: {path}")
        parent[name] = bytes(data)

    def stat(self, path):
        node = self._lookup(path.split('/'), path)
        if isinstance(node, dict):
            return Metadata(0, 0, DIRECTORY_MODE, 0, 0, 0, 0, 0, 0, 0)
        return Metadata(0, 0, REGULAR_FILE_MODE, 0, 0, len(node), 0, 0, 0, 0)

    def create_dir(self, path):
        parent, name = self._parent(path)
        if not isinstance(parent.get(name), dict):
            parent[name] = {}

    def rename(self, src, dst):
        data = self.read(src)
        if src == dst:
            return
        self.write(dst, data)
        self.remove(src)

    def remove(self, path):
        parent, name = self._parent(path)
        if name not in parent:
            raise NotFound(f"No such file: {path}")
        del parent[name]
