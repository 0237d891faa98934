# Shared pytest fixtures for kit tests

import pytest
import os
import sys
import shutil
import tempfile

# Add kit-project to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'kit-project'))

from utils import repository
from utils.fs import DiskFileSystem, MemoryFileSystem
from utils.index import Entry


@pytest.fixture
def temp_dir():
    # Creates a temporary directory that is cleaned up after the test
    # Also saves/restores cwd to prevent issues when tests change directories
    original_dir = os.getcwd()
    tmp = tempfile.mkdtemp()
    yield tmp
    os.chdir(original_dir)
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def temp_repo(temp_dir):
    # Creates an initialized repository in a temporary directory and makes it the cwd
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    repository.init_repository(DiskFileSystem(temp_dir))

    yield temp_dir

    os.chdir(original_dir)


@pytest.fixture
def disk_fs(temp_repo):
    return DiskFileSystem(temp_repo)


@pytest.fixture
def mem_fs():
    # In-memory filesystem, already holding .git/objects, .git/refs/heads and HEAD
    return MemoryFileSystem()


@pytest.fixture
def make_entry():
    # Builds index entries with fixed stat values
    def _make_entry(name, digest, size=0):
        return Entry(
            ctime=1609642799, ctime_nsec=123,
            mtime=1609642800, mtime_nsec=456,
            dev=2049, ino=1234, mode=0o100644,
            uid=1000, gid=1000, size=size,
            hash=digest, name=name,
        )
    return _make_entry
