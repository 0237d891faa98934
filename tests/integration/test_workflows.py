# Integration tests for complete workflows

import pytest
import os
import sys
import zlib
from datetime import datetime, timedelta, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'kit-project'))

import kit
from commands.add import add_file
from commands.commit import create_commit
from commands.log import walk_history
from utils import config, index as index_utils, objects
from utils.errors import InvalidEncoding, NotFound, UnsupportedFormat
from utils.fs import DiskFileSystem
from utils.objects import Blob, Commit, Tree
from utils.repository import RefStore
from utils.store import ObjectStore


WHEN = datetime(2021, 1, 3, 11, 59, 59, tzinfo=timezone(timedelta(hours=9)))
HELLO_HASH = '3edbc45b9a7f744c2345cd2cd073c3de091341ac'


class TestAddWorkflow:
    # Tests for add_file() on the in-memory filesystem

    def test_add_stores_blob_and_stages(self, mem_fs):
        mem_fs.write('hello.txt', b'hello, git')

        entry = add_file(mem_fs, 'hello.txt')

        assert entry.hex == HELLO_HASH
        assert entry.size == 10
        assert ObjectStore(mem_fs).get(HELLO_HASH) == Blob('hello, git')
        staged = index_utils.read_index(mem_fs)
        assert [(e.name, e.hex) for e in staged.entries] == [('hello.txt', HELLO_HASH)]

    def test_missing_index_treated_as_empty(self, mem_fs):
        assert not mem_fs.exists('.git/index')
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        assert mem_fs.exists('.git/index')

    def test_readd_replaces_entry(self, mem_fs):
        mem_fs.write('a.txt', b'one')
        mem_fs.write('b.txt', b'two')
        add_file(mem_fs, 'a.txt')
        add_file(mem_fs, 'b.txt')
        mem_fs.write('a.txt', b'three')
        add_file(mem_fs, 'a.txt')

        staged = index_utils.read_index(mem_fs)
        assert [e.name for e in staged.entries] == ['b.txt', 'a.txt']
        assert staged.entries[1].hex == objects.hash_object(Blob('three'))

    def test_add_twice_is_idempotent(self, mem_fs):
        mem_fs.write('a.txt', b'same')
        add_file(mem_fs, 'a.txt')
        first = mem_fs.read('.git/index')
        add_file(mem_fs, 'a.txt')
        assert mem_fs.read('.git/index') == first

    def test_missing_file(self, mem_fs):
        with pytest.raises(NotFound):
            add_file(mem_fs, 'nope.txt')

    def test_binary_file_rejected_before_anything_is_written(self, mem_fs):
        mem_fs.write('image.bin', b'\x89PNG\x00\xff')
        with pytest.raises(InvalidEncoding):
            add_file(mem_fs, 'image.bin')
        assert not mem_fs.exists('.git/index')


class TestCommitWorkflow:
    # Tests for create_commit() on the in-memory filesystem

    def test_first_commit_has_no_parent(self, mem_fs):
        mem_fs.write('hello.txt', b'hello, git')
        add_file(mem_fs, 'hello.txt')

        commit_hash = create_commit(mem_fs, 'first', when=WHEN)

        store = ObjectStore(mem_fs)
        commit = store.get(commit_hash)
        assert isinstance(commit, Commit)
        assert commit.parent_hash is None
        assert commit.message == 'first\n'
        assert RefStore(mem_fs).resolve('refs/heads/master') == commit_hash

    def test_second_commit_points_to_first(self, mem_fs):
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        first = create_commit(mem_fs, 'first', when=WHEN)

        mem_fs.write('b.txt', b'b')
        add_file(mem_fs, 'b.txt')
        second = create_commit(mem_fs, 'second', when=WHEN)

        commit = ObjectStore(mem_fs).get(second)
        assert commit.parent_hash == first
        assert RefStore(mem_fs).current() == second
        assert [h for h, _ in walk_history(ObjectStore(mem_fs), second)] == [second, first]

    def test_tree_lists_index_entries(self, mem_fs):
        mem_fs.write('b.txt', b'b')
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'b.txt')
        add_file(mem_fs, 'a.txt')

        store = ObjectStore(mem_fs)
        commit = store.get(create_commit(mem_fs, 'msg', when=WHEN))
        tree = store.get(commit.tree_hash)

        assert isinstance(tree, Tree)
        assert [(e.mode, e.name) for e in tree.entries] == [(0o100644, 'b.txt'), (0o100644, 'a.txt')]
        assert tree.entries[0].hash == objects.object_digest(Blob('b'))

    def test_default_identity(self, mem_fs):
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        commit = ObjectStore(mem_fs).get(create_commit(mem_fs, 'msg', when=WHEN))

        assert (commit.author.name, commit.author.email) == (config.DEFAULT_NAME, config.DEFAULT_EMAIL)
        assert commit.committer == commit.author
        assert objects.format_user(commit.author).endswith('1609642799 +0900')

    def test_configured_identity(self, mem_fs):
        config.write_config(mem_fs, 'user.name', 'Test User')
        config.write_config(mem_fs, 'user.email', 'test@example.com')
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')

        commit = ObjectStore(mem_fs).get(create_commit(mem_fs, 'msg', when=WHEN))
        assert commit.author.name == 'Test User'
        assert commit.author.email == 'test@example.com'

    def test_commit_is_deterministic_for_fixed_time(self, mem_fs):
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        first = create_commit(mem_fs, 'msg', when=WHEN)

        other = type(mem_fs)()
        other.write('a.txt', b'a')
        add_file(other, 'a.txt')
        assert create_commit(other, 'msg', when=WHEN) == first

    def test_uses_local_time_by_default(self, mem_fs):
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        commit = ObjectStore(mem_fs).get(create_commit(mem_fs, 'msg'))
        assert commit.author.when.utcoffset() is not None

    def test_no_index(self, mem_fs):
        with pytest.raises(NotFound):
            create_commit(mem_fs, 'msg')

    def test_detached_head_leaves_tree_behind(self, mem_fs):
        # No rollback: the tree object written before the failure stays in the store
        mem_fs.write('a.txt', b'a')
        add_file(mem_fs, 'a.txt')
        mem_fs.write('.git/HEAD', b'01a0c85dd05755281466d29983dfcb15889e1a64')

        with pytest.raises(UnsupportedFormat):
            create_commit(mem_fs, 'msg', when=WHEN)

        tree = objects.tree_from_index(index_utils.read_index(mem_fs))
        assert ObjectStore(mem_fs).get(objects.hash_object(tree)) == tree


class TestCommandLine:
    # Tests that drive kit.main() in a real temporary directory

    def test_init_add_commit_log(self, temp_dir, capsys):
        os.chdir(temp_dir)
        kit.main(['init'])
        assert os.path.isfile(os.path.join(temp_dir, '.git', 'HEAD'))

        with open(os.path.join(temp_dir, 'hello.txt'), 'w') as f:
            f.write('hello, git')
        kit.main(['add', 'hello.txt'])
        kit.main(['commit', '-m', 'first commit'])
        capsys.readouterr()

        kit.main(['ls-files', '--stage'])
        out = capsys.readouterr().out
        assert f" {HELLO_HASH} 0\thello.txt" in out

        kit.main(['log'])
        out = capsys.readouterr().out
        assert out.startswith('commit ')
        assert '    first commit' in out

    def test_hash_object(self, temp_dir, capsys):
        os.chdir(temp_dir)
        with open('hello.txt', 'wb') as f:
            f.write(b'hello, git')

        kit.main(['hash-object', 'hello.txt'])
        assert capsys.readouterr().out.strip() == HELLO_HASH

    def test_hash_object_write_then_cat_file(self, temp_repo, capsys):
        with open('hello.txt', 'wb') as f:
            f.write(b'hello, git')

        kit.main(['hash-object', '-w', 'hello.txt'])
        capsys.readouterr()
        kit.main(['cat-file', HELLO_HASH])
        assert capsys.readouterr().out == 'hello, git\n'

        path = os.path.join(temp_repo, '.git', 'objects', '3e', HELLO_HASH[2:])
        with open(path, 'rb') as f:
            assert zlib.decompress(f.read()) == b'blob 10\0hello, git'

    def test_cat_file_commit(self, temp_repo, capsys):
        with open('a.txt', 'w') as f:
            f.write('a')
        kit.main(['add', 'a.txt'])
        kit.main(['commit', '-m', 'msg'])
        commit_hash = RefStore(DiskFileSystem(temp_repo)).current()
        capsys.readouterr()

        kit.main(['cat-file', commit_hash])
        out = capsys.readouterr().out
        assert out.startswith('tree ')
        assert out.endswith('\n\nmsg\n')

    def test_cat_file_missing_object(self, temp_repo, capsys):
        with pytest.raises(SystemExit) as exc:
            kit.main(['cat-file', HELLO_HASH])
        assert exc.value.code == 1
        assert capsys.readouterr().err.startswith('fatal: ')

    def test_add_outside_repository(self, temp_dir, capsys):
        os.chdir(temp_dir)
        with pytest.raises(SystemExit) as exc:
            kit.main(['add', 'a.txt'])
        assert exc.value.code == 1
        assert 'not a kit repository' in capsys.readouterr().err

    def test_commit_without_index(self, temp_repo, capsys):
        with pytest.raises(SystemExit) as exc:
            kit.main(['commit', '-m', 'msg'])
        assert exc.value.code == 1
        assert 'nothing to commit' in capsys.readouterr().err

    def test_commit_positional_message(self, temp_repo, capsys):
        with open('a.txt', 'w') as f:
            f.write('a')
        kit.main(['add', 'a.txt'])
        kit.main(['commit', 'first commit'])
        assert capsys.readouterr().out.endswith('] first commit\n')

        commit = ObjectStore(DiskFileSystem(temp_repo)).get(RefStore(DiskFileSystem(temp_repo)).current())
        assert commit.message == 'first commit\n'

    def test_commit_requires_message(self, temp_repo, capsys):
        with pytest.raises(SystemExit) as exc:
            kit.main(['commit'])
        assert exc.value.code == 2
        assert 'commit message is required' in capsys.readouterr().err

    def test_commit_rejects_two_messages(self, temp_repo, capsys):
        with pytest.raises(SystemExit) as exc:
            kit.main(['commit', 'one', '-m', 'two'])
        assert exc.value.code == 2

    def test_commit_with_bad_config(self, temp_repo, capsys):
        with open(os.path.join(temp_repo, '.git', 'config'), 'w') as f:
            f.write('garbage no section')
        with open('a.txt', 'w') as f:
            f.write('a')
        kit.main(['add', 'a.txt'])

        with pytest.raises(SystemExit) as exc:
            kit.main(['commit', '-m', 'x'])
        assert exc.value.code == 1
        assert capsys.readouterr().err.startswith('fatal: bad config file')

    def test_config_sets_author(self, temp_repo, capsys):
        kit.main(['config', 'user.name', 'Test User'])
        kit.main(['config', 'user.email', 'test@example.com'])
        with open('a.txt', 'w') as f:
            f.write('a')
        kit.main(['add', 'a.txt'])
        kit.main(['commit', '-m', 'msg'])
        capsys.readouterr()

        kit.main(['log'])
        assert 'Author: Test User <test@example.com>' in capsys.readouterr().out
