# Shared pytest fixtures for pitlog tests

import pytest
import itertools
import os
import sys
import shutil
import tempfile

# Add pitlog-project to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'pitlog-project'))

from utils import objects

BASE_TIME = 1700000000


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
    # Creates an initialized Pit repository in a temporary directory
    original_dir = os.getcwd()
    os.chdir(temp_dir)

    pit_dir = os.path.join(temp_dir, '.pit')
    os.makedirs(os.path.join(pit_dir, 'objects'))
    os.makedirs(os.path.join(pit_dir, 'refs', 'heads'))
    os.makedirs(os.path.join(pit_dir, 'refs', 'tags'))
    with open(os.path.join(pit_dir, 'HEAD'), 'w') as f:
        f.write('ref: refs/heads/master\n')

    config_path = os.path.join(pit_dir, 'config')
    with open(config_path, 'w') as f:
        f.write('[user]\n')
        f.write('name = Test User\n')
        f.write('email = test@example.com\n')

    yield temp_dir

    os.chdir(original_dir)


@pytest.fixture
def make_commit(temp_repo):
    # Returns a function that writes a commit with the given {path: content} snapshot
    # Every commit is one minute newer than the previous one, so walk order is deterministic
    clock = itertools.count(1)

    def _make_commit(files, parents=(), message='commit'):
        blobs = {}
        for path, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            blobs[path] = objects.hash_object(temp_repo, data, 'blob')
        tree_hash = objects.write_tree(temp_repo, objects.build_tree_from_dict(blobs))
        timestamp = BASE_TIME + next(clock) * 60
        author = f"Test User <test@example.com> {timestamp} +0000"
        return objects.write_commit(temp_repo, tree_hash, parents, author, message)

    return _make_commit


@pytest.fixture
def linear_history(temp_repo, make_commit):
    # A <- B <- C <- D, master points at D
    a = make_commit({'README.md': 'a'}, message='A')
    b = make_commit({'README.md': 'b'}, [a], message='B')
    c = make_commit({'README.md': 'c'}, [b], message='C')
    d = make_commit({'README.md': 'd'}, [c], message='D')
    set_ref(temp_repo, 'refs/heads/master', d)
    return temp_repo, {'A': a, 'B': b, 'C': c, 'D': d}


@pytest.fixture
def merge_history(temp_repo, make_commit):
    # A <- B, A <- C, M merges B and C
    a = make_commit({'a.txt': 'a'}, message='A')
    b = make_commit({'a.txt': 'a', 'b.txt': 'b'}, [a], message='B')
    c = make_commit({'a.txt': 'a', 'c.txt': 'c'}, [a], message='C')
    m = make_commit({'a.txt': 'a', 'b.txt': 'b', 'c.txt': 'c'}, [b, c], message='M')
    set_ref(temp_repo, 'refs/heads/master', m)
    return temp_repo, {'A': a, 'B': b, 'C': c, 'M': m}


def set_ref(repo_root, ref_name, sha1):
    ref_path = os.path.join(repo_root, '.pit', *ref_name.split('/'))
    os.makedirs(os.path.dirname(ref_path), exist_ok=True)
    with open(ref_path, 'w') as f:
        f.write(f"{sha1}\n")


def object_path(repo_root, sha1):
    return os.path.join(repo_root, '.pit', 'objects', sha1[:2], sha1[2:])


# Mock args object for command functions
class MockArgs:
    def __init__(self, **kwargs):
        for key, value in kwargs.items():
            setattr(self, key, value)
