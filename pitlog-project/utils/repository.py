# What it does: Provides high-level functions for interacting with the repository structure: finding the repo root, reading HEAD and enumerating branch and tag pointers
# How it does: It reads the `HEAD` file and the files under `refs/heads` and `refs/tags`. Tag objects are peeled (followed to the object they finally point at) so every ref can be indexed by the commit it names
# What data structure it uses: Uses recursion (linear recursion) to find the repo root, Map / Dictionary (ref name -> object id, and the inverted commit id -> set of ref names index)

import os

from . import objects
from .errors import CorruptObjectError

REF_PREFIXES = ('refs/heads/', 'refs/tags/')
MAX_PEEL_DEPTH = 32


def find_repo_root(path='.'): # Recursively searches for the .pit directory to find the repository root
    path = os.path.abspath(path)
    pit_dir = os.path.join(path, '.pit')
    if os.path.isdir(pit_dir):
        return path
    parent_path = os.path.dirname(path)
    if parent_path == path:
        return None
    return find_repo_root(parent_path)

def get_head_commit(repo_root): # Retrieves the commit hash that HEAD points to, or None if there are no commits
    head_path = os.path.join(repo_root, '.pit', 'HEAD')
    if not os.path.exists(head_path):
        return None
    with open(head_path, 'r') as f:
        head_content = f.read().strip()
    if head_content.startswith('ref: '):
        return read_ref(repo_root, head_content.split(' ', 1)[1].strip())
    return head_content or None

def read_ref(repo_root, ref_name): # Returns the object id stored in a ref such as `refs/heads/master`, or None if it does not exist or is empty
    ref_path = os.path.join(repo_root, '.pit', *ref_name.split('/'))
    if not os.path.isfile(ref_path):
        return None
    with open(ref_path, 'r') as f:
        value = f.read().strip()
    return value or None

def list_refs(repo_root): # Returns {ref name: object id} for every branch and tag
    refs = {}
    for prefix in REF_PREFIXES:
        base = os.path.join(repo_root, '.pit', *prefix.strip('/').split('/'))
        if not os.path.isdir(base):
            continue
        for dirpath, _, filenames in os.walk(base):
            for filename in filenames:
                rel = os.path.relpath(os.path.join(dirpath, filename), base)
                ref_name = prefix + rel.replace(os.sep, '/')
                value = read_ref(repo_root, ref_name)
                if value:
                    refs[ref_name] = value
    return refs

def peel(repo_root, sha1): # Follows annotated tags until a non-tag object is reached and returns its id
    for _ in range(MAX_PEEL_DEPTH):
        obj_type, _ = objects.read_object(repo_root, sha1)
        if obj_type != 'tag':
            return sha1
        sha1 = objects.parse_tag(repo_root, sha1).object
    raise CorruptObjectError(f"Tag chain starting at {sha1} is too deep")

def all_refs_by_peeled_target(repo_root):
    """
    Returns a mapping {object id: set of ref names} where the id is the
    peeled target of each branch and tag. A ref whose target is missing from
    the store is indexed under its own value.
    """
    refs_by_id = {}
    for ref_name, value in list_refs(repo_root).items():
        try:
            target = peel(repo_root, value)
        except FileNotFoundError:
            target = value
        refs_by_id.setdefault(target, set()).add(ref_name)
    return refs_by_id

def short_ref_name(ref_name): # `refs/heads/master` -> `master`, `refs/tags/v1` -> `v1`
    for prefix in REF_PREFIXES:
        if ref_name.startswith(prefix):
            return ref_name[len(prefix):]
    return ref_name
