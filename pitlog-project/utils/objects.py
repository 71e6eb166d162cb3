# What it does: Reads (and, for fixtures and tooling, writes) the content-addressed object database: blobs, trees, commits and annotated tags
# How it does: Every object is stored zlib-compressed as `<type> <size>\0<content>` under `.pit/objects/<first 2 hex>/<remaining 38 hex>`. Commits and tags are parsed from their header lines into immutable named tuples; trees are read one level at a time so a single path can be looked up without reading the whole snapshot
# What data structure it uses: Hash Table / Dictionary (the object store is keyed by SHA-1), Merkle Tree (trees reference subtrees and blobs by hash), Named Tuples (read-only views of commits, tags and identities)

import hashlib
import os
import re
import zlib
from collections import namedtuple

from .errors import CorruptObjectError, IncorrectObjectTypeError, MissingObjectError

OBJECT_ID_LENGTH = 40
HEX_DIGITS = set('0123456789abcdef')

Ident = namedtuple('Ident', ['name', 'email', 'time', 'tz'])
Tag = namedtuple('Tag', ['id', 'object', 'type', 'name', 'tagger', 'message'])


class Commit(namedtuple('Commit', ['id', 'tree', 'parents', 'author', 'committer', 'message'])):
    __slots__ = ()

    @property
    def commit_time(self): # Committer time, falling back to the author time for commits without a committer line
        ident = self.committer or self.author
        return ident.time if ident else 0

    @property
    def short_message(self):
        lines = self.message.strip().splitlines()
        return lines[0] if lines else ''


_IDENT_RE = re.compile(r'^(.*?) <(.*)> (\d+) ([+-]\d{4})$')


def objects_dir(repo_root):
    return os.path.join(repo_root, '.pit', 'objects')


def hash_object(repo_root, content, obj_type, write=True): #Hashes content and optionally writes it as an object of the given type ('blob', 'tree', 'commit', 'tag')
    header = f'{obj_type} {len(content)}\0'.encode()
    data = header + content

    sha1 = hashlib.sha1(data).hexdigest()

    if write:
        object_dir = os.path.join(objects_dir(repo_root), sha1[:2])
        os.makedirs(object_dir, exist_ok=True)
        object_path = os.path.join(object_dir, sha1[2:])

        with open(object_path, 'wb') as f:
            f.write(zlib.compress(data))

    return sha1

def read_object(repo_root, sha1): #Reads an object by its SHA-1 hash and returns its type and content
    if not is_object_id(sha1):
        raise MissingObjectError(f"Object not found: {sha1}")
    object_path = os.path.join(objects_dir(repo_root), sha1[:2], sha1[2:])

    if not os.path.exists(object_path):
        raise MissingObjectError(f"Object not found: {sha1}")

    with open(object_path, 'rb') as f:
        compressed_data = f.read()

    try:
        data = zlib.decompress(compressed_data)
    except zlib.error as e:
        raise CorruptObjectError(f"Object {sha1} is corrupt: {e}") from e

    null_byte_index = data.find(b'\0')
    if null_byte_index < 0:
        raise CorruptObjectError(f"Object {sha1} has no header")
    header = data[:null_byte_index].decode(errors='replace')
    content = data[null_byte_index + 1:]

    try:
        obj_type, size = header.split(' ')
        size = int(size)
    except ValueError as e:
        raise CorruptObjectError(f"Object {sha1} has a malformed header: {header!r}") from e
    if size != len(content):
        raise CorruptObjectError(f"Object {sha1} is truncated")

    return obj_type, content

def read_typed_object(repo_root, sha1, expected_type): # Like read_object, but fails when the object is not of the expected type
    obj_type, content = read_object(repo_root, sha1)
    if obj_type != expected_type:
        raise IncorrectObjectTypeError(f"Object {sha1} is a {obj_type}, not a {expected_type}")
    return content

def is_object_id(value):
    return isinstance(value, str) and len(value) == OBJECT_ID_LENGTH and set(value) <= HEX_DIGITS

def resolve(repo_root, prefix):
    """
    Expands an abbreviated object id into the set of full ids sharing that prefix.
    An empty set means nothing matched; more than one element means the prefix is ambiguous.
    Input that is not hexadecimal never matches.
    """
    prefix = (prefix or '').lower()
    if not prefix or len(prefix) > OBJECT_ID_LENGTH or not set(prefix) <= HEX_DIGITS:
        return set()

    base = objects_dir(repo_root)
    if not os.path.isdir(base):
        return set()

    if len(prefix) >= 2:
        fanouts = [prefix[:2]]
    else:
        fanouts = [name for name in os.listdir(base) if name.startswith(prefix)]

    matches = set()
    for fanout in fanouts:
        fanout_dir = os.path.join(base, fanout)
        if not os.path.isdir(fanout_dir):
            continue
        for name in os.listdir(fanout_dir):
            sha1 = fanout + name
            if sha1.startswith(prefix) and is_object_id(sha1):
                matches.add(sha1)
    return matches

def parse_ident(value): # Parses `Name <email> <epoch> <tz>`; anything else is kept as a bare name
    match = _IDENT_RE.match(value.strip())
    if not match:
        return Ident(value.strip(), '', 0, '+0000')
    name, email, timestamp, tz = match.groups()
    return Ident(name, email, int(timestamp), tz)

def _parse_headers(sha1, content): # Splits a commit or tag body into (header pairs, message)
    try:
        text = content.decode()
    except UnicodeDecodeError as e:
        raise CorruptObjectError(f"Object {sha1} is not valid UTF-8") from e

    headers = []
    lines = text.split('\n')
    for i, line in enumerate(lines):
        if not line:
            return headers, '\n'.join(lines[i + 1:])
        key, _, value = line.partition(' ')
        headers.append((key, value))
    return headers, ''

def parse_commit(repo_root, sha1):
    content = read_typed_object(repo_root, sha1, 'commit')
    headers, message = _parse_headers(sha1, content)

    tree = None
    parents = []
    author = committer = None
    for key, value in headers:
        if key == 'tree':
            tree = value.strip()
        elif key == 'parent':
            parents.append(value.strip())
        elif key == 'author':
            author = parse_ident(value)
        elif key == 'committer':
            committer = parse_ident(value)

    if not tree:
        raise CorruptObjectError(f"Commit {sha1} has no tree")
    return Commit(sha1, tree, tuple(parents), author, committer, message)

def parse_tag(repo_root, sha1):
    content = read_typed_object(repo_root, sha1, 'tag')
    headers, message = _parse_headers(sha1, content)
    fields = dict(headers)

    if 'object' not in fields:
        raise CorruptObjectError(f"Tag {sha1} has no object")
    tagger = parse_ident(fields['tagger']) if 'tagger' in fields else None
    return Tag(sha1, fields['object'].strip(), fields.get('type', 'commit').strip(),
               fields.get('tag', '').strip(), tagger, message)

def read_tree(repo_root, tree_sha): # Returns the direct entries of a tree as a list of (mode, type, sha, name)
    content = read_typed_object(repo_root, tree_sha, 'tree')
    entries = []
    try:
        for line in content.decode().splitlines():
            # Line format: <mode> <type> <hash>\t<name>
            meta, name = line.split('\t', 1)
            mode, entry_type, sha1 = meta.split(' ')
            entries.append((mode, entry_type, sha1, name))
    except (UnicodeDecodeError, ValueError) as e:
        raise CorruptObjectError(f"Tree {tree_sha} is malformed") from e
    return entries

def split_path(path): # Normalises a repository path into its components
    return [part for part in (path or '').strip('/').split('/') if part]

def tree_entry(repo_root, tree_sha, path): # Returns (type, sha) of the entry at `path` inside the tree, or None if there is none
    current = ('tree', tree_sha)
    for part in split_path(path):
        if current[0] != 'tree':
            return None
        for _, entry_type, sha1, name in read_tree(repo_root, current[1]):
            if name == part:
                current = (entry_type, sha1)
                break
        else:
            return None
    return current

def get_tree_files(repo_root, tree_sha): #Retrieves all files and their hashes from a tree by reading it recursively
    files = {}

    def read_tree_recursive(sha1, path_prefix=""):
        for _, entry_type, entry_sha, name in read_tree(repo_root, sha1):
            current_path = f"{path_prefix}/{name}" if path_prefix else name
            if entry_type == 'blob':
                files[current_path] = entry_sha
            elif entry_type == 'tree':
                read_tree_recursive(entry_sha, current_path)

    read_tree_recursive(tree_sha)
    return files

def build_tree_from_dict(files): # Builds a nested dictionary from a flat {path: sha} (or index style {path: (sha, ...)}) mapping
    tree = {}
    for path, value in files.items():
        hash_val = value[0] if isinstance(value, tuple) else value
        parts = split_path(path.replace(os.sep, '/'))
        current_level = tree
        for part in parts[:-1]:
            current_level = current_level.setdefault(part, {})
        current_level[parts[-1]] = hash_val
    return tree

def write_tree(repo_root, tree_dict): #Recursively writes a tree object from a nested dictionary and returns its hash

    entries = []
    for name, value in sorted(tree_dict.items()):
        if isinstance(value, dict):
            # It's a subdirectory, recurse
            sha1 = write_tree(repo_root, value)
            mode = '040000'
            entry_type = 'tree'
        else:
            mode = '100644'
            entry_type = 'blob'
            sha1 = value

        entries.append(f"{mode} {entry_type} {sha1}\t{name}".encode())

    tree_content = b'\n'.join(entries)
    return hash_object(repo_root, tree_content, 'tree')

def write_commit(repo_root, tree_hash, parents, author, message, committer=None): # Writes a commit object; `author` is a `Name <email> <epoch> <tz>` string
    lines = [f'tree {tree_hash}']
    for parent in parents:
        if parent:
            lines.append(f'parent {parent}')
    lines.append(f'author {author}')
    lines.append(f'committer {committer or author}')
    lines.append('')
    lines.append(message)
    return hash_object(repo_root, '\n'.join(lines).encode(), 'commit')

def write_tag(repo_root, object_id, name, tagger, message, obj_type='commit'): # Writes an annotated tag object pointing at `object_id`
    lines = [
        f'object {object_id}',
        f'type {obj_type}',
        f'tag {name}',
        f'tagger {tagger}',
        '',
        message,
    ]
    return hash_object(repo_root, '\n'.join(lines).encode(), 'tag')
