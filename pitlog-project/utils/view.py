# What it does: Describes which history a log request is looking at (revision, optional range start, optional path, query parameters) and turns that description back into a URL
# How it does: Revision names are resolved against refs first and abbreviated object ids second. A LogView is never modified in place: every change returns a copy, so the current view can be reused to build navigation links
# What data structure it uses: Named Tuple (Revision), Map / Multimap (query parameter name -> list of values)

from collections import namedtuple
from urllib.parse import urlencode

from . import objects, repository
from .errors import NotFoundError

Revision = namedtuple('Revision', ['name', 'id', 'peeled_id', 'name_is_id'])


def resolve_revision(repo_root, name):
    """
    Resolves HEAD, a full ref name, a branch or tag name, or an (abbreviated)
    object id into a Revision. Refs win over ids. Raises NotFoundError when the
    name matches nothing or an abbreviated id is ambiguous.
    """
    if not name:
        raise NotFoundError("empty revision")

    if name == 'HEAD':
        sha1 = repository.get_head_commit(repo_root)
    elif name.startswith('refs/'):
        sha1 = repository.read_ref(repo_root, name)
    else:
        sha1 = None
        for prefix in repository.REF_PREFIXES:
            sha1 = repository.read_ref(repo_root, prefix + name)
            if sha1:
                break

    if sha1:
        return Revision(name, sha1, _peel(repo_root, sha1), False)

    ids = objects.resolve(repo_root, name)
    if len(ids) != 1:
        raise NotFoundError(f"{name!r} does not name exactly one object ({len(ids)} matches)")
    sha1 = ids.pop()
    return Revision(name, sha1, _peel(repo_root, sha1), True)

def _peel(repo_root, sha1):
    try:
        return repository.peel(repo_root, sha1)
    except FileNotFoundError as e:
        raise NotFoundError(f"{sha1} is not in the object store") from e

def parse_revision_range(repo_root, rev_range): # `new` or `old..new` -> (old Revision or None, new Revision)
    if '..' in rev_range:
        old_name, new_name = rev_range.split('..', 1)
        return resolve_revision(repo_root, old_name), resolve_revision(repo_root, new_name or 'HEAD')
    return None, resolve_revision(repo_root, rev_range)


class LogView:
    def __init__(self, revision, old_revision=None, path='', params=None):
        self.revision = revision
        self.old_revision = old_revision
        self.path = '/'.join(objects.split_path(path))
        self.params = {key: list(values) for key, values in (params or {}).items()}

    def copy(self):
        return LogView(self.revision, self.old_revision, self.path, self.params)

    def copy_and_canonicalize(self): # Same view, with revisions given as ids spelled out in full
        copy = self.copy()
        copy.revision = _canonical(self.revision)
        if self.old_revision is not None:
            copy.old_revision = _canonical(self.old_revision)
        return copy

    def replace_param(self, name, value):
        copy = self.copy()
        copy.params[name] = [value]
        return copy

    def remove_param(self, name):
        copy = self.copy()
        copy.params.pop(name, None)
        return copy

    def revision_range(self):
        if self.old_revision is None:
            return self.revision.name
        return f"{self.old_revision.name}..{self.revision.name}"

    def title(self):
        return f"Log - {self.revision_range()}"

    def to_url(self):
        url = f"/+log/{self.revision_range()}"
        if self.path:
            url += f"/{self.path}"
        query = urlencode([(key, value) for key in sorted(self.params) for value in self.params[key]])
        if query:
            url += f"?{query}"
        return url


def _canonical(revision):
    if revision.name_is_id:
        return revision._replace(name=revision.id)
    return revision
