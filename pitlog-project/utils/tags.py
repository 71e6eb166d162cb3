# What it does: Finds the annotated tags a symbolic revision name goes through, so a log page for `v1.0` can show the tag's own message and tagger
# How it does: Starting from the object the name resolved to, it follows tag objects one by one until it reaches something that is not a tag (normally the commit) or the range boundary
# What data structure it uses: Linked List (a chain of tag objects, each pointing at the next)

from . import objects
from .repository import MAX_PEEL_DEPTH


def list_objects(repo_root, object_id, boundary=None): # Yields (type, id) for every object on the way from object_id to its peeled target, in encounter order
    sha1 = object_id
    for _ in range(MAX_PEEL_DEPTH):
        if not sha1 or sha1 == boundary:
            return
        obj_type, _ = objects.read_object(repo_root, sha1)
        yield obj_type, sha1
        if obj_type != 'tag':
            return
        sha1 = objects.parse_tag(repo_root, sha1).object

def collect_tags(repo_root, object_id, boundary=None): # Returns the annotated tags (as Tag tuples) reachable from object_id
    return [
        objects.parse_tag(repo_root, sha1)
        for obj_type, sha1 in list_objects(repo_root, object_id, boundary)
        if obj_type == 'tag'
    ]
