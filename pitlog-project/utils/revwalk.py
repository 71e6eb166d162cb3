# What it does: Walks the commit graph from a start commit, newest first, optionally excluding everything reachable from a boundary commit and keeping only commits that touch a path
# How it does: Commits are kept in a priority queue ordered by commit time (ties keep insertion order, so a parent never overtakes the child that queued it). Boundary commits carry an "uninteresting" flag that spreads to their parents as they are popped; the walk stops once only uninteresting commits are left in the queue, so the excluded part of the graph is never read in full. The walk is a generator, so callers only pay for the commits they pull
# What data structure it uses: Directed Acyclic Graph (the commit history), Priority Queue / Heap (the traversal frontier), Set (visited commits and uninteresting commits), Dictionary (cache of parsed commits)

import heapq
import itertools
import logging

from . import objects
from .errors import STORE_ERRORS, WalkError
from .pathfilter import DEFAULT_RENAME_THRESHOLD, FollowFilter

log = logging.getLogger(__name__)


class RevWalk:
    def __init__(self, repo_root):
        self.repo_root = repo_root
        self.path_filter = None
        self._commits = {}
        self._roots = []
        self._uninteresting = set()
        self._popped = set()
        self._started = False

    def parse_commit(self, sha1): # Parses (once) and caches a commit; errors propagate unchanged
        commit = self._commits.get(sha1)
        if commit is None:
            commit = objects.parse_commit(self.repo_root, sha1)
            self._commits[sha1] = commit
        return commit

    def mark_start(self, commit):
        self._roots.append(commit)

    def mark_uninteresting(self, commit):
        self._uninteresting.add(commit.id)
        self._roots.append(commit)

    def set_path_filter(self, path_filter):
        self.path_filter = path_filter

    def is_uninteresting(self, sha1):
        return sha1 in self._uninteresting

    def has_popped(self, sha1):
        return sha1 in self._popped

    def release(self): # Drops all transient traversal state
        self._commits.clear()
        self._roots = []
        self._uninteresting.clear()
        self._popped.clear()
        self.path_filter = None

    def __iter__(self):
        if self._started:
            raise RuntimeError("A RevWalk can only be iterated once")
        self._started = True
        return self._walk()

    def _parse_in_walk(self, sha1):
        try:
            return self.parse_commit(sha1)
        except STORE_ERRORS as e:
            raise WalkError(f"Cannot read commit {sha1}: {e}") from e

    def _mark_parents_uninteresting(self, commit):
        # Spreads the flag through ancestors that were already popped; the rest pick it up when they are popped
        stack = list(commit.parents)
        while stack:
            sha1 = stack.pop()
            if sha1 in self._uninteresting:
                continue
            self._uninteresting.add(sha1)
            if sha1 in self._popped:
                stack.extend(self._commits[sha1].parents)

    def _walk(self):
        queue = []
        counter = itertools.count()
        queued = set()

        def push(commit):
            if commit.id in queued:
                return
            queued.add(commit.id)
            heapq.heappush(queue, (-commit.commit_time, next(counter), commit.id))

        for commit in self._roots:
            push(commit)

        while queue:
            if all(sha1 in self._uninteresting for _, _, sha1 in queue):
                break

            _, _, sha1 = heapq.heappop(queue)
            commit = self._commits[sha1]
            self._popped.add(sha1)

            if sha1 in self._uninteresting:
                self._mark_parents_uninteresting(commit)
                for parent_id in commit.parents:
                    push(self._parse_in_walk(parent_id))
                continue

            for parent_id in commit.parents:
                push(self._parse_in_walk(parent_id))

            if self.path_filter is not None:
                try:
                    included = self.path_filter.include(self, commit)
                except STORE_ERRORS as e:
                    raise WalkError(f"Cannot compare trees of commit {sha1}: {e}") from e
                if not included:
                    continue
            yield commit


def new_walk(repo_root, start, boundary=None, path=None, rename_threshold=DEFAULT_RENAME_THRESHOLD):
    """
    Configures a walk over everything reachable from `start` but not from
    `boundary`, optionally limited to commits that touch `path`.

    `start` and `boundary` must name commits: a missing id raises
    MissingObjectError and an id of another object type raises
    IncorrectObjectTypeError, both before any traversal happens.
    """
    walk = RevWalk(repo_root)
    walk.mark_start(walk.parse_commit(start))
    if boundary:
        walk.mark_uninteresting(walk.parse_commit(boundary))
    if objects.split_path(path):
        walk.set_path_filter(FollowFilter(repo_root, path, rename_threshold))
    log.debug("walk start=%s boundary=%s path=%r", start, boundary, path)
    return walk
