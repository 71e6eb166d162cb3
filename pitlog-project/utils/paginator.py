# What it does: Cuts one page of at most `limit` commits out of a revision walk and works out where the next and previous pages start
# How it does: The walk is consumed lazily. When resuming from a cursor, commits before it are skipped while the last `limit` of them are remembered in a bounded deque; the oldest of those is where the previous page starts. One commit beyond the page is pulled to learn whether a next page exists
# What data structure it uses: Iterator / Generator (the walk), Bounded Deque (the commits just before the cursor)

from collections import deque

from .errors import CursorNotFoundError


class Paginator:
    """
    Iterates over one page of a walk. `next_start` and `previous_start` hold
    commit ids (or None) and are only meaningful once iteration is finished.
    """

    def __init__(self, walk, limit, start=None):
        if not isinstance(limit, int) or limit < 0:
            raise ValueError(f"limit must be a non-negative integer: {limit!r}")
        self.walk = walk
        self.limit = limit
        self.start = start
        self.next_start = None
        self.previous_start = None
        self._iterated = False

    def __iter__(self):
        if self._iterated:
            raise RuntimeError("A Paginator can only be iterated once")
        self._iterated = True
        return self._page()

    def _page(self):
        if self.limit == 0:
            return

        commits = iter(self.walk)
        if self.start is None:
            current = next(commits, None)
        else:
            current = self._skip_to_start(commits)

        emitted = 0
        while current is not None:
            if emitted == self.limit:
                self.next_start = current.id
                return
            yield current
            emitted += 1
            current = next(commits, None)

    def _skip_to_start(self, commits):
        before = deque(maxlen=self.limit)
        for commit in commits:
            if commit.id == self.start:
                if before:
                    self.previous_start = before[0].id
                return commit
            before.append(commit)
        raise CursorNotFoundError(f"Commit {self.start} is not part of this history")
