# What it does: Decides whether a commit touched a given path, following the file across renames
# How it does: The tree entry at the path is compared with the entry at the same path in every parent. A commit is kept only when it differs from all of its parents, so merges that simply inherit the path from one side are skipped. When the path is new relative to a parent, the files deleted in that step are scored for similarity against the new file; the best match at or above the rename threshold becomes the path followed for that parent and its ancestors
# What data structure it uses: Dictionary (commit id -> path being followed for that commit), Merkle Tree lookups (one tree level per path component)

from . import objects, diff

DEFAULT_RENAME_THRESHOLD = 50


class FollowFilter:
    def __init__(self, repo_root, path, rename_threshold=DEFAULT_RENAME_THRESHOLD):
        if not 0 <= rename_threshold <= 100:
            raise ValueError(f"rename threshold must be between 0 and 100: {rename_threshold}")
        self.repo_root = repo_root
        self.path = '/'.join(objects.split_path(path))
        self.rename_threshold = rename_threshold
        self._paths = {}

    def path_for(self, commit_id): # The path followed for a commit; differs from self.path once a rename was crossed
        return self._paths.get(commit_id, self.path)

    def include(self, walk, commit):
        path = self._paths.pop(commit.id, self.path)
        entry = objects.tree_entry(self.repo_root, commit.tree, path)

        if not commit.parents:
            return entry is not None

        changed = True
        for parent_id in commit.parents:
            parent = walk.parse_commit(parent_id)
            parent_path = path
            parent_entry = objects.tree_entry(self.repo_root, parent.tree, path)
            if parent_entry is None and entry is not None and entry[0] == 'blob':
                renamed_from = self.find_rename_source(commit, parent, entry[1])
                if renamed_from is not None:
                    parent_path = renamed_from
            # a parent popped before its child (clock skew) never looks its path up
            if not walk.has_popped(parent_id):
                self._paths.setdefault(parent_id, parent_path)
            if parent_entry == entry:
                changed = False
        return changed

    def find_rename_source(self, commit, parent, blob_sha):
        """
        Returns the path in `parent` that `blob_sha` was most likely renamed
        from, or None when no file deleted between parent and commit scores at
        least `rename_threshold`.
        """
        parent_files = objects.get_tree_files(self.repo_root, parent.tree)
        states = diff.compare_states(parent_files, objects.get_tree_files(self.repo_root, commit.tree))
        if not states['deleted']:
            return None

        new_content = None
        best_path, best_score = None, -1
        for candidate in states['deleted']:
            candidate_sha = parent_files[candidate]
            if candidate_sha == blob_sha:
                score = 100
            else:
                if new_content is None:
                    new_content = objects.read_typed_object(self.repo_root, blob_sha, 'blob')
                old_content = objects.read_typed_object(self.repo_root, candidate_sha, 'blob')
                score = diff.similarity_score(old_content, new_content)
            # candidates are sorted, so ties keep the lexically first path
            if score > best_score:
                best_path, best_score = candidate, score

        if best_score >= self.rename_threshold:
            return best_path
        return None
