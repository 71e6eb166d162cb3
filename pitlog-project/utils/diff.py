# What it does: Provides helper functions for comparing repository states and scoring how similar two file contents are (used for rename detection)
# What data structure it uses: Dictionary (for states), Set (for efficient O(N) path comparisons), List (of file lines for the similarity algorithm).
import difflib

def compare_states(state1, state2): # Compares two states represented as {path: hash} dictionaries

    paths1 = set(state1.keys())
    paths2 = set(state2.keys())

    added = sorted(list(paths2 - paths1))
    deleted = sorted(list(paths1 - paths2))

    modified = []
    for path in sorted(list(paths1 & paths2)):
        if state1[path] != state2[path]:
            modified.append(path)

    return {'added': added, 'deleted': deleted, 'modified': modified}

def similarity_score(content1, content2): # Returns a 0-100 score of how much of the two contents' lines match
    if content1 == content2:
        return 100
    lines1 = content1.decode(errors='ignore').splitlines()
    lines2 = content2.decode(errors='ignore').splitlines()
    if not lines1 and not lines2:
        return 100

    matcher = difflib.SequenceMatcher(None, lines1, lines2, autojunk=False)
    return int(round(matcher.ratio() * 100))
