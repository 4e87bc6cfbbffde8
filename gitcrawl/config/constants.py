"""Hard-coded configuration constants not meant to be user-configurable."""

# One-line commit summaries longer than this are truncated and suffixed with "..."
COMMIT_SUMMARY_LEN = 80

# count_required value that makes the history walker fetch the whole reachable graph
FETCH_ENTIRE_HISTORY = -1

# Content reported for a submodule entry, mirrors `git diff` output for gitlinks
SUBMODULE_CONTENT_TEMPLATE = "Subproject commit {address}\n"

# Path segments understood by ObjectStore.resolve on commits
COMMIT_TREE_SEGMENT = "tree"
COMMIT_PARENTS_SEGMENT = "parents"
