# corpus_walker.py
# Visiting the leaves of a result corpus
#
# A corpus is anything that can list its leaves and apply an operation to
# each of them. On disk a leaf is a directory whose name ends with a fixed
# suffix; leaves are not descended into. Leaves are independent, so the
# per-leaf operation may run in parallel as long as outputs stay per leaf.

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, Iterable, Iterator, List, Protocol

from cover_errors import IOFailure

LEAF_SUFFIX = ".B"


class Corpus(Protocol):
    def leaves(self) -> Iterable[str]: ...

    def visit(self, operation: Callable[[str], object], workers: int = 1) -> Dict[str, object]: ...


class FilesystemCorpus:
    """
    Directory tree whose leaves are directories named "*<suffix>"

    Traversal is in sorted name order, so listing is reproducible; the
    root itself is never a leaf.
    """

    def __init__(self, root, suffix: str = LEAF_SUFFIX):
        if not os.path.isdir(root):
            raise IOFailure(root, "not a directory")
        self.root = root
        self.suffix = suffix

    def is_leaf(self, path) -> bool:
        return os.path.isdir(path) and os.path.basename(os.path.normpath(path)).endswith(self.suffix)

    def leaves(self) -> Iterator[str]:
        stack = [self.root]
        while stack:
            directory = stack.pop()
            try:
                entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
            except OSError as e:
                raise IOFailure(directory, e.strerror or str(e)) from e
            subdirectories = []
            for entry in entries:
                # Symlinked directories are skipped: no cycles, no leaf reached twice
                if not entry.is_dir(follow_symlinks=False):
                    continue
                if entry.name.endswith(self.suffix):
                    yield entry.path
                else:
                    subdirectories.append(entry.path)
            # Reversed so the stack pops them in name order
            stack.extend(reversed(subdirectories))

    def count_leaves(self) -> int:
        return sum(1 for _ in self.leaves())

    def visit(self, operation: Callable[[str], object], workers: int = 1) -> Dict[str, object]:
        """
        Apply operation to every leaf exactly once

        Args:
            operation: called with the leaf path
            workers: > 1 runs the leaves on a thread pool

        Returns:
            dict: leaf path -> result of the operation
        """
        leaves: List[str] = list(self.leaves())
        if workers <= 1:
            return {leaf: operation(leaf) for leaf in leaves}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(operation, leaves))
        return dict(zip(leaves, results))


def for_each_leaf(root, operation: Callable[[str], object], suffix: str = LEAF_SUFFIX,
                  workers: int = 1) -> Dict[str, object]:
    return FilesystemCorpus(root, suffix).visit(operation, workers)
