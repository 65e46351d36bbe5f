#!/usr/bin/env python3
# test_corpus_walker.py
# Tests for the leaf walk over result directories

import os
import threading

import pytest

from corpus_walker import FilesystemCorpus, for_each_leaf
from cover_errors import IOFailure


def make_tree(root):
    for path in ["x/a.B", "x/y/b.B", "c.B/inner.B", "z/empty", "x/d.B"]:
        os.makedirs(os.path.join(root, path))
    # A file with the suffix is not a leaf
    with open(os.path.join(root, "x", "file.B"), 'w') as f:
        f.write("not a directory\n")


def relative(root, paths):
    return [os.path.relpath(p, root) for p in paths]


def test_leaves_in_sorted_order(tmp_path):
    make_tree(str(tmp_path))
    corpus = FilesystemCorpus(str(tmp_path))
    assert relative(str(tmp_path), corpus.leaves()) == [
        "c.B", os.path.join("x", "a.B"), os.path.join("x", "d.B"), os.path.join("x", "y", "b.B")]
    assert corpus.count_leaves() == 4


def test_visit_is_idempotent(tmp_path):
    make_tree(str(tmp_path))
    visited = []
    first = for_each_leaf(str(tmp_path), visited.append)
    second = for_each_leaf(str(tmp_path), visited.append)
    assert set(first) == set(second)
    assert len(visited) == 8
    assert len(set(visited)) == 4


def test_parallel_visit(tmp_path):
    make_tree(str(tmp_path))
    lock = threading.Lock()
    counts = {}

    def operation(leaf):
        with lock:
            counts[leaf] = counts.get(leaf, 0) + 1
        return os.path.basename(leaf)

    results = FilesystemCorpus(str(tmp_path)).visit(operation, workers=4)
    assert sorted(results.values()) == ["a.B", "b.B", "c.B", "d.B"]
    assert set(counts.values()) == {1}


def test_other_suffix(tmp_path):
    make_tree(str(tmp_path))
    assert FilesystemCorpus(str(tmp_path), suffix="empty").count_leaves() == 1


def test_is_leaf(tmp_path):
    make_tree(str(tmp_path))
    corpus = FilesystemCorpus(str(tmp_path))
    assert corpus.is_leaf(os.path.join(str(tmp_path), "c.B"))
    assert not corpus.is_leaf(os.path.join(str(tmp_path), "x", "file.B"))


def test_missing_root(tmp_path):
    with pytest.raises(IOFailure):
        FilesystemCorpus(str(tmp_path / "nothing"))


def test_symlinks_are_not_followed(tmp_path):
    make_tree(str(tmp_path))
    root = str(tmp_path)
    # Back to an ancestor, and a second name for a leaf
    os.symlink(root, os.path.join(root, "x", "y", "loop"))
    os.symlink(os.path.join(root, "x", "a.B"), os.path.join(root, "z", "alias.B"))
    leaves = relative(root, FilesystemCorpus(root).leaves())
    assert leaves == [
        "c.B", os.path.join("x", "a.B"), os.path.join("x", "d.B"), os.path.join("x", "y", "b.B")]
