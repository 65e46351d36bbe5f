#!/usr/bin/env python3
# test_generators.py
# Tests for the standard graphs and their known biclique-cover numbers

import pytest

from bcc_by_sat import SearchConfig, search_bcc
from conflict_graphs import conflict_graph_by_definition
from cover_errors import InvalidBound
from graph_generators import bcc_biclique, bcc_clique, biclique, clique, cnf_clique


def test_small_cliques():
    assert (clique(0).n(), clique(0).m()) == (0, 0)
    assert (clique(1).n(), clique(1).m()) == (1, 0)
    assert clique(1).names == ("1",)
    K2 = clique(2)
    assert K2.m() == 1
    assert K2.has_edge(K2.index("1"), K2.index("2"))
    assert clique(3).to_adjacency_text() == "1 2 3\n2 3\n3\n"
    assert clique(7).m() == 21


def test_bcc_clique_values():
    assert [bcc_clique(n) for n in range(6)] == [0, 0, 1, 2, 2, 3]
    assert bcc_clique(32) == 5
    assert bcc_clique(33) == 6
    with pytest.raises(InvalidBound):
        bcc_clique(-1)


def test_bicliques():
    for p in range(5):
        for q in range(5):
            G = biclique(p, q)
            assert G.n() == p + q
            assert G.m() == p * q
            assert bcc_biclique(p, q) == min(p * q, 1)
    assert biclique(1, 2).names == ("l1", "r1", "r2")


@pytest.mark.parametrize("n", [2, 3, 4, 5])
def test_search_finds_bcc_of_clique(n):
    config = SearchConfig()
    config.sb_rounds = 5
    result = search_bcc(clique(n), config)
    assert result.exact
    assert result.bcc == bcc_clique(n)
    assert result.cover.validate(clique(n))


def test_search_finds_bcc_of_biclique():
    result = search_bcc(biclique(2, 3))
    assert result.exact
    assert result.bcc == bcc_biclique(2, 3)


def test_cnf_clique_conflict_graph():
    for n in range(0, 20):
        clauses = cnf_clique(n)
        assert len(clauses) == n
        assert all(len(clause) == bcc_clique(n) for clause in clauses)
        G = conflict_graph_by_definition(clauses)
        assert G.edges == clique(n).edges
