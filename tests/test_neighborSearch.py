# -- Neighbor Search Tests -- #

'''
Tests for the all-pairs neighbor search.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np

from PbfSim.sph.neighborSearch import BruteForceNeighborSearch, splitPairs


def testNeighborRelationIsSymmetric():
    '''j in N(i) <=> i in N(j) for a random cloud.'''
    rng = np.random.default_rng(42)
    positions = rng.random((120, 2))

    search = BruteForceNeighborSearch()
    search.build(positions)
    neighbors = search.queryNeighbors(0.1)

    assert len(neighbors) == 120
    nLinks = 0
    for i, nbrs in enumerate(neighbors):
        assert i not in nbrs
        for j in nbrs:
            assert i in neighbors[j]
            nLinks += 1
    assert nLinks > 0


def testNeighborsMatchDistanceCriterion():
    rng = np.random.default_rng(7)
    positions = rng.random((60, 2))
    h = 0.15

    search = BruteForceNeighborSearch()
    search.build(positions)
    neighbors = search.queryNeighbors(h)

    for i in range(60):
        dist = np.linalg.norm(positions - positions[i], axis=1)
        expected = np.nonzero((dist > 0.0) & (dist < h))[0]
        np.testing.assert_array_equal(neighbors[i], expected)


def testCoincidentParticlesAreNotNeighbors():
    positions = np.array([[0.5, 0.5], [0.5, 0.5], [0.55, 0.5]])

    search = BruteForceNeighborSearch()
    search.build(positions)
    neighbors = search.queryNeighbors(0.1)

    np.testing.assert_array_equal(neighbors[0], [2])
    np.testing.assert_array_equal(neighbors[1], [2])
    np.testing.assert_array_equal(neighbors[2], [0, 1])


def testPairExactlyAtRadiusIsExcluded():
    positions = np.array([[0.0, 0.0], [0.5, 0.0]])

    search = BruteForceNeighborSearch()
    search.build(positions)
    iIdx, jIdx = search.queryPairs(0.5)

    assert len(iIdx) == 0
    assert len(jIdx) == 0


def testPairsAreRowMajor():
    '''Pairs are grouped by particle, with ascending neighbor indices.'''
    positions = np.array([[0.5, 0.5], [0.52, 0.5], [0.9, 0.9], [0.5, 0.52]])

    search = BruteForceNeighborSearch()
    search.build(positions)
    iIdx, jIdx = search.queryPairs(0.1)

    assert list(zip(iIdx.tolist(), jIdx.tolist())) == [
        (0, 1), (0, 3),
        (1, 0), (1, 3),
        (3, 0), (3, 1),
    ]


def testEmptyQueries():
    search = BruteForceNeighborSearch()
    assert search.queryNeighbors(0.1) == []

    iIdx, jIdx = search.queryPairs(0.1)
    assert len(iIdx) == 0 and len(jIdx) == 0

    search.build(np.zeros((0, 2)))
    assert search.queryNeighbors(0.1) == []


def testSplitPairsKeepsIsolatedParticles():
    neighbors = splitPairs(np.array([0, 2]), np.array([2, 0]), 4)

    assert len(neighbors) == 4
    np.testing.assert_array_equal(neighbors[0], [2])
    assert len(neighbors[1]) == 0
    np.testing.assert_array_equal(neighbors[2], [0])
    assert len(neighbors[3]) == 0
