# -- All-Pairs Neighbor Search -- #

'''
Brute-force neighbor search for PBF.

Every particle is compared against every other particle (O(N^2)).
A particle j is a neighbor of i when 0 < |x_i - x_j| < h. The
strict lower bound drops the self-comparison (and any exactly
coincident particle); the strict upper bound keeps pairs sitting
exactly on the support radius out of the list.

Since both bounds depend only on |x_i - x_j|, the relation is
symmetric: j in N(i) <=> i in N(j).

Neighbors are returned two ways:
- per-particle index arrays (ascending), stored on the arena
- flattened directed pair arrays (iIdx, jIdx), in row-major order,
  used by the vectorized solver sweeps

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np


#--------------------------------------------------------------------#
# -- Neighbor Search Protocol -- #
#--------------------------------------------------------------------#

class NeighborSearch(Protocol):
    '''Protocol for neighbor search algorithms.'''

    def build(self, positions: np.ndarray) -> None:
        '''Record the positions the next query runs against.'''
        ...

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all directed neighbor pairs within the given radius.

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] :
            (iIndices, jIndices) where j is a neighbor of i.
            Both (i, j) and (j, i) are present.
        '''
        ...


#--------------------------------------------------------------------#
# -- Brute Force Search -- #
#--------------------------------------------------------------------#

class BruteForceNeighborSearch:
    '''
    All-pairs neighbor search using NumPy broadcasting.

    Builds the full (N, N) distance matrix and masks it with
    0 < d < h.
    '''

    def __init__(self) -> None:
        self._positions: np.ndarray | None = None

    def build(self, positions: np.ndarray) -> None:
        '''
        Record particle positions for subsequent queries.

        Parameters:
        -----------
        positions : np.ndarray
            Particle positions, shape (N, 2)
        '''
        self._positions = positions

    def queryPairs(self, radius: float) -> tuple[np.ndarray, np.ndarray]:
        '''
        Find all directed pairs (i, j) with 0 < |x_i - x_j| < radius.

        Pairs are ordered by i, then by j, so the pairs of each
        particle are contiguous and ascending.

        Parameters:
        -----------
        radius : float
            Search radius (kernel support h)

        Returns:
        --------
        tuple[np.ndarray, np.ndarray] : (iIndices, jIndices)
        '''
        if self._positions is None or len(self._positions) == 0:
            return (np.array([], dtype=np.intp), np.array([], dtype=np.intp))

        positions = self._positions
        diff = positions[:, np.newaxis, :] - positions[np.newaxis, :, :]  # (N, N, 2)
        distances = np.sqrt(np.sum(diff * diff, axis=2))  # (N, N)

        withinRadius = (distances > 0.0) & (distances < radius)
        iIdx, jIdx = np.nonzero(withinRadius)

        return (iIdx, jIdx)

    def queryNeighbors(self, radius: float) -> list[np.ndarray]:
        '''
        Per-particle neighbor index lists.

        Parameters:
        -----------
        radius : float
            Search radius (kernel support h)

        Returns:
        --------
        list[np.ndarray] : Ascending neighbor indices for every particle
        '''
        nParticles = 0 if self._positions is None else len(self._positions)
        iIdx, jIdx = self.queryPairs(radius)
        return splitPairs(iIdx, jIdx, nParticles)


def splitPairs(iIdx: np.ndarray, jIdx: np.ndarray, nParticles: int) -> list[np.ndarray]:
    '''
    Split row-major directed pairs into per-particle neighbor arrays.

    Parameters:
    -----------
    iIdx : np.ndarray
        Source particle of each pair (sorted ascending)
    jIdx : np.ndarray
        Neighbor particle of each pair
    nParticles : int
        Arena size

    Returns:
    --------
    list[np.ndarray] : jIdx sliced per particle
    '''
    if nParticles == 0:
        return []

    counts = np.bincount(iIdx, minlength=nParticles)
    return np.split(jIdx, np.cumsum(counts)[:-1])
