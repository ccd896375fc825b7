"""
Categorical distribution: inverse-CDF sampling frequencies and the
differentiable log-probability of an index.
"""

import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.insert(0, str(Path(__file__).parent))

from aad_vi.tensor import NumpyBackend, TConst, tensor
from aad_vi.inference import Categorical

backend = NumpyBackend()


def test_sampling_frequencies_follow_weights():
    np.random.seed(61)
    weights = np.array([1.0, 3.0, 6.0])          # unnormalized
    dist = Categorical(tensor(backend, weights))
    n = 20000
    counts = np.bincount([dist.sample().get for _ in range(n)], minlength=3)
    p = weights / weights.sum()
    assert np.all(np.abs(counts - n * p) < 4 * np.sqrt(n * p * (1 - p)))


def test_sample_is_always_in_range():
    np.random.seed(62)
    dist = Categorical(tensor(backend, [0.0, 0.0, 1.0]))
    assert {dist.sample().get for _ in range(200)} == {2}


def test_observe_value_and_gradient():
    p0 = np.array([2.0, 1.0, 1.0])
    leaf = TConst(backend, p0).buffer()
    score = Categorical(leaf).observe(0)
    assert np.isclose(score.v, np.log(0.5))

    score.dv(1.0)
    # d/dp_j log(p_0 / sum p) = [j == 0] / p_0 - 1 / sum p
    expected = np.array([1 / 2.0 - 1 / 4.0, -1 / 4.0, -1 / 4.0])
    assert np.allclose(leaf.accumulated, expected)


def test_sample_score_matches_observe():
    np.random.seed(63)
    dist = Categorical(tensor(backend, [0.2, 0.8]))
    s = dist.sample()
    assert np.isclose(s.score.v, dist.observe(s.get).v)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        Categorical(tensor(backend, [[0.5, 0.5]]))
    dist = Categorical(tensor(backend, [0.5, 0.5]))
    with pytest.raises(ValueError):
        dist.observe(2)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
