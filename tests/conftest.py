import math
import random

import numpy as np
import pytest


@pytest.fixture
def four_node_matrix():
  return np.array([
      [0, 10, 15, 20],
      [10, 0, 35, 25],
      [15, 35, 0, 30],
      [20, 25, 30, 0],
  ], dtype=float)


@pytest.fixture
def random_points_matrix():
  rng = random.Random(11)
  points = [(rng.uniform(0, 500), rng.uniform(0, 500)) for _ in range(8)]
  return np.array([[math.dist(p, q) for q in points] for p in points])
