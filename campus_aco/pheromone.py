"""
Pheromone model: a square numpy matrix with a zero diagonal whose
off-diagonal cells never drop below a configured floor.

All update functions mutate the matrix in place.
"""

import numpy as np


def initialize_pheromones(n, initial_value=1.0, min_pheromone=1e-6):
  """Uniform matrix so the first iteration explores without bias."""
  pheromones = np.full((n, n), max(initial_value, min_pheromone), dtype=float)
  # No pheromone for staying in the same node
  np.fill_diagonal(pheromones, 0.0)
  return pheromones


def evaporate(pheromones, rho, min_pheromone):
  """tau <- max(tau * (1 - rho), min_pheromone) on every off-diagonal cell."""
  np.maximum(pheromones * (1.0 - rho), min_pheromone, out=pheromones)
  np.fill_diagonal(pheromones, 0.0)


def deposit(pheromones, solutions, q, min_pheromone):
  """
  Every solution adds q / length to each edge of its tour, in both
  directions, including the closing edge. Solutions with a non-positive
  length deposit nothing.
  """
  for tour, length in solutions:
    if length <= 0:
      continue
    delta = q / length
    for i in range(len(tour)):
      from_node = tour[i]
      to_node = tour[(i + 1) % len(tour)]
      if from_node == to_node:
        continue
      pheromones[from_node, to_node] = max(
          pheromones[from_node, to_node] + delta, min_pheromone)
      pheromones[to_node, from_node] = max(
          pheromones[to_node, from_node] + delta, min_pheromone)  # Symmetric


def update_pheromones(pheromones, solutions, rho, q, min_pheromone):
  """Evaporation first, then deposit: evaporation never sees this iteration's deposits."""
  evaporate(pheromones, rho, min_pheromone)
  deposit(pheromones, solutions, q, min_pheromone)
