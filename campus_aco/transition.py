import math
import random
from typing import List, NamedTuple, Optional

import numpy as np

from campus_aco.models import ProbabilityInfo


class Transition(NamedTuple):
  """
  Outcome of one ant decision.

  choice: Chosen node, or None when no unvisited node remains
  probabilities: Normalised candidate probabilities in enumeration order
  fallback: True when the choice was uniform because no candidate had a
      usable (positive) attractiveness
  """
  choice: Optional[int]
  probabilities: List[ProbabilityInfo]
  fallback: bool = False


def _weight(tau, eta, alpha, beta):
  """tau^alpha * eta^beta, saturating to inf on overflow. 0 * inf counts as 0."""
  with np.errstate(over="ignore", invalid="ignore"):
    value = float(np.power(tau, alpha) * np.power(eta, beta))
  return 0.0 if math.isnan(value) else value


def _rescale(values):
  """
  Brings weights whose sum overflowed back into range. Infinite weights share
  the wheel evenly; finite ones are scaled by the largest.
  """
  largest = max(values)
  if math.isinf(largest):
    return [1.0 if math.isinf(value) else 0.0 for value in values]
  return [value / largest for value in values]


def select_next_node(ant, pheromones, distances, alpha, beta, n, rng=random):
  """
  Probabilistically selects the next node for an ant.

  The attractiveness of an unvisited node j seen from the current node i is
  P(i,j) ~ tau[i][j]^alpha * (1 / d[i][j])^beta. Edges with a non-positive
  distance are never candidates. The ant itself is not modified; the caller
  applies the choice.
  """
  current_node = ant.current_node
  candidates = []
  values = []
  total = 0.0

  for j in range(n):
    if j in ant.visited:
      continue
    distance = float(distances[current_node][j])
    if distance <= 0:
      continue
    tau = float(pheromones[current_node][j])
    eta = 1.0 / distance
    value = _weight(tau, eta, alpha, beta)
    candidates.append((j, tau, distance, eta))
    values.append(value)
    total += value

  if math.isinf(total):
    values = _rescale(values)
    total = sum(values)

  if not candidates or not total > 0:
    # Fallback: choose uniformly among whatever is left
    unvisited = [j for j in range(n) if j not in ant.visited]
    if not unvisited:
      return Transition(None, [])
    uniform = 1.0 / len(unvisited)
    probabilities = []
    for j in unvisited:
      distance = float(distances[current_node][j])
      probabilities.append(ProbabilityInfo(
          node_index=j,
          probability=uniform,
          pheromone=float(pheromones[current_node][j]),
          distance=distance,
          heuristic=1.0 / distance if distance > 0 else 0.0,
      ))
    return Transition(rng.choice(unvisited), probabilities, fallback=True)

  probabilities = [
      ProbabilityInfo(j, value / total, tau, distance, eta)
      for (j, tau, distance, eta), value in zip(candidates, values)
  ]

  # Roulette wheel selection
  draw = rng.random()
  cumulative = 0.0
  for info in probabilities:
    cumulative += info.probability
    if info.probability > 0 and draw <= cumulative:
      return Transition(info.node_index, probabilities)

  # Rounding left the draw unmatched
  last = [info for info in probabilities if info.probability > 0][-1]
  return Transition(last.node_index, probabilities)
