from typing import NamedTuple, Tuple


class Solution(NamedTuple):
  """A tour (cyclic visiting order) and its total length."""
  tour: Tuple[int, ...]
  length: float


class ProbabilityInfo(NamedTuple):
  """One candidate of a transition decision, kept for didactic display."""
  node_index: int
  probability: float
  pheromone: float
  distance: float
  heuristic: float


class Ant:
  """
  A per-iteration agent that builds one tour.

  tour: Visited node indices in visiting order
  visited: Same nodes as a set, for membership checks
  length: Running length of the open path (closing edge not included)
  current_node: Node the ant is standing on
  """

  def __init__(self, start_node=0):
    self.tour = [start_node]
    self.visited = {start_node}
    self.length = 0.0
    self.current_node = start_node

  def visit(self, node, distances):
    """Moves the ant to node and extends its path."""
    self.length += float(distances[self.current_node][node])
    self.tour.append(node)
    self.visited.add(node)
    self.current_node = node

  def copy(self):
    clone = Ant.__new__(Ant)
    clone.tour = list(self.tour)
    clone.visited = set(self.visited)
    clone.length = self.length
    clone.current_node = self.current_node
    return clone

  def __repr__(self):
    return (f"Ant(current_node={self.current_node}, tour={self.tour}, "
            f"length={self.length:.2f})")
