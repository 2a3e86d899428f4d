"""Reference tours: greedy Nearest-Neighbor and 2-opt local search."""

from campus_aco.models import Solution
from campus_aco.tour import tour_length


def nearest_neighbor(distances, start_node=0):
  """
  Greedy construction: always move to the closest unvisited node. Ties go to
  the lowest index because the incumbent is only replaced on strict
  improvement.
  """
  n = len(distances)
  tour = [start_node]
  visited = {start_node}
  current = start_node

  while len(visited) < n:
    nearest_node = None
    nearest_dist = float("inf")
    for j in range(n):
      if j not in visited and distances[current][j] < nearest_dist:
        nearest_dist = distances[current][j]
        nearest_node = j

    if nearest_node is None:
      break

    tour.append(nearest_node)
    visited.add(nearest_node)
    current = nearest_node

  return Solution(tuple(tour), tour_length(tour, distances))


def two_opt(tour, distances):
  """
  Applies 2-opt local search to improve a tour.

  Edges (a, b) and (c, d) are replaced by (a, c) and (b, d), reversing the
  segment in between, whenever that strictly shortens the tour. The first
  improving move is applied and the sweep starts over; the search stops at a
  local optimum.
  """
  best_tour = [int(node) for node in tour]
  n = len(best_tour)
  improved = True

  while improved:
    improved = False
    for i in range(n - 1):
      for j in range(i + 2, n):
        a = best_tour[i]
        b = best_tour[i + 1]
        c = best_tour[j]
        d = best_tour[(j + 1) % n]

        if distances[a][c] + distances[b][d] < distances[a][b] + distances[c][d]:
          best_tour[i + 1:j + 1] = best_tour[i + 1:j + 1][::-1]
          improved = True
          break  # Accept the first improvement

      if improved:
        break

  return Solution(tuple(best_tour), tour_length(best_tour, distances))
