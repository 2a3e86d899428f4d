def tour_length(tour, distances):
  """
  Total length of a tour, including the closing edge back to the start.
  Empty tours have length 0.
  """
  length = 0.0
  for i in range(len(tour) - 1):
    length += distances[tour[i]][tour[i + 1]]

  # Complete the loop: back to start node
  if len(tour) > 0:
    length += distances[tour[-1]][tour[0]]
  return float(length)
