"""
ACO iteration engine.

The engine produces its run as a stream of events so that a driver can
suspend it between any two events: `AntColonyOptimizer.run` drives the
stream to completion in one go, `ExecutionController` drives it with
pause, single-step and cancellation support.
"""

import random
import time
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from tqdm import tqdm

from campus_aco.heuristics import two_opt
from campus_aco.models import Ant, ProbabilityInfo, Solution
from campus_aco.params import ACOParameters, validate_distance_matrix
from campus_aco.pheromone import initialize_pheromones, update_pheromones
from campus_aco.tour import tour_length
from campus_aco.transition import select_next_node

# Every ant starts its tour here
START_NODE = 0


class SolverState(Enum):
  IDLE = "idle"
  RUNNING = "running"
  PAUSED = "paused"
  COMPLETED = "completed"
  CANCELLED = "cancelled"


class IterationStarted(NamedTuple):
  iteration: int


class AgentStep(NamedTuple):
  """An ant is about to move; only emitted in step mode."""
  iteration: int
  ant_index: int
  ant: Ant
  choice: int
  probabilities: List[ProbabilityInfo]
  fallback: bool


class AntCompleted(NamedTuple):
  iteration: int
  ant_index: int
  solution: Solution
  fallbacks: int


class IterationCompleted(NamedTuple):
  """iteration counts completed iterations, starting at 1."""
  iteration: int
  best_length: float
  solutions: Tuple[Solution, ...]
  global_best: Solution
  improved: bool


class AntColonyOptimizer:
  def __init__(self, distances, params=None, rng=None, track_history=False):
    """
    distances: Square distance matrix (anything numpy can turn into one)
    params: ACOParameters, defaults are used when omitted
    rng: Random source with random() and choice(), e.g. random.Random(seed)
    track_history: Whether to keep a copy of the pheromone matrix per iteration
    """
    self.distances = validate_distance_matrix(distances)
    self.params = (params if params is not None else ACOParameters()).validate()
    self.rng = rng if rng is not None else random.Random()
    self.n_nodes = self.distances.shape[0]
    self.track_history = track_history
    self.state = SolverState.IDLE
    self.reset()

  def reset(self):
    """Fresh pheromones and an empty run record."""
    self.pheromones = initialize_pheromones(
        self.n_nodes, self.params.initial_pheromone, self.params.min_pheromone)
    self.best_solution: Optional[Solution] = None
    self.best_per_iteration: List[float] = []
    self.iteration_avg_lengths: List[float] = []
    self.iteration_times: List[float] = []
    self.pheromone_history = []
    self.current_iteration = 0
    self.fallback_choices = 0

  def pheromone_snapshot(self):
    return self.pheromones.copy()

  def iterate(self, step_mode=False):
    """
    Runs the algorithm as a generator of IterationStarted, AgentStep,
    AntCompleted and IterationCompleted events.

    Pheromones are only touched between the last AntCompleted and the
    IterationCompleted of an iteration, so a consumer never sees them
    half-updated.
    """
    self.reset()
    self.state = SolverState.RUNNING
    params = self.params

    for iteration in range(params.num_iterations):
      yield IterationStarted(iteration)
      iteration_start_time = time.perf_counter()

      solutions = []
      for ant_index in range(params.num_ants):
        ant = Ant(START_NODE)
        fallbacks = 0

        while len(ant.visited) < self.n_nodes:
          transition = select_next_node(
              ant, self.pheromones, self.distances,
              params.alpha, params.beta, self.n_nodes, rng=self.rng)
          if transition.choice is None:
            break
          if transition.fallback:
            fallbacks += 1

          if step_mode:
            yield AgentStep(iteration, ant_index, ant.copy(), transition.choice,
                            transition.probabilities, transition.fallback)
          ant.visit(transition.choice, self.distances)

        solution = Solution(tuple(ant.tour), tour_length(ant.tour, self.distances))
        if params.local_search:
          solution = two_opt(solution.tour, self.distances)

        self.fallback_choices += fallbacks
        solutions.append(solution)
        yield AntCompleted(iteration, ant_index, solution, fallbacks)

      yield self._finish_iteration(iteration, solutions, iteration_start_time)

    self.state = SolverState.COMPLETED

  def _finish_iteration(self, iteration, solutions, iteration_start_time):
    # min() keeps the earliest of equally short tours
    iteration_best = min(solutions, key=lambda solution: solution.length)
    improved = (self.best_solution is None
                or iteration_best.length < self.best_solution.length)
    if improved:
      self.best_solution = iteration_best
    self.best_per_iteration.append(iteration_best.length)

    lengths = [solution.length for solution in solutions if solution.length > 0]
    self.iteration_avg_lengths.append(sum(lengths) / len(lengths) if lengths else 0.0)

    update_pheromones(self.pheromones, solutions, self.params.rho,
                      self.params.q, self.params.min_pheromone)
    if self.track_history:
      self.pheromone_history.append(self.pheromones.copy())

    self.iteration_times.append(time.perf_counter() - iteration_start_time)
    self.current_iteration = iteration + 1
    return IterationCompleted(iteration + 1, iteration_best.length,
                              tuple(solutions), self.best_solution, improved)

  def run(self, verbose=True):
    """Runs every iteration without suspension and returns the best solution."""
    params = self.params
    if verbose:
      print(
          f"\nRunning ACO: {params.num_ants} ants, {params.num_iterations} iterations, "
          f"rho={params.rho}, Q={params.q}, alpha={params.alpha}, beta={params.beta}"
      )

    total_start_time = time.time()
    with tqdm(total=params.num_iterations, desc="ACO Progress",
              disable=not verbose) as progress:
      for event in self.iterate():
        if isinstance(event, IterationCompleted):
          progress.update(1)

    if verbose:
      print(f"\nFinished ACO. Best tour length: {self.best_solution.length:.2f}")
      print(f"Best tour: {list(self.best_solution.tour)}")
      print(f"Total optimization time: {time.time() - total_start_time:.2f} seconds")
      if self.fallback_choices:
        print(f"Warning: {self.fallback_choices} uniform fallback choices were made")
    return self.best_solution
