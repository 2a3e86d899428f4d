import asyncio
import random

import pytest

import campus_aco
from campus_aco import api
from campus_aco.errors import ConfigurationError
from campus_aco.params import ACOParameters


@pytest.mark.parametrize("matrix", [[], [[0, 1], [1, 0], [2, 2]]])
def test_build_solver_rejects_bad_matrices(matrix):
  with pytest.raises(ConfigurationError):
    api.build_solver(matrix)


def test_build_solver_rejects_bad_parameters(four_node_matrix):
  with pytest.raises(ConfigurationError):
    api.build_solver(four_node_matrix, ACOParameters(num_ants=0))


def test_run_through_the_handle(four_node_matrix):
  handle = api.build_solver(four_node_matrix.tolist(),
                            ACOParameters(num_ants=5, num_iterations=10),
                            rng=random.Random(1), visual_delay=0.0)
  iterations = []
  best = asyncio.run(api.run(
      handle, on_iteration_complete=lambda i, length, sols: iterations.append(i)))
  assert best.length == 80.0
  assert iterations == list(range(1, 11))


def test_step_mode_through_the_handle(four_node_matrix):
  handle = api.build_solver(four_node_matrix, ACOParameters(num_ants=1, num_iterations=1),
                            rng=random.Random(1), visual_delay=0.0)
  api.set_step_mode(handle, True)
  api.set_speed(handle, 2.0)
  moves = []

  def on_step(ant, probabilities):
    moves.append(ant.current_node)
    asyncio.get_running_loop().call_soon(api.advance_step, handle)

  best = asyncio.run(api.run(handle, on_agent_step=on_step))
  assert moves[0] == 0
  assert len(moves) == 3
  assert list(best.tour[:3]) == moves


def test_pause_resume_and_cancel_through_the_handle(four_node_matrix):
  handle = api.build_solver(four_node_matrix, ACOParameters(num_ants=2, num_iterations=5),
                            visual_delay=0.0)

  def on_iteration(iteration, best_length, solutions):
    if iteration == 1:
      api.pause(handle)
      asyncio.get_running_loop().call_later(0.01, api.resume, handle)
    if iteration == 3:
      api.cancel(handle)

  best = asyncio.run(api.run(handle, on_iteration_complete=on_iteration))
  assert best is not None
  assert len(handle.best_per_iteration) == 3
  assert handle.state is campus_aco.SolverState.CANCELLED


def test_baselines_accept_plain_lists(four_node_matrix):
  matrix = four_node_matrix.tolist()
  nn = api.run_nearest_neighbor(matrix, 0)
  assert nn == campus_aco.Solution((0, 1, 3, 2), 80.0)
  assert api.run_2opt(list(nn.tour), matrix) == nn


def test_baselines_validate_the_matrix():
  with pytest.raises(ConfigurationError):
    api.run_nearest_neighbor([[0, 1, 2]], 0)
  with pytest.raises(ConfigurationError):
    api.run_2opt([0, 1], [])


def test_package_exports():
  for name in ("build_solver", "run", "pause", "resume", "cancel", "set_step_mode",
               "advance_step", "run_nearest_neighbor", "run_2opt", "tour_length",
               "initialize_pheromones", "evaporate", "deposit", "update_pheromones",
               "select_next_node", "ACOParameters", "ConfigurationError"):
    assert hasattr(campus_aco, name)
