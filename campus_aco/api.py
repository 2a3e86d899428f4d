"""
Solver entry points for UI code: a handle-based interface over
ExecutionController plus the synchronous baseline heuristics.
"""

from campus_aco.controller import ExecutionController
from campus_aco.heuristics import nearest_neighbor, two_opt
from campus_aco.params import validate_distance_matrix


def build_solver(distance_matrix, params=None, **options):
  """
  Returns a solver handle. Raises ConfigurationError for an empty or
  non-square matrix or invalid parameters. options are passed on to
  ExecutionController (rng, step_mode, speed, visual_delay, log_limit,
  echo, track_history).
  """
  return ExecutionController(distance_matrix, params, **options)


async def run(handle, on_iteration_complete=None, on_agent_step=None):
  return await handle.run(on_iteration_complete, on_agent_step)


def pause(handle):
  handle.pause()


def resume(handle):
  handle.resume()


def cancel(handle):
  handle.cancel()


def set_step_mode(handle, enabled):
  handle.set_step_mode(enabled)


def advance_step(handle):
  handle.advance_step()


def set_speed(handle, speed):
  handle.set_speed(speed)


def run_nearest_neighbor(distance_matrix, start_node=0):
  return nearest_neighbor(validate_distance_matrix(distance_matrix), start_node)


def run_2opt(tour, distance_matrix):
  return two_opt(tour, validate_distance_matrix(distance_matrix))
