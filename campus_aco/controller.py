"""
Execution controller: drives the ACO engine inside an asyncio event loop
with pause/resume, single-step mode, speed scaling and cancellation, and
keeps the log and metrics a UI displays.

Control methods (pause, resume, cancel, advance_step) must be called from
the event loop running `ExecutionController.run`, typically from a callback
or another task.
"""

import asyncio
import inspect
import json
import math
from collections import deque
from datetime import datetime
from typing import NamedTuple

from campus_aco.engine import (AgentStep, AntColonyOptimizer, AntCompleted,
                               IterationCompleted, IterationStarted,
                               SolverState)
from campus_aco.errors import ConfigurationError, SolverStateError

# Seconds between two finished ants at speed 1
DEFAULT_VISUAL_DELAY = 0.05
DEFAULT_LOG_LIMIT = 100

LOG_LEVELS = ("info", "success", "warning", "error")


class LogEntry(NamedTuple):
  timestamp: datetime
  message: str
  level: str = "info"


def _finite_or_none(value):
  return value if math.isfinite(value) else None


class ExecutionController:
  def __init__(
      self,
      distances,
      params=None,
      rng=None,
      step_mode=False,
      speed=1.0,
      visual_delay=DEFAULT_VISUAL_DELAY,
      log_limit=DEFAULT_LOG_LIMIT,
      echo=False,
      track_history=False,
  ):
    """
    distances: Square distance matrix
    params: ACOParameters for the run
    rng: Injectable random source, see AntColonyOptimizer
    step_mode: Whether every ant decision waits for advance_step()
    speed: Multiplier applied to the visualization delay only
    visual_delay: Seconds to pause after every finished ant at speed 1
    log_limit: Number of log entries kept
    echo: Whether log entries are also printed
    track_history: Whether the engine keeps a pheromone copy per iteration
    """
    self.engine = AntColonyOptimizer(distances, params, rng=rng,
                                     track_history=track_history)
    if not visual_delay >= 0:
      raise ConfigurationError(f"visual_delay must be >= 0, got {visual_delay!r}")
    if log_limit < 1:
      raise ConfigurationError(f"log_limit must be >= 1, got {log_limit!r}")
    self._check_speed(speed)

    self.step_mode = bool(step_mode)
    self.speed = speed
    self.visual_delay = visual_delay
    self.echo = echo
    self.logs = deque(maxlen=log_limit)

    self.current_step = None
    self.current_probabilities = []
    self._matrix_stats = {"api_calls": 0, "total_retries": 0, "fallback_count": 0}

    self._running = False
    self._paused = False
    self._cancelled = False
    self._resume_event = None
    self._step_gate = None

  # --- State ---
  @property
  def state(self):
    return self.engine.state

  @property
  def is_running(self):
    return self._running

  @property
  def is_paused(self):
    return self._paused

  @property
  def best_solution(self):
    return self.engine.best_solution

  @property
  def best_per_iteration(self):
    return list(self.engine.best_per_iteration)

  def pheromone_snapshot(self):
    return self.engine.pheromone_snapshot()

  # --- Controls ---
  def pause(self):
    """
    Takes effect at the next iteration boundary. Called before run(), it
    holds the run before the first iteration.
    """
    self._paused = True
    if self._resume_event is not None:
      self._resume_event.clear()
    self.add_log("Pause requested")

  def resume(self):
    self._paused = False
    if self._resume_event is not None:
      self._resume_event.set()

  def cancel(self):
    """
    Stops the run at the next iteration boundary or step gate. The run
    returns the best solution found so far.
    """
    if not self._running:
      return
    self._cancelled = True
    if self._resume_event is not None:
      self._resume_event.set()
    self._release_step_gate()

  def advance_step(self):
    """Lets a step-mode run make its next move. No-op if nothing is waiting."""
    self._release_step_gate()

  def set_step_mode(self, enabled):
    if self._running:
      raise SolverStateError("Step mode cannot be changed while a run is in progress")
    self.step_mode = bool(enabled)

  def set_speed(self, speed):
    self._check_speed(speed)
    self.speed = speed

  def _release_step_gate(self):
    gate = self._step_gate
    if gate is not None and not gate.done():
      gate.set_result(None)

  @staticmethod
  def _check_speed(speed):
    if not speed > 0:
      raise ConfigurationError(f"speed must be > 0, got {speed!r}")

  # --- Log and metrics ---
  def add_log(self, message, level="info"):
    if level not in LOG_LEVELS:
      raise ValueError(f"Unknown log level: {level}")
    entry = LogEntry(datetime.now(), message, level)
    self.logs.append(entry)
    if self.echo:
      print(f"[{level}] {message}")
    return entry

  def record_matrix_stats(self, api_calls=None, total_retries=None, fallback_count=None):
    """Stores counters reported by whoever built the distance matrix."""
    for key, value in (("api_calls", api_calls),
                       ("total_retries", total_retries),
                       ("fallback_count", fallback_count)):
      if value is not None:
        self._matrix_stats[key] = value

  def metrics(self):
    engine = self.engine
    best = engine.best_solution
    return {
        "current_iteration": engine.current_iteration,
        "best_length": best.length if best is not None else float("inf"),
        "progress": 100.0 * engine.current_iteration / engine.params.num_iterations,
        "fallback_choices": engine.fallback_choices,
        **self._matrix_stats,
    }

  # --- Run ---
  async def run(self, on_iteration_complete=None, on_agent_step=None):
    """
    Runs the engine to completion (or cancellation) and returns the best
    Solution found, or None if no iteration finished.

    on_iteration_complete(iteration, iteration_best_length, solutions) is
    called after every iteration. on_agent_step(ant, probabilities) is called
    before every move in step mode; the move waits for advance_step().
    Either callback may be a coroutine function.
    """
    if self._running:
      raise SolverStateError("A run is already in progress")
    self._running = True
    self._cancelled = False
    # A pause requested before the run holds it at the first iteration
    self._resume_event = asyncio.Event()
    if not self._paused:
      self._resume_event.set()

    engine = self.engine
    params = engine.params
    self.add_log(f"Starting ACO: {params.num_ants} ants, {params.num_iterations} iterations")
    self.add_log(f"Parameters: alpha={params.alpha}, beta={params.beta}, "
                 f"rho={params.rho}, Q={params.q}")

    events = engine.iterate(step_mode=self.step_mode)
    try:
      for event in events:
        if isinstance(event, IterationStarted):
          await self._wait_while_paused(event.iteration)
          if self._cancelled:
            break
        elif isinstance(event, AgentStep):
          await self._wait_for_step(event, on_agent_step)
          if self._cancelled:
            break
        elif isinstance(event, AntCompleted):
          if event.fallbacks:
            self.add_log(f"Ant {event.ant_index + 1} made {event.fallbacks} uniform "
                         f"fallback choice(s) in iteration {event.iteration + 1}",
                         "warning")
          await asyncio.sleep(self.visual_delay / self.speed)
        elif isinstance(event, IterationCompleted):
          if event.improved:
            self.add_log(f"New best solution in iteration {event.iteration}: "
                         f"{event.global_best.length:.0f}m", "success")
          await self._notify(on_iteration_complete, event.iteration,
                             event.best_length, list(event.solutions))
    except BaseException:
      engine.state = SolverState.CANCELLED
      self.add_log("Run aborted", "error")
      raise
    finally:
      events.close()
      self._running = False
      self._paused = False
      self._step_gate = None
      self.current_step = None

    best = engine.best_solution
    if self._cancelled:
      engine.state = SolverState.CANCELLED
      self.add_log(f"Run cancelled after {engine.current_iteration} iteration(s)", "warning")
    else:
      self.add_log(f"ACO finished. Best route: {best.length:.0f}m", "success")
    return best

  async def _wait_while_paused(self, iteration):
    if self._resume_event.is_set() or self._cancelled:
      return
    self.engine.state = SolverState.PAUSED
    self.add_log(f"Paused before iteration {iteration + 1}")
    await self._resume_event.wait()
    if not self._cancelled:
      self.engine.state = SolverState.RUNNING
      self.add_log(f"Resumed at iteration {iteration + 1}")

  async def _wait_for_step(self, event, on_agent_step):
    self.current_step = (event.ant_index, event.choice)
    self.current_probabilities = event.probabilities
    gate = asyncio.get_running_loop().create_future()
    self._step_gate = gate
    await self._notify(on_agent_step, event.ant, event.probabilities)
    await gate
    self._step_gate = None

  @staticmethod
  async def _notify(callback, *args):
    if callback is None:
      return
    result = callback(*args)
    if inspect.isawaitable(result):
      await result

  # --- Export ---
  def export_results(self, path, places=None):
    """
    Saves the run as JSON: matrices, best solution, convergence series,
    parameters, metrics and optional node markers.
    """
    engine = self.engine
    best = engine.best_solution
    metrics = self.metrics()
    metrics["best_length"] = _finite_or_none(metrics["best_length"])

    results = {
        "distance_matrix": engine.distances.tolist(),
        "pheromone": engine.pheromones.tolist(),
        "best_solution": ({"tour": list(best.tour), "length": best.length}
                          if best is not None else None),
        "best_per_iteration": list(engine.best_per_iteration),
        "parameters": engine.params.as_dict(),
        "markers": [
            {"id": place.id, "name": place.name,
             "position": {"lat": place.lat, "lng": place.lng}}
            for place in (places or [])
        ],
        "metrics": metrics,
    }
    with open(path, "w") as f:
      json.dump(results, f, indent=2)

    self.add_log("Results exported to JSON", "success")
    return path
