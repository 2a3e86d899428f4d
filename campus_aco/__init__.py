"""Ant Colony Optimization for walking tours across a university campus."""

from campus_aco.api import (advance_step, build_solver, cancel, pause, resume,
                            run, run_2opt, run_nearest_neighbor, set_speed,
                            set_step_mode)
from campus_aco.controller import ExecutionController, LogEntry
from campus_aco.engine import AntColonyOptimizer, SolverState
from campus_aco.errors import ACOError, ConfigurationError, SolverStateError
from campus_aco.heuristics import nearest_neighbor, two_opt
from campus_aco.models import Ant, ProbabilityInfo, Solution
from campus_aco.params import ACOParameters
from campus_aco.pheromone import (deposit, evaporate, initialize_pheromones,
                                  update_pheromones)
from campus_aco.tour import tour_length
from campus_aco.transition import Transition, select_next_node

__version__ = "0.1.0"
