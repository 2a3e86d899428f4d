import numbers

import numpy as np

from campus_aco.errors import ConfigurationError

# Defaults used by the simulator wizard
DEFAULT_NUM_ANTS = 10
DEFAULT_NUM_ITERATIONS = 50
DEFAULT_ALPHA = 1.0
DEFAULT_BETA = 2.0
DEFAULT_RHO = 0.1
DEFAULT_Q = 100.0
DEFAULT_MIN_PHEROMONE = 1e-6
DEFAULT_INITIAL_PHEROMONE = 1.0


def _is_int(value):
  return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _is_real(value):
  return isinstance(value, numbers.Real) and not isinstance(value, bool)


class ACOParameters:
  def __init__(
      self,
      num_ants=DEFAULT_NUM_ANTS,
      num_iterations=DEFAULT_NUM_ITERATIONS,
      alpha=DEFAULT_ALPHA,      # Pheromone influence
      beta=DEFAULT_BETA,        # Distance influence
      rho=DEFAULT_RHO,
      q=DEFAULT_Q,
      min_pheromone=DEFAULT_MIN_PHEROMONE,
      initial_pheromone=DEFAULT_INITIAL_PHEROMONE,
      local_search=False,
  ):
    """
    num_ants: Number of ants released per iteration
    num_iterations: Number of iterations
    alpha: Controls importance of pheromone trail (collective experience)
    beta: Controls importance of distance (local information)
    rho: Pheromone evaporation rate, in [0, 1]
    q: Pheromone deposit constant, each solution deposits q / length
    min_pheromone: Floor no off-diagonal pheromone value may drop below
    initial_pheromone: Uniform pheromone level at the start of a run
    local_search: Whether to refine every ant's tour with 2-opt before deposit
    """
    self.num_ants = num_ants
    self.num_iterations = num_iterations
    self.alpha = alpha
    self.beta = beta
    self.rho = rho
    self.q = q
    self.min_pheromone = min_pheromone
    self.initial_pheromone = initial_pheromone
    self.local_search = local_search

  def validate(self):
    """Raises ConfigurationError if any parameter is outside its domain."""
    if not _is_int(self.num_ants) or self.num_ants < 1:
      raise ConfigurationError(
          f"num_ants must be an integer >= 1, got {self.num_ants!r}")
    if not _is_int(self.num_iterations) or self.num_iterations < 1:
      raise ConfigurationError(
          f"num_iterations must be an integer >= 1, got {self.num_iterations!r}")
    for name in ("alpha", "beta"):
      value = getattr(self, name)
      if not _is_real(value) or not value >= 0:
        raise ConfigurationError(f"{name} must be a real number >= 0, got {value!r}")
    if not _is_real(self.rho) or not 0 <= self.rho <= 1:
      raise ConfigurationError(f"rho must be in [0, 1], got {self.rho!r}")
    if not _is_real(self.q) or not self.q > 0:
      raise ConfigurationError(f"q must be > 0, got {self.q!r}")
    if not _is_real(self.min_pheromone) or not self.min_pheromone > 0:
      raise ConfigurationError(
          f"min_pheromone must be > 0, got {self.min_pheromone!r}")
    if not _is_real(self.initial_pheromone) or not self.initial_pheromone >= 0:
      raise ConfigurationError(
          f"initial_pheromone must be >= 0, got {self.initial_pheromone!r}")
    return self

  def as_dict(self):
    return {
        "num_ants": self.num_ants,
        "num_iterations": self.num_iterations,
        "alpha": self.alpha,
        "beta": self.beta,
        "rho": self.rho,
        "q": self.q,
        "min_pheromone": self.min_pheromone,
        "initial_pheromone": self.initial_pheromone,
        "local_search": self.local_search,
    }

  def __repr__(self):
    fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
    return f"ACOParameters({fields})"


def validate_distance_matrix(distances):
  """
  Converts distances to a float numpy array and checks that it is a
  non-empty square matrix. Symmetry is not checked.
  """
  try:
    matrix = np.array(distances, dtype=float)
  except (TypeError, ValueError) as exc:
    raise ConfigurationError(f"Distance matrix is not numeric: {exc}") from exc

  if matrix.ndim != 2 or matrix.size == 0:
    raise ConfigurationError("Distance matrix must be a non-empty 2D matrix")
  if matrix.shape[0] != matrix.shape[1]:
    raise ConfigurationError(
        f"Distance matrix must be square, got shape {matrix.shape}")
  return matrix
