"""Exceptions raised by the campus ACO solver."""


class ACOError(Exception):
  """Base class for solver errors."""


class ConfigurationError(ACOError, ValueError):
  """Invalid distance matrix or parameters. Raised before a run starts."""


class SolverStateError(ACOError, RuntimeError):
  """A control call that is not allowed in the solver's current state."""
