# radar/errors.py


class FmcwError(Exception):
    """Base class for every error raised by the FMCW core."""


class InvalidConfig(FmcwError, ValueError):
    """Configuration or target list cannot be simulated."""


class InvalidInput(FmcwError, ValueError):
    """A processing stage received data it cannot operate on."""


class NumericDegeneracy(FmcwError, ArithmeticError):
    """A computation would divide by zero or overflow (e.g. |v| >= c)."""


class StateError(FmcwError, ValueError):
    """Persisted state has a shape or schema version we cannot read."""
