"""
core_functions.py
=================

Core base classes and fundamental structures for the signal function framework.

A *signal* is a value that varies over simulated time.  It is never stored
as a whole: it only exists as the sequence of values a signal function
produces, one per time step.  A *signal function* is a stateful step
function ``(dt, value) -> output`` that the driver advances with small
fixed time steps (Euler method).

Classes:
    TimeStep: One driver step, elapsed simulated time plus an input value
    SignalFunction: Base class for all signal functions

Author: FRP Simulation Framework
Version: 1.0.0
"""

import numpy as np
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any, Callable, List, Sequence


# =========================
# Defaults
# =========================

DEFAULT_DT: float = 0.1          # step size of the default input source
DEFAULT_DTYPE = np.float64       # dtype of vector accumulators


# =========================
# Time Step
# =========================

@dataclass
class TimeStep:
    """
    One step fed to a signal function by the driver.

    Attributes:
        dt (float): Simulated time elapsed since the previous step (seconds).
                    Must be non-negative.
        value (Any): Input value for this step. Scalar, vector or any
                     domain-specific payload. None when the source has no value.

    Example:
        >>> step = TimeStep(0.1, [1.0, 2.0])
        >>> step.dt
        0.1
    """
    dt: float
    value: Any = None


def as_time_step(step: Any) -> TimeStep:
    """
    Normalise a step given as TimeStep, mapping or ``(dt, value)`` pair.

    Args:
        step: A TimeStep, a mapping with a ``dt`` key and an optional
              ``value`` key, or a two-item sequence ``(dt, value)``.

    Returns:
        TimeStep: The normalised step.

    Raises:
        TypeError: If the step has no recognisable shape or dt is not a number.
        ValueError: If dt is negative or NaN.

    Example:
        >>> as_time_step({'dt': 0.1})
        TimeStep(dt=0.1, value=None)
        >>> as_time_step((0.5, 3.0))
        TimeStep(dt=0.5, value=3.0)
    """
    if isinstance(step, TimeStep):
        result = step
    elif isinstance(step, Mapping):
        if 'dt' not in step:
            raise TypeError(f"Time step mapping has no 'dt' key: {step!r}")
        result = TimeStep(step['dt'], step.get('value'))
    elif isinstance(step, (tuple, list)) and len(step) == 2:
        result = TimeStep(step[0], step[1])
    else:
        raise TypeError(
            f"Time step must be a TimeStep, a mapping or a (dt, value) pair, "
            f"got {type(step).__name__}"
        )

    validate_number(result.dt, "time step dt")
    if not result.dt >= 0:
        raise ValueError(f"Time step dt must be non-negative, got {result.dt}")
    return result


# =========================
# Base Signal Function Class
# =========================

class SignalFunction:
    """
    Base class for all signal functions.

    A signal function owns its internal state exclusively and mutates it
    only while it is being stepped.  Calling the instance runs one step:

        output = sf(dt, value)

    Subclasses implement :meth:`step`; :meth:`__call__` stores the result in
    ``output`` so that the latest value can be inspected after a run.

    Signal functions can be chained with the ``>>`` operator, which builds
    the serial composition of both sides.

    Attributes:
        name (str): Identifier used in error messages and topology printouts
        children (List[Callable]): Constituent signal functions, in order
        output (Any): Output of the latest step (None until stepped)
        is_stateful (bool): True if the function keeps state between steps

    Example:
        >>> from frpsim import constant, integral
        >>> velocity = constant(-9.8) >> integral(0.0)
        >>> velocity(0.1, None)
        -0.98...
    """

    def __init__(self, name: str = "") -> None:
        """
        Initialize a SignalFunction.

        Args:
            name: Identifier for this signal function. Defaults to the
                  lowercase class name.
        """
        self.name: str = name or type(self).__name__.lower()
        self.children: List[Callable] = []
        self.output: Any = None
        self.is_stateful: bool = False

    def __call__(self, dt: float, value: Any = None) -> Any:
        self.output = self.step(dt, value)
        return self.output

    def __rshift__(self, other: Callable) -> "SignalFunction":
        """
        Compose this signal function with another using the >> operator.

        Returns:
            SignalFunction: ``compose(self, other)``

        Example:
            >>> clock = constant(1) >> integral()
        """
        from .processing_functions import Compose
        return Compose([self, other])

    def step(self, dt: float, value: Any) -> Any:
        """
        Advance by one time step and return the output value.

        Args:
            dt: Simulated time elapsed since the previous step (seconds)
            value: Input value for this step

        Returns:
            The output value for this step.

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        raise NotImplementedError(f"step() must be implemented by {self.__class__.__name__}")

    def reset(self) -> None:
        """
        Restore the initial state of this signal function and its children.

        Plain callables among the children have no state to restore and are
        skipped.  Subclasses with their own state extend this method.
        """
        self.output = None
        for child in self.children:
            if isinstance(child, SignalFunction):
                child.reset()

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"{self.__class__.__name__}('{self.name}')"


# =========================
# Utility Functions
# =========================

def is_vector(value: Any) -> bool:
    """
    Return True if value is a fixed-length numeric sequence.

    Lists, tuples and numpy arrays of dimension one or more count as vectors;
    numbers and 0-d arrays are scalars.
    """
    if isinstance(value, np.ndarray):
        return value.ndim > 0
    return isinstance(value, (list, tuple))


def to_vector(value: Sequence[float], name: str) -> np.ndarray:
    """
    Convert a numeric sequence into a 1-D float array.

    Raises:
        TypeError: If any element is not numeric, or the sequence is not 1-D
    """
    try:
        vec = np.asarray(value, dtype=DEFAULT_DTYPE)
    except (TypeError, ValueError) as e:
        raise TypeError(f"{name}: Expected a numeric vector, got {value!r}") from e
    if vec.ndim != 1:
        raise TypeError(f"{name}: Expected a 1-D vector, got shape {vec.shape}")
    return vec


def validate_number(value: Any, name: str) -> None:
    """
    Validate that value is a real scalar number.

    Raises:
        TypeError: If value is not a number (booleans are rejected too)
    """
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, float, np.number)):
        raise TypeError(f"{name}: Expected a numeric value, got {value!r}")


def validate_signal_functions(sfs: Sequence[Any], name: str, min_count: int = 1) -> None:
    """
    Validate the constituent signal functions handed to a combinator.

    Args:
        sfs: Candidate signal functions
        name: Name of the combinator performing validation (for error messages)
        min_count: Minimum number of required signal functions (default: 1)

    Raises:
        ValueError: If fewer than min_count signal functions are given
        TypeError: If any of them is not callable

    Example:
        >>> validate_signal_functions([], "compose")  # Raises ValueError
    """
    if len(sfs) < min_count:
        raise ValueError(
            f"{name}: Expected at least {min_count} signal function(s), "
            f"but got {len(sfs)}"
        )
    for i, sf in enumerate(sfs):
        if not callable(sf):
            raise TypeError(
                f"{name}: Argument {i} is not a signal function: {sf!r}"
            )


# =========================
# Module Metadata
# =========================

__all__ = [
    'DEFAULT_DT',
    'DEFAULT_DTYPE',
    'TimeStep',
    'SignalFunction',
    'as_time_step',
    'is_vector',
    'to_vector',
    'validate_number',
    'validate_signal_functions',
]

__version__ = '1.0.0'
__author__ = 'FRP Simulation Framework'
