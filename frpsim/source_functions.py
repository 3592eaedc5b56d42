"""
source_functions.py
===================

Signal sources: signal functions whose output does not depend on their input.

Classes:
    Constant: Outputs the same value at every step

Functions:
    constant: Build a Constant
    time: Signal function producing the elapsed simulated time

Author: FRP Simulation Framework
Version: 1.0.0
"""

from typing import Any, Optional

from .core_functions import SignalFunction
from .processing_functions import Compose
from .dynamic_functions import Integral


# =========================
# Constant Source
# =========================

class Constant(SignalFunction):
    """
    Outputs a constant value regardless of time step and input.

    Useful for constant rates (gravity, clock ticks) feeding an integral,
    or for setpoints.

    Attributes:
        value (Any): The value returned at every step

    Example:
        >>> gravity = Constant(-9.8)
        >>> gravity(0.1, "ignored")
        -9.8
    """

    def __init__(self, value: Any, name: str = "") -> None:
        super().__init__(name)
        self.value: Any = value

    def step(self, dt: float, value: Any) -> Any:
        return self.value


def constant(c: Any) -> Constant:
    """Signal function that ignores dt and input and always returns ``c``."""
    return Constant(c)


def time(name: Optional[str] = None) -> Compose:
    """
    Signal function whose output is the simulated time elapsed since its creation.

    Built as ``compose(constant(1), integral())``: integrating a unit rate
    accumulates the step sizes.  The first step already counts, so after
    N steps of size dt the output is N*dt.

    Example:
        >>> clock = time()
        >>> clock(0.1, None), clock(0.1, None)
        (0.1, 0.2)
    """
    return Compose([Constant(1), Integral()], name=name or "time")


# =========================
# Module Metadata
# =========================

__all__ = [
    'Constant',
    'constant',
    'time',
]

__version__ = '1.0.0'
