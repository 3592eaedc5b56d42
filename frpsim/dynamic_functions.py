"""
dynamic_functions.py
====================

Stateful signal functions: integration, feedback and switching.

This module provides the signal functions that keep internal state between
steps.  Each instance owns its state exclusively and only touches it while
it is being stepped, so a graph is safe to drive from a single loop without
any locking.

Classes:
    Integral: Euler (running sum) integral of the input, x += dt * u
    Feedback: Feeds a signal function its own previous output
    DSwitch: Delayed one-way switch to a replacement signal function

Author: FRP Simulation Framework
Version: 1.0.0
"""

import numpy as np
from typing import Any, Callable, Optional

from .core_functions import (SignalFunction, is_vector, to_vector,
                             validate_number, validate_signal_functions)


# =========================
# Integral
# =========================

class Integral(SignalFunction):
    """
    Numerical integral of the input signal with integration constant ``seed``.

    Each step adds the current input, scaled by dt, to the accumulator and
    returns the updated accumulator (forward Euler, running sum):

        x(t + dt) = x(t) + dt * u(t)

    Works with scalar and vector inputs.  A vector input is accumulated
    elementwise; the accumulator is resized to the input length, slots it
    did not have yet start from 0 and slots beyond the input length are
    dropped.  A scalar accumulator facing a vector input counts as having
    no slots at all.

    Attributes:
        seed (Any): Integration constant restored by reset()
        state (Any): Current accumulator, float or 1-D numpy array

    Example:
        >>> # Integrate a constant to get a ramp
        >>> ramp = Integral(0.0)
        >>> ramp(0.1, 1.0), ramp(0.1, 1.0)
        (0.1, 0.2)
        >>>
        >>> # Vector integration, the accumulator grows to the input length
        >>> xy = Integral()
        >>> xy(0.5, [2.0, 4.0])
        array([1., 2.])
    """

    def __init__(self, seed: Any = 0, name: str = "") -> None:
        """
        Initialize an Integral.

        Args:
            seed: Initial accumulator value. A number or a numeric vector.
                  Default: 0
            name: Optional identifier

        Raises:
            TypeError: If seed is neither a number nor a numeric vector
        """
        super().__init__(name)
        self.is_stateful = True

        if is_vector(seed):
            self.seed: Any = to_vector(seed, self.name)
        else:
            validate_number(seed, self.name)
            self.seed = seed

        self.state: Any = self._initial_state()

    def _initial_state(self) -> Any:
        return self.seed.copy() if isinstance(self.seed, np.ndarray) else self.seed

    def step(self, dt: float, value: Any) -> Any:
        if is_vector(value):
            rate = to_vector(value, self.name)
            accum = np.zeros_like(rate)
            if is_vector(self.state):
                n = min(len(rate), len(self.state))
                accum[:n] = self.state[:n]
            self.state = accum + dt * rate
        else:
            validate_number(value, self.name)
            self.state = self.state + dt * value

        if isinstance(self.state, np.ndarray):
            return self.state.copy()
        return self.state

    def reset(self) -> None:
        super().reset()
        self.state = self._initial_state()


# =========================
# Feedback
# =========================

class Feedback(SignalFunction):
    """
    Feeds a signal function its own output from the previous step.

        initial_value --- sf ---+---> y
                          ^     |
                          |     |
                          +-----+

    The external input is ignored.  The first step computes
    ``sf(dt, initial_value)``; every later step feeds back the previous
    result.  The cycle is resolved by lagging one step behind, so when
    ``sf`` is contractive the output approaches the fixed point of ``sf``
    as dt goes to 0.  No same-step fixed-point solve is attempted.

    Attributes:
        initial_value (Any): Value fed in on the first step, restored by reset()
        state (Any): Last output, fed in on the next step

    Example:
        >>> # Halving feedback converges to 0
        >>> halve = Feedback(8.0, Lift(lambda x: x / 2))
        >>> halve(0.1), halve(0.1)
        (4.0, 2.0)
    """

    def __init__(self, initial_value: Any, sf: Callable, name: str = "") -> None:
        super().__init__(name)
        validate_signal_functions([sf], self.name)
        self.is_stateful = True
        self.initial_value: Any = initial_value
        self.state: Any = initial_value
        self.children = [sf]

    def step(self, dt: float, value: Any = None) -> Any:
        self.state = self.children[0](dt, self.state)
        return self.state

    def reset(self) -> None:
        super().reset()
        self.state = self.initial_value


# =========================
# Delayed Switch
# =========================

class DSwitch(SignalFunction):
    """
    Delayed switch: replaces the underlying signal function once a predicate holds.

                         / +------ sf --+
        +------------+                  |--> y
        |                  +------ sf' -+
    x >-|              ^          ^
        |              |          |
        +- predicate? -+- make_sf-+

    While open, each step runs ``sf`` and tests its output with
    ``predicate``.  When the predicate is true, ``make_sf(output)`` builds
    the replacement ``sf'`` and the switch closes for good.  The triggering
    step still returns the output of ``sf``; ``sf'`` takes over from the
    next step on.  Once closed, ``sf``, ``predicate`` and ``make_sf`` are
    never consulted again.

    The transition is committed only after both ``predicate`` and
    ``make_sf`` returned; if either raises, the switch stays open.

    Attributes:
        predicate (Callable): Test applied to each output of ``sf``
        make_sf (Callable): Builds the replacement from the triggering output
        switched_sf (Optional[Callable]): The replacement, None while open

    Example:
        >>> # Count up, then hold at the first value above 3
        >>> counter = Compose([Constant(1), Integral()])
        >>> held = DSwitch(counter, lambda n: n > 3, lambda n: Constant(n))
        >>> [held(1) for _ in range(6)]
        [1, 2, 3, 4, 4, 4]
    """

    def __init__(self, sf: Callable, predicate: Callable[[Any], Any],
                 make_sf: Callable[[Any], Callable], name: str = "") -> None:
        """
        Initialize a DSwitch.

        Args:
            sf: Signal function driven while the switch is open
            predicate: Function of the output of ``sf``; truthy closes the switch
            make_sf: Function of the triggering output returning the
                     replacement signal function
            name: Optional identifier

        Raises:
            TypeError: If any argument is not callable
        """
        super().__init__(name or "dswitch")
        validate_signal_functions([sf], self.name)
        if not callable(predicate):
            raise TypeError(f"{self.name}: Predicate is not callable: {predicate!r}")
        if not callable(make_sf):
            raise TypeError(f"{self.name}: Signal function constructor is not callable: {make_sf!r}")
        self.is_stateful = True
        self.sf: Callable = sf
        self.predicate: Callable[[Any], Any] = predicate
        self.make_sf: Callable[[Any], Callable] = make_sf
        self.switched_sf: Optional[Callable] = None
        self.children = [sf]

    @property
    def is_closed(self) -> bool:
        """True once the switch has moved to the replacement signal function."""
        return self.switched_sf is not None

    def step(self, dt: float, value: Any) -> Any:
        if self.switched_sf is not None:
            return self.switched_sf(dt, value)

        value = self.sf(dt, value)
        if self.predicate(value):
            replacement = self.make_sf(value)
            validate_signal_functions([replacement], self.name)
            self.switched_sf = replacement
            self.children = [replacement]
        return value

    def reset(self) -> None:
        self.switched_sf = None
        self.children = [self.sf]
        super().reset()


# =========================
# Factory Functions
# =========================

def integral(c: Any = 0) -> Integral:
    """Euler integral of the input with integration constant ``c``."""
    return Integral(c)


def feedback(init_value: Any, sf: Callable) -> Feedback:
    """
    Feed ``sf`` its own previous output, starting from ``init_value``.

    Example:
        >>> # Orbit: position -> acceleration -> velocity -> position
        >>> orbit = feedback([60, 60], compose(lift(force),
        ...                                    integral([1, -0.1]),
        ...                                    integral([60, 60])))
    """
    return Feedback(init_value, sf)


def dswitch(sf: Callable, predicate: Callable[[Any], Any],
            make_sf: Callable[[Any], Callable]) -> DSwitch:
    """
    Delayed switch from ``sf`` to ``make_sf(value)`` once ``predicate(value)`` holds.

    Example:
        >>> bounce = dswitch(falling_ball,
        ...                  lambda ball: ball['pos'] <= 0,
        ...                  lambda ball: bouncing_ball(0, -0.9 * ball['vel']))
    """
    return DSwitch(sf, predicate, make_sf)


# =========================
# Module Metadata
# =========================

__all__ = [
    'Integral',
    'Feedback',
    'DSwitch',
    'integral',
    'feedback',
    'dswitch',
]

__version__ = '1.0.0'
__author__ = 'FRP Simulation Framework'
