"""
processing_functions.py
=======================

Structural combinators and lifted pure functions.

This module provides the combinators that build new signal functions out of
existing ones, either serially (Compose) or in parallel (Fanout), and the
Lift adapter that turns a plain function of the input value into a
signal function.

Classes:
    Lift: Applies a pure function to the input value
    Compose: Serial composition, x ---> y  +  y ---> z  =  x ---> z
    Fanout: Parallel fan-out of one input through several signal functions

Author: FRP Simulation Framework
Version: 1.0.0
"""

from typing import Any, Callable, Sequence

from .core_functions import SignalFunction, validate_signal_functions


# =========================
# Lift
# =========================

class Lift(SignalFunction):
    """
    Lifts a pure function of the input value to a signal function.

    The step size is ignored: ``Lift(f)(dt, x) == f(x)``.  The function may
    have side effects such as printing, which is how console output is
    usually attached to a running graph.  Exceptions raised by ``f``
    propagate to the caller.

    Attributes:
        function (Callable): The lifted function

    Example:
        >>> double = Lift(lambda x: 2 * x)
        >>> double(0.1, 21)
        42
    """

    def __init__(self, function: Callable[[Any], Any], name: str = "") -> None:
        if not callable(function):
            raise TypeError(f"lift: Expected a callable, got {function!r}")
        function_name = getattr(function, '__name__', '')
        if function_name == '<lambda>':
            function_name = ''
        super().__init__(name or function_name or "lift")
        self.function: Callable[[Any], Any] = function

    def step(self, dt: float, value: Any) -> Any:
        return self.function(value)


# =========================
# Serial Composition
# =========================

class Compose(SignalFunction):
    """
    Serial composition of signal functions.

    A single step threads the same dt through every constituent in order,
    feeding each output into the next one.  The first signal function
    receives the external input; the last one's output is returned.

        x ---> [sf1] ---> [sf2] ---> ... ---> [sfN] ---> y

    Attributes:
        children (List[Callable]): The composed signal functions, in order

    Example:
        >>> position = Compose([Constant(2.0), Integral(0.0)])
        >>> position(0.5, None)
        1.0
    """

    def __init__(self, sfs: Sequence[Callable], name: str = "") -> None:
        """
        Initialize a Compose combinator.

        Args:
            sfs: One or more signal functions (or plain ``(dt, value)``
                 callables), applied first to last
            name: Optional identifier

        Raises:
            ValueError: If no signal function is given
            TypeError: If an argument is not callable
        """
        super().__init__(name or "compose")
        validate_signal_functions(sfs, self.name, min_count=1)
        self.children = list(sfs)

    def step(self, dt: float, value: Any) -> Any:
        for sf in self.children:
            value = sf(dt, value)
        return value


# =========================
# Parallel Fan-out
# =========================

class Fanout(SignalFunction):
    """
    Sends the same input to several signal functions and combines the results.

        x ---> +-- sf1 --+
               |-- sf2 --|---> [f] ---> w
               +-- sfN --+

    Every constituent is invoked exactly once per step with the same
    ``(dt, value)``, strictly from left to right; they do not see each
    other's output.  The N outputs are passed as N positional arguments to
    the combiner ``f``, whose result is returned.

    Attributes:
        combiner (Callable): Function of N arguments merging the outputs
        children (List[Callable]): The fanned-out signal functions, in order

    Example:
        >>> pair = Fanout(lambda a, b: (a, b), [Constant(1), Lift(abs)])
        >>> pair(0.1, -3)
        (1, 3)
    """

    def __init__(self, combiner: Callable[..., Any], sfs: Sequence[Callable],
                 name: str = "") -> None:
        """
        Initialize a Fanout combinator.

        Args:
            combiner: Function accepting exactly len(sfs) positional arguments
            sfs: One or more signal functions
            name: Optional identifier

        Raises:
            TypeError: If combiner or an element of sfs is not callable
            ValueError: If no signal function is given
        """
        super().__init__(name or "fanout")
        if not callable(combiner):
            raise TypeError(f"{self.name}: Combiner is not callable: {combiner!r}")
        validate_signal_functions(sfs, self.name, min_count=1)
        self.combiner: Callable[..., Any] = combiner
        self.children = list(sfs)

    def step(self, dt: float, value: Any) -> Any:
        outputs = [sf(dt, value) for sf in self.children]
        return self.combiner(*outputs)


# =========================
# Factory Functions
# =========================

def lift(f: Callable[[Any], Any]) -> Lift:
    """Lift a pure function ``f(value)`` to a signal function."""
    return Lift(f)


def compose(*sfs: Callable) -> Compose:
    """
    Serial composition of one or more signal functions.

    Example:
        >>> velocity = compose(constant(-9.8), integral(0.0))
    """
    return Compose(sfs)


def fanout(f: Callable[..., Any], *sfs: Callable) -> Fanout:
    """
    Send the input through every signal function of ``sfs`` and through ``f``.

    Example:
        >>> ball = fanout(lambda v, p: {'vel': v, 'pos': p}, velocity, position)
    """
    return Fanout(f, sfs)


# =========================
# Module Metadata
# =========================

__all__ = [
    'Lift',
    'Compose',
    'Fanout',
    'lift',
    'compose',
    'fanout',
]

__version__ = '1.0.0'
