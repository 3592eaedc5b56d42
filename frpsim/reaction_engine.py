"""
Reaction Engine
===============

Overview:
---------
The reaction engine drives a signal function graph forward in time.  It
repeatedly obtains a time step ``(dt, value)`` from an input source, runs
the root signal function once with it, and decides from the result whether
to keep going.  Because every integral in the graph accumulates
``dt * rate`` per step, this loop is a fixed-step forward Euler solver for
the ordinary differential equation the graph encodes.

Key Concepts:
-------------
1. **Input sources**:
   - A *generator*: any zero-argument callable returning one step per call.
     The loop keeps calling it until the run is told to stop.
   - An *iterator* (e.g. a generator object): consumed one step at a time
     until the run is told to stop or the iterator is exhausted.  It may
     be endless.
   - A *sequence*: any other iterable of steps (list, tuple, ...).  It is
     always consumed in full; continuation flags are not consulted.
   - Steps are ``TimeStep`` objects, ``{'dt': ..., 'value': ...}`` mappings
     or ``(dt, value)`` pairs.
   - **Implemented in:** `constant_input()`, `Reactor.run()`.

2. **Termination**:
   - *Boolean-terminated form* (no output callback): the root signal
     function itself returns True to continue and False to stop.
   - *Output-callback form*: every result is handed to ``output``, whose
     truthy return value continues a generator- or iterator-driven run.
   - The step whose result stops the run has already executed in full, so
     any side effects inside the graph happened before the stop.
   - There is no timeout; a graph that never stops runs forever.  Compose
     a stop condition on ``time()`` into the graph to bound a run.

3. **Recording**:
   - An optional `SignalScope` samples every result against the
     accumulated simulated time.
   - Statistics in `ReactionStats`: steps, simulated time, compute time.

Visual Representation:
---------------------

    input() ──► (dt, value) ──► [ root sf ] ──► result ──► output(result)?
       ▲                                                        │
       └──────────────────── continue ◄─────────────────────────┘

Typical Workflow:
-----------------
1. Build a signal function with the combinators.
2. Call ``react(sf)`` with a graph that returns a boolean, or
   ``react(sf, input, output)`` with an explicit output callback.
3. Read ``stats`` (and the scope, if one was given) after the run.

Author: FRP Simulation Framework
Version: 1.0.0
"""
import numpy as np
import matplotlib.pyplot as plt
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union
from collections.abc import Iterator
from dataclasses import dataclass
import time

from .core_functions import (DEFAULT_DT, SignalFunction, TimeStep,
                             as_time_step, is_vector)


InputSource = Union[Callable[[], Any], Iterable[Any]]


# =========================
# Input Sources
# =========================

def constant_input(dt: float = DEFAULT_DT, value: Any = None) -> Callable[[], TimeStep]:
    """
    Generator producing the same step forever.

    This is the default input source of ``react``: a constant dt of 0.1 s
    with no input value.

    Args:
        dt:    Step size in seconds. Default: 0.1
        value: Input value of every step. Default: None

    Example:
        >>> source = constant_input(0.01)
        >>> source()
        TimeStep(dt=0.01, value=None)
    """
    step = as_time_step(TimeStep(dt, value))

    def next_step() -> TimeStep:
        return step

    return next_step


# =========================
# Reaction Statistics
# =========================

@dataclass
class ReactionStats:
    """
    Runtime statistics collected during a reaction run.

    Attributes:
        total_steps (int):     Number of steps executed.
        sim_time (float):      Sum of the dt of all executed steps (seconds).
        compute_time (float):  Wall-clock time (seconds) of the step loop.
        avg_step_time (float): Mean wall-clock time per step.

    Example:
        >>> stats = react(graph)
        >>> print(f"Ran {stats.total_steps} steps in "
        ...       f"{stats.compute_time:.3f} s")
    """
    total_steps: int = 0
    sim_time: float = 0.0
    compute_time: float = 0.0
    avg_step_time: float = 0.0


# =========================
# Signal Scope
# =========================

class SignalScope:
    """
    Recorder for the results of a reaction run.

    SignalScope acts as an oscilloscope on the root signal function: it
    samples every step's result together with the simulated time at the end
    of that step.  Results are split into scalar channels:

      - a scalar result is stored as ``"label[0]"``
      - a vector result is stored as ``"label[i]"`` per component
      - a mapping result (e.g. ``{'vel': v, 'pos': p}``) is stored per key,
        as ``"key[0]"`` for scalars or ``"key[i]"`` for vectors

    Booleans and other non-numeric results are not split into channels,
    but every result is kept in ``results``.  Each channel in ``data`` has
    one entry per sample in ``t``; steps where it had no numeric value hold
    NaN.  ``full_signals`` only holds the steps where the value was a vector.

    Attributes:
        label (str): Channel prefix for scalar and vector results
        t (List[float]): Simulated time of each sample
        results (List[Any]): Raw result of each sample
        data (Dict[str, List[float]]): Scalar channels keyed as ``"name[i]"``
        full_signals (Dict[str, List[np.ndarray]]): Vector snapshots by name

    Example:
        >>> scope = SignalScope("ball")
        >>> react(bouncing_ball(10.0, 0.0), constant_input(0.1),
        ...       lambda ball: len(scope.t) < 100, scope=scope)
        >>> pos = scope.get_signal("pos")
    """

    def __init__(self, label: str = "y") -> None:
        self.label: str = label
        self.t: List[float] = []
        self.results: List[Any] = []
        self.data: Dict[str, List[float]] = {}
        self.full_signals: Dict[str, List[np.ndarray]] = {}

    def record(self, t: float, result: Any) -> None:
        """
        Store one result sampled at simulated time ``t``.

        Called by the reaction engine after every step.  Every channel stays
        aligned with ``t``: a channel first seen at a later step is
        back-filled with NaN, and a channel with no numeric value at this
        step gets NaN.
        """
        self.t.append(t)
        self.results.append(result)

        if isinstance(result, dict):
            for key, val in result.items():
                self._record_channel(str(key), val)
        else:
            self._record_channel(self.label, result)

        n = len(self.t)
        for values in self.data.values():
            if len(values) < n:
                values.append(np.nan)

    def _channel(self, key: str) -> List[float]:
        if key not in self.data:
            self.data[key] = [np.nan] * (len(self.t) - 1)
        return self.data[key]

    def _record_channel(self, name: str, val: Any) -> None:
        if isinstance(val, (bool, np.bool_)):
            return
        if is_vector(val):
            try:
                vec = np.asarray(val, dtype=float).reshape(-1)
            except (TypeError, ValueError):
                return
            self.full_signals.setdefault(name, []).append(vec.copy())
            for i in range(len(vec)):
                self._channel(f"{name}[{i}]").append(vec[i])
        elif isinstance(val, (int, float, np.number)):
            self._channel(f"{name}[0]").append(float(val))

    def get_signal(self, label: str, index: int = 0) -> Optional[np.ndarray]:
        """
        Retrieve a recorded scalar channel as a NumPy array.

        Args:
            label: Channel name (the scope label, or a mapping key)
            index: Vector component index (0-based). Use 0 for scalars.

        Returns:
            np.ndarray of shape (N,), or None if the channel was never recorded.

        Example:
            >>> x = scope.get_signal("y", index=0)
            >>> plt.plot(scope.t, x)
        """
        key = f"{label}[{index}]"
        return np.array(self.data[key]) if key in self.data else None

    def get_full_signal(self, label: str) -> Optional[np.ndarray]:
        """
        Retrieve all components of a recorded vector signal as a 2-D array.

        Returns:
            np.ndarray of shape (N, dim), or None if not found.

        Example:
            >>> orbit_xy = scope.get_full_signal("y")
            >>> plt.plot(orbit_xy[:, 0], orbit_xy[:, 1])
        """
        return np.array(self.full_signals[label]) if label in self.full_signals else None

    def get_time_range(self, t_start: float, t_end: float) -> Tuple[int, int]:
        """Return the sample index range covering [t_start, t_end]."""
        t = np.asarray(self.t)
        start_idx = int(np.searchsorted(t, t_start, side='left'))
        end_idx = int(np.searchsorted(t, t_end, side='right'))
        return start_idx, end_idx

    def plot(self, title: str = "Reaction Results", figsize: tuple = (12, 6),
             signals: Optional[List[str]] = None,
             time_range: Optional[Tuple[float, float]] = None) -> None:
        """
        Plot all (or selected) recorded channels against simulated time.

        Args:
            title:      Figure title displayed above the plot.
            figsize:    Matplotlib figure size as (width, height) in inches.
            signals:    List of channel keys to plot, e.g. ``['pos[0]']``.
                        If None (default) all recorded channels are plotted.
            time_range: Optional (t_start, t_end) tuple restricting the
                        horizontal axis.

        Example:
            >>> scope.plot(title="Bouncing ball", signals=["pos[0]"])
        """
        if not self.data:
            print("⚠ No signals to plot. Pass scope=SignalScope() to react().")
            return

        if time_range:
            start_idx, end_idx = self.get_time_range(time_range[0], time_range[1])
        else:
            start_idx, end_idx = 0, len(self.t)
        t_plot = self.t[start_idx:end_idx]

        if signals is None:
            plot_signals = self.data.items()
        else:
            plot_signals = [(name, self.data[name]) for name in signals if name in self.data]

        plt.figure(figsize=figsize)

        for name, values in plot_signals:
            plt.plot(t_plot, values[start_idx:end_idx], label=name, linewidth=1.5)

        plt.xlabel("Time [s]", fontsize=12)
        plt.ylabel("Amplitude", fontsize=12)
        plt.title(title, fontsize=14)
        plt.legend(loc='best', fontsize=10)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()
        plt.show()


# =========================
# Reaction Engine
# =========================

class Reactor:
    """
    Drives a root signal function with a stream of time steps.

    The run is strictly sequential: one step is fully processed before the
    next one is requested, so the state of every signal function in the
    graph is only touched by this loop.

    Two forms are supported, chosen by whether ``output`` is given:

      - **Boolean-terminated** (``output`` is None): the root signal
        function must return a boolean; the run continues while it is True.
        Anything that is not a bool raises TypeError.
      - **Output callback**: each result is passed to ``output``.  With a
        generator input the run continues while ``output`` returns a truthy
        value; the same holds for an iterator input, which also stops when
        exhausted.  With a sequence input every step is executed regardless.

    Attributes:
        sf (Callable):                 Root signal function.
        input (InputSource):           Generator, iterator or sequence of steps.
        output (Optional[Callable]):   Result callback, or None.
        scope (Optional[SignalScope]): Recorder sampled after every step.
        stats (ReactionStats):         Populated by run().

    Example:
        >>> reactor = Reactor(graph, constant_input(0.01))
        >>> reactor.run(verbose=True)
        >>> print(reactor.stats.total_steps)
    """

    def __init__(self, sf: Callable, input: Optional[InputSource] = None,
                 output: Optional[Callable[[Any], Any]] = None,
                 scope: Optional[SignalScope] = None) -> None:
        """
        Configure the engine.

        Args:
            sf:     Root signal function (or plain ``(dt, value)`` callable).
            input:  Zero-argument step generator, or an iterable of steps.
                    Default: ``constant_input()``, dt = 0.1 s forever.
            output: Optional callback receiving each result and returning a
                    continuation flag.
            scope:  Optional SignalScope recording every result.

        Raises:
            TypeError: If sf or output is not callable, or input is neither
                callable nor iterable.
        """
        if not callable(sf):
            raise TypeError(f"react: Root signal function is not callable: {sf!r}")
        if output is not None and not callable(output):
            raise TypeError(f"react: Output is not callable: {output!r}")
        if input is None:
            input = constant_input()
        if not callable(input) and not hasattr(input, '__iter__'):
            raise TypeError(
                f"react: Input must be a step generator or a sequence of steps, "
                f"got {type(input).__name__}"
            )

        self.sf = sf
        self.input = input
        self.output = output
        self.scope = scope
        self.stats = ReactionStats()

    @property
    def is_generator_input(self) -> bool:
        return callable(self.input)

    @property
    def is_iterator_input(self) -> bool:
        """True for one-shot iterators (e.g. generator objects), which may be endless."""
        return not callable(self.input) and isinstance(self.input, Iterator)

    def _step(self, step: Any) -> Any:
        """Run the root signal function for one step and record the result."""
        step = as_time_step(step)
        result = self.sf(step.dt, step.value)

        self.stats.total_steps += 1
        self.stats.sim_time += step.dt
        if self.scope is not None:
            self.scope.record(self.stats.sim_time, result)
        return result

    def _continuation(self, result: Any) -> bool:
        """Decide from one step's result whether the run goes on."""
        if self.output is not None:
            return bool(self.output(result))
        if not isinstance(result, (bool, np.bool_)):
            name = getattr(self.sf, 'name', type(self.sf).__name__)
            raise TypeError(
                f"react: Root signal function '{name}' must return a boolean "
                f"when no output callback is given, got {result!r}"
            )
        return bool(result)

    def run(self, verbose: bool = False) -> ReactionStats:
        """
        Execute the reaction loop until it stops.

        Args:
            verbose: If True, print a configuration summary before the run
                     and a completion message afterwards.

        Returns:
            ReactionStats: The populated ``self.stats``.

        Side effects:
            - ``self.stats`` is reset at the start of the run.
            - The signal function graph is NOT reset; state carries over
              from any previous run unless ``sf.reset()`` is called first.
        """
        form = "boolean-terminated" if self.output is None else "output callback"
        if self.is_generator_input:
            source = "generator"
        elif self.is_iterator_input:
            source = "iterator"
        else:
            source = "sequence"

        if verbose:
            print(f"\n{'=' * 70}")
            print(f"FRP Reaction")
            print(f"{'=' * 70}")
            print(f"  Root:           {self.sf!r}")
            print(f"  Form:           {form}")
            print(f"  Input:          {source}")
            print(f"  Scope:          {'yes' if self.scope is not None else 'no'}")
            print(f"{'=' * 70}\n")

        self.stats = ReactionStats()
        start_time = time.time()

        if self.is_generator_input:
            cont = True
            while cont:
                result = self._step(self.input())
                cont = self._continuation(result)
        elif self.is_iterator_input:
            for step in self.input:
                result = self._step(step)
                if not self._continuation(result):
                    break
        else:
            for step in self.input:
                result = self._step(step)
                if self.output is not None:
                    self.output(result)

        end_time = time.time()

        self.stats.compute_time = end_time - start_time
        self.stats.avg_step_time = self.stats.compute_time / max(self.stats.total_steps, 1)

        if verbose:
            print(f"✓ Reaction complete: {self.stats.total_steps} steps, "
                  f"{self.stats.sim_time:.4g} s simulated in "
                  f"{self.stats.compute_time:.3f} s\n")
        return self.stats


def react(sf: Callable, input: Optional[InputSource] = None,
          output: Optional[Callable[[Any], Any]] = None,
          scope: Optional[SignalScope] = None,
          verbose: bool = False) -> ReactionStats:
    """
    Use the Euler method to integrate the ODE encoded by a signal function.

    Boolean-terminated form, ``react(sf)`` or ``react(sf, input)``: ``sf``
    maps each input to True (continue) or False (stop).

    Output-callback form, ``react(sf, input, output)``: ``output`` receives
    every result and returns a continuation flag, honoured when ``input``
    is a generator or an iterator.  A sequence input (list, tuple, ...) is
    always fully consumed.

    Args:
        sf:      Root signal function.
        input:   Zero-argument step generator or iterable of steps.
                 Default: dt = 0.1 s with no value, forever.
        output:  Optional result callback.
        scope:   Optional SignalScope recording each result.
        verbose: Print a run summary.

    Returns:
        ReactionStats: Step count, simulated time and timing of the run.

    Example:
        >>> react(compose(bouncing_ball(10.0, 0),
        ...               lift(print),
        ...               time(),
        ...               lift(lambda t: t < 10)))
    """
    return Reactor(sf, input, output, scope).run(verbose=verbose)


# =========================
# Topology Printout
# =========================

def print_topology(sf: Callable) -> None:
    """
    Print the combinator tree of a signal function graph.

    Walks the ``children`` links from the root and renders the hierarchy
    with box-drawing characters.  An instance reachable along several paths
    is printed in full the first time and shown as ``(see above)``
    afterwards; that is what a shared signal function looks like.  A closed
    DSwitch shows its replacement instead of the original signal function.

    Marks used:
      ⚡  Stateful signal function (integral, feedback, switch).
      ○   Stateless signal function.

    Example output (falling ball):
        └── ⚡ dswitch (DSwitch)
            └── ○ fanout (Fanout)
                ├── ○ compose (Compose)
                │   ├── ○ constant (Constant)
                │   └── ⚡ integral (Integral)
                └── ○ compose (Compose)
                    ├── ○ compose (Compose) (see above)
                    └── ⚡ integral (Integral)
    """
    print("\n" + "=" * 70)
    print("SIGNAL FUNCTION TOPOLOGY")
    print("=" * 70)
    print()

    printed = set()
    counts = {'total': 0, 'stateful': 0}

    def print_tree(node, prefix="", is_last=True):
        """Recursively print a signal function and its children."""
        branch = "└── " if is_last else "├── "
        stateful = getattr(node, 'is_stateful', False)
        mark = "⚡" if stateful else "○"
        name = getattr(node, 'name', getattr(node, '__name__', repr(node)))
        node_type = type(node).__name__

        if id(node) in printed:
            print(f"{prefix}{branch}{mark} {name} ({node_type}) (see above)")
            return

        printed.add(id(node))
        counts['total'] += 1
        if stateful:
            counts['stateful'] += 1

        print(f"{prefix}{branch}{mark} {name} ({node_type})")

        children = node.children if isinstance(node, SignalFunction) else []
        extension = "    " if is_last else "│   "
        for i, child in enumerate(children):
            print_tree(child, prefix + extension, i == len(children) - 1)

    print_tree(sf)

    print(f"\nTotal signal functions: {counts['total']}")
    print(f"  Stateful:  {counts['stateful']}")
    print(f"  Stateless: {counts['total'] - counts['stateful']}")
    print("\nLegend:")
    print("  ⚡ = Stateful signal function (keeps state between steps)")
    print("  ○ = Stateless signal function")
    print("=" * 70 + "\n")


# =========================
# Module Metadata
# =========================

__all__ = [
    'InputSource',
    'constant_input',
    'ReactionStats',
    'SignalScope',
    'Reactor',
    'react',
    'print_topology',
]

__version__ = '1.0.0'
