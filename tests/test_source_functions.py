"""
Unit tests for signal sources.

Tests cover:
1. constant ignores dt and input
2. time accumulates the step sizes
"""

import pytest

from frpsim import Constant, Compose, constant, time


class TestConstant:
    """Test the constant source"""

    def test_returns_value(self):
        """Test that the value is returned for any dt and input"""
        sf = constant(-9.8)
        assert sf(0.1, None) == -9.8
        assert sf(5.0, "ignored") == -9.8
        assert sf(0, [1, 2]) == -9.8

    def test_vector_value(self):
        """Test that a vector constant is returned as given"""
        sf = constant([1.0, 2.0])
        assert sf(0.1, None) == [1.0, 2.0]

    def test_is_stateless(self):
        """Test that constant keeps no state"""
        sf = constant(1)
        assert isinstance(sf, Constant)
        assert sf.is_stateful is False


class TestTime:
    """Test the elapsed time signal function"""

    def test_is_composition(self):
        """Test that time() is compose(constant(1), integral())"""
        clock = time()
        assert isinstance(clock, Compose)
        assert clock.name == "time"
        assert [type(sf).__name__ for sf in clock.children] == ["Constant", "Integral"]

    def test_counts_steps(self):
        """Test that the output after N steps of size dt is N*dt"""
        clock = time()
        outputs = [clock(0.1, None) for _ in range(10)]
        assert outputs[0] == pytest.approx(0.1)
        assert outputs[-1] == pytest.approx(1.0)

    def test_variable_step_sizes(self):
        """Test that unequal steps are summed"""
        clock = time()
        for dt in (0.5, 0.25, 0.0, 1.0):
            t = clock(dt, None)
        assert t == pytest.approx(1.75)

    def test_independent_clocks(self):
        """Test that each time() call builds its own accumulator"""
        a, b = time(), time()
        a(1.0, None)
        a(1.0, None)
        assert b(1.0, None) == pytest.approx(1.0)

    def test_reset(self):
        """Test that reset restarts the clock at 0"""
        clock = time()
        clock(1.0, None)
        clock.reset()
        assert clock(0.5, None) == pytest.approx(0.5)
