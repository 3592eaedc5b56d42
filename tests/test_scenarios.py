"""
End-to-end scenarios.

Tests cover:
1. Bouncing ball: documented first-step trace, ground contact, bounce
2. Orbit: vector feedback loop driven by a time stop condition
"""

import pytest
import numpy as np

from frpsim import (compose, constant, constant_input, dswitch, fanout,
                    feedback, integral, lift, react, time, SignalScope)


def bouncing_ball(initial_pos, initial_vel):
    velocity = compose(constant(-9.8), integral(initial_vel))
    position = compose(velocity, integral(initial_pos))
    falling_ball = fanout(lambda v, p: {'vel': v, 'pos': p}, velocity, position)

    return dswitch(falling_ball,
                   lambda ball: ball['pos'] <= 0,
                   lambda ball: bouncing_ball(0, -0.9 * ball['vel']))


def run_ball(n_steps, dt=0.1):
    trace = []
    react(bouncing_ball(10.0, 0),
          constant_input(dt),
          lambda ball: trace.append(ball) or len(trace) < n_steps)
    return trace


# ============================================================================
# Test Class 1: Bouncing Ball
# ============================================================================

class TestBouncingBall:
    """Test the bouncing ball model"""

    def test_first_step(self):
        """Test the documented first step {vel: -0.98, pos: 9.804}"""
        ball = run_ball(1)[0]
        assert ball['vel'] == pytest.approx(-0.98)
        assert ball['pos'] == pytest.approx(9.804)

    def test_shared_velocity_steps_twice(self):
        """Test that the shared velocity integral advances twice per step"""
        trace = run_ball(2)
        assert trace[1]['vel'] == pytest.approx(-2.94)
        assert trace[1]['pos'] == pytest.approx(9.412)

    def test_falling_trace(self):
        """Test the closed form of the fall: pos_k = 10 - 0.098 k (k + 1)"""
        trace = run_ball(9)
        for k, ball in enumerate(trace, start=1):
            assert ball['vel'] == pytest.approx(-0.98 * (2 * k - 1))
            assert ball['pos'] == pytest.approx(10 - 0.098 * k * (k + 1))

    def test_ground_contact_step_from_falling_ball(self):
        """Test that the step reaching the ground still reports the fall"""
        trace = run_ball(10)
        assert trace[8]['pos'] > 0
        assert trace[9]['pos'] == pytest.approx(-0.78)
        assert trace[9]['vel'] == pytest.approx(-18.62)

    def test_bounce(self):
        """Test that the step after contact restarts at 0 with -0.9 * vel"""
        trace = run_ball(11)
        bounce_vel = -0.9 * trace[9]['vel']
        assert trace[10]['vel'] == pytest.approx(bounce_vel - 0.98)
        assert trace[10]['pos'] == pytest.approx(0.1 * (bounce_vel - 1.96))
        assert trace[10]['vel'] > 0

    def test_rises_then_falls_again(self):
        """Test that after the bounce the velocity decreases monotonically until the next contact"""
        trace = run_ball(40)
        after = trace[10:]
        next_contact = next(i for i, ball in enumerate(after) if ball['pos'] <= 0)
        vels = [ball['vel'] for ball in after[:next_contact + 1]]
        assert all(b < a for a, b in zip(vels, vels[1:]))
        assert vels[0] > 0 > vels[-1]

    def test_bounces_lose_energy(self):
        """Test that successive bounce speeds shrink"""
        trace = run_ball(200)
        contacts = [i for i, ball in enumerate(trace) if ball['pos'] <= 0]
        speeds = [abs(trace[i]['vel']) for i in contacts[:3]]
        assert len(speeds) == 3
        assert speeds[0] > speeds[1] > speeds[2]

    def test_boolean_form_with_time_stop(self):
        """Test the demo graph: print, then stop after 10 s"""
        printed = []
        stats = react(compose(bouncing_ball(10.0, 0),
                              lift(lambda ball: printed.append(ball)),
                              time(),
                              lift(lambda t: t < 9.95)))
        assert stats.total_steps == len(printed) == 100
        assert printed[0]['pos'] == pytest.approx(9.804)

    def test_scope_records_ball(self):
        """Test recording the ball channels with a scope"""
        scope = SignalScope("ball")
        react(bouncing_ball(10.0, 0), [(0.1, None)] * 3, lambda ball: True, scope=scope)
        np.testing.assert_allclose(scope.get_signal("pos"), [9.804, 9.412, 8.824])
        np.testing.assert_allclose(scope.t, [0.1, 0.2, 0.3])


# ============================================================================
# Test Class 2: Orbit
# ============================================================================

G = 100


def force(p):
    d = np.hypot(p[0], p[1])
    return [G * -p[0] / d ** 3, G * -p[1] / d ** 3]


def orbit(initial_pos, initial_vel):
    return feedback(initial_pos,
                    compose(lift(force),
                            integral(initial_vel),
                            integral(initial_pos)))


class TestOrbit:
    """Test the orbit feedback loop"""

    def test_first_step(self):
        """Test one Euler step of position and velocity"""
        sf = orbit([60, 60], [1, -0.1])
        a = np.array(force([60, 60]))
        v1 = np.array([1, -0.1]) + 0.1 * a
        p1 = np.array([60, 60]) + 0.1 * v1
        np.testing.assert_allclose(sf(0.1, None), p1)

    def test_run_until_time(self):
        """Test driving the orbit with a time stop condition"""
        path = []
        stats = react(compose(orbit([60, 60], [1, -0.1]),
                              lift(lambda p: path.append(p)),
                              time(),
                              lift(lambda t: t < 69.95)))
        assert stats.total_steps == len(path) == 700
        radii = [np.hypot(*p) for p in path]
        assert min(radii) > 0
        assert radii[-1] != pytest.approx(radii[0])

    def test_attraction(self):
        """Test that the planet starts falling towards the origin"""
        sf = orbit([60.0, 0.0], [0.0, 0.0])
        first = sf(0.1, None)
        second = sf(0.1, None)
        assert second[0] < first[0] < 60.0
