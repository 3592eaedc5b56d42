"""
bouncing_ball.py
================
FRP Simulation example: Bouncing Ball

Demonstrates:
  1. constant / integral : velocity and position of a falling ball
  2. fanout              : combine velocity and position into one record
  3. dswitch             : restart the fall with a damped upward velocity
                            once the ball hits the ground
  4. react               : Euler loop with the default dt = 0.1 s, stopped
                            by a time() condition composed into the graph
  5. SignalScope         : record a second run for plotting

Signal function graph:

    bouncing_ball(pos0, vel0)
      └── dswitch: falling_ball until pos <= 0, then bouncing_ball(0, -0.9 * vel)
            └── fanout({vel, pos})
                  ├── velocity = constant(-9.8) >> integral(vel0)
                  └── position = velocity >> integral(pos0)

The velocity signal function is shared: the fan-out and the position
pipeline both step it, so it advances twice per step.  The printed trace
starts with ``-0.98,9.804``.

Run:
    python bouncing_ball.py
"""

from frpsim import (compose, constant, constant_input, dswitch, fanout,
                    integral, lift, print_topology, react, time, SignalScope)


# =============================================================================
# Simulation parameters
# =============================================================================
GRAVITY     = -9.8      # m/s^2
RESTITUTION = -0.9      # velocity factor applied at each bounce
POS_0       = 10.0      # m
VEL_0       = 0.0       # m/s
DT          = 0.1       # s
T_SIM       = 10.0      # s


def bouncing_ball(initial_pos, initial_vel):
    velocity     = compose(constant(GRAVITY), integral(initial_vel))
    position     = compose(velocity, integral(initial_pos))
    falling_ball = fanout(lambda v, p: {'vel': v, 'pos': p}, velocity, position)

    return dswitch(falling_ball,
                   lambda ball: ball['pos'] <= 0,
                   lambda ball: bouncing_ball(0, RESTITUTION * ball['vel']))


def print_ball(ball):
    print(f"{ball['vel']},{ball['pos']}")
    return ball


# =============================================================================
# Main
# =============================================================================
if __name__ == "__main__":

    print("\n" + "=" * 70)
    print("EXAMPLE: Bouncing ball  →  print  →  stop after 10 s")
    print("=" * 70)

    print_topology(bouncing_ball(POS_0, VEL_0))

    # ── Boolean-terminated run ────────────────────────────────────────────────
    react(compose(bouncing_ball(POS_0, VEL_0),
                  lift(print_ball),
                  time(),
                  lift(lambda t: t < T_SIM)),
          verbose=True)

    # ── Output-callback run, recorded for plotting ───────────────────────────
    n_steps = int(T_SIM / DT)
    scope = SignalScope("ball")
    react(bouncing_ball(POS_0, VEL_0),
          constant_input(DT),
          lambda ball: len(scope.t) < n_steps,
          scope=scope)

    print(f"  Completed: {len(scope.t)} time steps recorded")
    scope.plot(title="Bouncing Ball", signals=["pos[0]", "vel[0]"])
