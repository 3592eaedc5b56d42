"""
orbit.py
========
FRP Simulation example: Planetary Orbit

Demonstrates:
  1. lift     : inverse-square force field as a pure function
  2. integral : vector integration (acceleration → velocity → position)
  3. feedback : the position feeds the force of the next step
  4. react    : stopped by a time() condition after 700 s

The orbit system is a feedback loop:

             position - force -> acceleration
                ^                     |
                |                     |
             integral              integral
                |                     |
                +----- velocity <-----+

Run:
    python orbit.py
"""

import numpy as np
import matplotlib.pyplot as plt

from frpsim import compose, feedback, integral, lift, react, time


# =============================================================================
# Simulation parameters
# =============================================================================
G      = 100            # "fake" gravitational constant
POS_0  = [60, 60]
VEL_0  = [1, -0.1]
T_SIM  = 700.0          # s


def force(p):
    """Instantaneous force vector on the planet at position p."""
    d = np.hypot(p[0], p[1])
    return [G * -p[0] / d ** 3,
            G * -p[1] / d ** 3]


def orbit(initial_pos, initial_vel):
    return feedback(initial_pos,
                    compose(lift(force),                 # position -> acceleration
                            integral(initial_vel),       #          -> velocity
                            integral(initial_pos)))      #          -> position


# =============================================================================
# Main
# =============================================================================
if __name__ == "__main__":

    path = []

    def record(p):
        path.append(p)
        print(",".join(str(x) for x in p))

    react(compose(orbit(POS_0, VEL_0),
                  lift(record),
                  time(),
                  lift(lambda t: t < T_SIM)),
          verbose=True)

    path = np.array(path)
    plt.figure(figsize=(8, 8))
    plt.plot(path[:, 0], path[:, 1], linewidth=1.0)
    plt.plot([0], [0], 'o', color='orange', markersize=12)
    plt.title("Orbit", fontsize=14, fontweight='bold')
    plt.axis('equal')
    plt.grid(True, linestyle='--', alpha=0.7)
    plt.tight_layout()
    plt.show()
