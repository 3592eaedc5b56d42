# frpsim: Functional Reactive Programming Simulation Framework
# Discrete-time signal functions driven by a fixed-step Euler loop.
#
# Usage:
#   from frpsim import constant, integral, compose, fanout, lift, react, ...
#
# Precision:
#   Vector integrals accumulate in float64.
#   Change frpsim.core_functions.DEFAULT_DTYPE to switch globally.

from .core_functions import *
from .processing_functions import *
from .dynamic_functions import *
from .source_functions import *
from .reaction_engine import *

__all__ = []
__version__ = '1.0.0'
__author__ = 'FRP Simulation Framework'
