""" The TQQC optimisation: configuration, parity estimation, statistical test, convergence and the engine. """

from ._tqqc.config import TqqcConfig, SigMode, DeltaMode
from ._tqqc.stat_test import Direction, TestResult, StatisticalTest
from ._tqqc.convergence import Convergence, DynamicInner
from ._tqqc.parity import (
    popcount,
    is_even,
    is_odd,
    p_even,
    p_odd,
    expectation,
    parity_sign,
    build_circuit,
    build_circuit_with_basis,
)
from ._tqqc.engine import TqqcEngine, TqqcResult, IterationRecord
