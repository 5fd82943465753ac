""" Standard circuits for tests and benchmarks, all of them end with a measurement of all qubits. """

from ._utility.quantum_algorithms import (
    bell_circ,
    ghz_circ,
    w_state_circ,
    qft_circ,
    tqqc_parity_circ,
    hea_circ,
    random_circ,
    h_layer_circ,
    identity_circ,
    parity_oscillation,
    delta_search,
    depth_scaling,
    qubit_scaling,
)
