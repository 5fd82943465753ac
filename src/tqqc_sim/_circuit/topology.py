"""
Qubit connectivity of a device, described by its coupling map.
"""

import networkx as nx

from qiskit.transpiler import CouplingMap

from .._utility.errors import EmptyCouplingMap, InvalidCoupling, QubitOutOfRange, TopologyViolation


class Topology(object):
    """ Coupling graph of a device.

    Args:
        coupling_map (list[tuple[int, int]]): Edges between physical qubits.
        num_qubits (int): Number of qubits of the device.
        bidirectional (bool): Whether each edge can be used in both directions.
        name (str): Optional name such as "linear_5".

    Note:
        Use the class methods linear, ring, grid, heavy_hex, all_to_all or from_coupling_map instead of calling the
        constructor directly, they make sure the map is consistent.

    Example:
        .. code:: python

            topo = Topology.linear(5)
            topo.is_connected(1, 2)      # True
            topo.shortest_path(0, 4)     # [0, 1, 2, 3, 4]
    """

    def __init__(self, coupling_map: list, num_qubits: int, bidirectional: bool=True, name: str=None):
        self.coupling_map = [(int(a), int(b)) for a, b in coupling_map]
        self.num_qubits = num_qubits
        self.bidirectional = bidirectional
        self.name = name

    @classmethod
    def from_coupling_map(cls, coupling_map: list, bidirectional: bool=True):
        if len(coupling_map) == 0:
            raise EmptyCouplingMap()
        for q1, q2 in coupling_map:
            if q1 == q2:
                raise InvalidCoupling(q1, q2)
        max_qubit = max(max(q1, q2) for q1, q2 in coupling_map)
        return cls(coupling_map, max_qubit + 1, bidirectional)

    @classmethod
    def linear(cls, n: int):
        return cls([(i, i + 1) for i in range(max(n - 1, 0))], n, True, f"linear_{n}")

    @classmethod
    def ring(cls, n: int):
        coupling_map = [(i, i + 1) for i in range(max(n - 1, 0))]
        if n > 1:
            coupling_map.append((n - 1, 0))
        return cls(coupling_map, n, True, f"ring_{n}")

    @classmethod
    def grid(cls, rows: int, cols: int):
        coupling_map = []
        for r in range(rows):
            for c in range(cols):
                q = r * cols + c
                if c + 1 < cols:
                    coupling_map.append((q, q + 1))
                if r + 1 < rows:
                    coupling_map.append((q, q + cols))
        return cls(coupling_map, rows * cols, True, f"grid_{rows}x{cols}")

    @classmethod
    def heavy_hex(cls, layers: int):
        """ Simplified heavy-hex lattices: 7 qubits for one layer, 27 qubits for two, a linear chain otherwise. """
        if layers == 1:
            return cls([(0, 1), (1, 2), (1, 3), (3, 5), (4, 5), (5, 6)], 7, True, "heavy_hex_1")
        if layers == 2:
            return cls([(i, i + 1) for i in range(26) if i % 5 != 4], 27, True, "heavy_hex_2")
        return cls.linear(7 * layers)

    @classmethod
    def all_to_all(cls, n: int):
        coupling_map = [(i, j) for i in range(n) for j in range(i + 1, n)]
        return cls(coupling_map, n, True, f"all_to_all_{n}")

    @classmethod
    def from_qiskit(cls, coupling_map: CouplingMap):
        """ Directed topology from a Qiskit CouplingMap. """
        edges = [tuple(edge) for edge in coupling_map.get_edges()]
        topology = cls.from_coupling_map(edges, bidirectional=False)
        topology.num_qubits = max(topology.num_qubits, coupling_map.size())
        return topology

    def to_qiskit(self) -> CouplingMap:
        """ Qiskit CouplingMap for transpiling circuits onto this topology. """
        edges = list(self.coupling_map)
        if self.bidirectional:
            edges += [(b, a) for a, b in self.coupling_map]
        cmap = CouplingMap(edges)
        for q in range(cmap.size(), self.num_qubits):
            cmap.add_physical_qubit(q)
        return cmap

    def to_networkx(self):
        """ Graph of the topology, a DiGraph if the edges are directed. Every qubit is a node. """
        graph = nx.Graph() if self.bidirectional else nx.DiGraph()
        graph.add_nodes_from(range(self.num_qubits))
        graph.add_edges_from(self.coupling_map)
        return graph

    @property
    def num_edges(self) -> int:
        return len(self.coupling_map)

    def is_connected(self, q1: int, q2: int) -> bool:
        if q1 == q2:
            return True
        if (q1, q2) in self.coupling_map:
            return True
        return self.bidirectional and (q2, q1) in self.coupling_map

    def neighbors(self, qubit: int) -> list:
        graph = self.to_networkx()
        if qubit not in graph:
            return []
        return sorted(graph.neighbors(qubit))

    def degree(self, qubit: int) -> int:
        return len(self.neighbors(qubit))

    def shortest_path(self, start: int, end: int):
        """ Shortest path along the coupling map. Returns None if the qubits are not connected. """
        try:
            return nx.shortest_path(self.to_networkx(), start, end)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    def distance(self, q1: int, q2: int):
        try:
            return nx.shortest_path_length(self.to_networkx(), q1, q2)
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None

    def is_fully_connected(self) -> bool:
        """ Whether every qubit is reachable from qubit 0. """
        if self.num_qubits <= 1:
            return True
        graph = self.to_networkx()
        if self.bidirectional:
            return nx.is_connected(graph)
        return len(nx.descendants(graph, 0)) == self.num_qubits - 1

    def validate_circuit(self, circuit):
        """ Raises if the circuit is wider than the device or uses a two qubit gate on uncoupled qubits. """
        if circuit.num_qubits > self.num_qubits:
            raise QubitOutOfRange(circuit.num_qubits - 1, self.num_qubits - 1)
        for q1, q2 in circuit.two_qubit_pairs():
            if not self.is_connected(q1, q2):
                raise TopologyViolation(q1, q2)

    def diameter(self) -> int:
        """ Longest shortest path between qubits i < j, pairs without path are skipped. """
        lengths = dict(nx.all_pairs_shortest_path_length(self.to_networkx()))
        return max((d for i, row in lengths.items() for j, d in row.items() if i < j), default=0)

    def average_degree(self) -> float:
        if self.num_qubits == 0:
            return 0.0
        return sum(self.degree(q) for q in range(self.num_qubits)) / self.num_qubits

    def min_degree_qubits(self) -> list:
        if self.num_qubits == 0:
            return []
        degrees = [self.degree(q) for q in range(self.num_qubits)]
        min_degree = min(degrees)
        return [q for q, d in enumerate(degrees) if d == min_degree]

    def find_linear_chain(self, length: int):
        """ Greedy search for a path of the given length. Returns None if no start qubit yields one. """
        if length > self.num_qubits:
            return None
        if length <= 1:
            return [0]
        for start in range(self.num_qubits):
            chain = self._find_chain_from(start, length)
            if chain is not None:
                return chain
        return None

    def _find_chain_from(self, start: int, length: int):
        chain = [start]
        visited = {start}
        while len(chain) < length:
            candidates = [n for n in self.neighbors(chain[-1]) if n not in visited]
            if not candidates:
                return None
            chain.append(candidates[0])
            visited.add(candidates[0])
        return chain

    def __eq__(self, other):
        if not isinstance(other, Topology):
            return NotImplemented
        return (self.coupling_map, self.num_qubits, self.bidirectional) == \
            (other.coupling_map, other.num_qubits, other.bidirectional)

    def __str__(self):
        return f"Topology({self.name or 'custom'}, {self.num_qubits} qubits, {self.num_edges} edges)"
