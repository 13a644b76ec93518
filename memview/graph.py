import random
import logging
from collections import deque
from types import MappingProxyType

from .config import PhysicsConfig
from .edge import Edge, pair_key
from .exceptions import NodeNotFoundError
from .node import Node
from .vectors import Vec2

logger = logging.getLogger("memview")


class Graph:
    """Nodes, edges and selection of the memory network, plus the force simulation.

    Nodes and edges are only ever added. Nodes are stored by id and edges
    refer to their endpoints by id.
    """

    def __init__(self, config=None):
        self.config = config or PhysicsConfig()
        self.rng = random.Random(self.config.seed)

        self.nodes = {}
        self.edges = []

        # pair key -> Edge, and node id -> incident edges
        self._edge_index = {}
        self._incident = {}

        # Ids of the selected nodes. Nodes hold a reference to this set to
        # answer `selected`; only select/deselect/clear_select write it.
        self._selected = set()
        # Holds at most one id, shared with nodes the same way
        self._hovered = set()

    # --- Nodes ---

    def get_nodes(self):
        """Read-only view of the nodes, by id."""
        return MappingProxyType(self.nodes)

    def get_node(self, node_id):
        """Returns a node by its id. Raises NodeNotFoundError if it doesn't exist."""
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NodeNotFoundError(node_id) from None

    get_const_node = get_node

    def get_random_node(self):
        """Returns a random node, or None if the graph is empty."""
        if not self.nodes:
            return None
        return self.nodes[self.rng.choice(list(self.nodes))]

    def add_node(self, node_id, label, neighbour=None):
        """
        Adds a new node to the graph (if it doesn't exist yet) and returns it.

        Args:
            node_id (int): Id of the node. Ids are never reused.
            label (str): Human readable name.
            neighbour (Node): If given, the new node spawns close to it.
        """
        existing = self.nodes.get(node_id)
        if existing is not None:
            return existing

        if neighbour is not None:
            r = self.config.neighbour_spawn_radius
            pos = neighbour.pos + Vec2(self.rng.uniform(-r, r), self.rng.uniform(-r, r))
        else:
            r = self.config.spawn_radius
            pos = Vec2(self.rng.uniform(-r, r), self.rng.uniform(-r, r))

        node = Node(node_id, label, self.config, pos=pos,
                    selection=self._selected, hovered=self._hovered)
        self.nodes[node_id] = node
        self._incident[node_id] = []
        logger.debug(f"Added node {node_id} ({label}) at {pos}")
        return node

    def nodes_count(self):
        return len(self.nodes)

    def get_connected_nodes(self, node):
        return [self.nodes[i] for i in node.connected_ids()]

    # --- Edges ---

    def add_edge(self, from_node, to_node):
        """
        Adds an edge between the two nodes (if it doesn't exist yet) and returns it.

        The edge keeps the relation created on `from_node` (and shared with
        `to_node`).
        """
        edge = self.get_edge(from_node, to_node)
        if edge is not None:
            return edge

        if from_node.id == to_node.id:
            logger.warning(f"Adding a self-edge on node {from_node.id}")

        rel = from_node.add_relation(to_node)
        if to_node is not from_node:
            to_node.relations.append(rel)

        edge = Edge(from_node.id, to_node.id, rel)
        self.edges.append(edge)
        self._edge_index[edge.key()] = edge
        self._incident[from_node.id].append(edge)
        if not edge.is_loop():
            self._incident[to_node.id].append(edge)
        return edge

    def get_edge(self, node1, node2):
        return self._edge_index.get(pair_key(node1.id, node2.id))

    def get_edges_for(self, node):
        return list(self._incident.get(node.id, ()))

    def get_edges(self):
        return self.edges

    def edges_count(self):
        return len(self.edges)

    # --- Selection ---

    def select(self, node):
        self._selected.add(node.id)

    def deselect(self, node):
        self._selected.discard(node.id)

    def clear_select(self):
        self._selected.clear()

    def is_selected(self, node):
        return node.id in self._selected

    def get_selected(self):
        """Returns a selected node (any of them if several are), or None."""
        for node_id in self._selected:
            return self.nodes[node_id]
        return None

    def get_all_selected(self):
        return {self.nodes[i] for i in self._selected}

    def hover(self, node):
        """Marks `node` as hovered (None to clear)."""
        self._hovered.clear()
        if node is not None:
            self._hovered.add(node.id)

    def get_hovered(self):
        for node_id in self._hovered:
            return self.nodes[node_id]
        return None

    # --- Simulation ---

    def update_distances(self):
        """Computes for each node the number of hops to the closest selected node.

        Nodes not connected to any selected node (or every node, if nothing is
        selected) get -1.
        """
        for node in self.nodes.values():
            node.distance_to_selected = -1

        queue = deque()
        for node_id in self._selected:
            self.nodes[node_id].distance_to_selected = 0
            queue.append(node_id)

        while queue:
            node = self.nodes[queue.popleft()]
            for other_id in node.connected_ids():
                other = self.nodes[other_id]
                if other.distance_to_selected == -1:
                    other.distance_to_selected = node.distance_to_selected + 1
                    queue.append(other_id)

    def step(self, dt):
        """
        Executes one simulation step of `dt` seconds.

        Every force is computed before any node moves so the result does not
        depend on iteration order.
        """
        if dt < 0:
            raise ValueError(f"Simulation step must be positive (got dt={dt}).")
        if dt == 0:
            return

        forces = [(node, node.net_force(self)) for node in self.nodes.values()]

        for node, force in forces:
            node.integrate(force, dt)

        for node in self.nodes.values():
            node.decay(dt)

        self.update_distances()

    # --- Forces ---

    def project(self, force, d):
        """Returns a vector of norm `force` along `d`."""
        return d.normalize() * force

    def coulomb_repulsion_for(self, node):
        force = Vec2()
        k = self.config.coulomb_constant
        min_d = self.config.min_distance

        for other in self.nodes.values():
            if other is node:
                continue

            d = node.pos - other.pos
            if d.is_null():
                # Same position: push the two nodes apart along x
                d = Vec2(-1.0, 0.0) if node.id < other.id else Vec2(1.0, 0.0)

            dist = max(d.length(), min_d)
            force = force + self.project(k * node.charge * other.charge / (dist * dist), d)

        return force

    def coulomb_repulsion_at(self, pos):
        """Repulsion felt by a unit charge located at `pos`."""
        force = Vec2()
        k = self.config.coulomb_constant
        min_d = self.config.min_distance

        for other in self.nodes.values():
            d = pos - other.pos
            if d.is_null():
                continue
            dist = max(d.length(), min_d)
            force = force + self.project(k * other.charge / (dist * dist), d)

        return force

    def hooke_attraction_for(self, node):
        force = Vec2()
        k = self.config.spring_constant
        nominal = self.config.nominal_edge_length

        for edge in self._incident.get(node.id, ()):
            if edge.is_loop():
                continue
            other = self.nodes[edge.other(node.id)]
            d = other.pos - node.pos
            length = d.length()
            if length == 0.0:
                continue
            # stretched: pulls towards the other node; compressed: pushes away
            force = force + self.project(k * (length - nominal), d)

        return force

    def gravity_for(self, node):
        """'Pseudo' gravity attracting selected nodes towards the origin."""
        if not self.is_selected(node) or node.pos.is_null():
            return Vec2()
        return self.project(self.config.gravity_constant, -node.pos)
