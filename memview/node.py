import re
import logging

from .vectors import Vec2
from .relation import Relation

logger = logging.getLogger("memview")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_]")


def safe_id_filter(label):
    """Removes every character that is not a letter, a digit or '_'."""
    return _UNSAFE_CHARS.sub("", label)


class Node:
    def __init__(self, node_id, label, config, pos=None, selection=frozenset(), hovered=frozenset()):
        self._id = node_id
        self.label = label
        self.safe_label = safe_id_filter(label)
        self.config = config

        # Written by the producer sync, read by renderers.
        self.activity = 0.0

        self.mass = config.mass
        self.damping = config.damping
        self.charge = config.charge
        self.base_charge = config.charge
        self.pos = pos.copy() if pos is not None else Vec2()
        self.speed = Vec2()
        self.kinetic_energy = 0.0

        # Last forces computed for this node, kept for debug overlays
        self.hooke_force = Vec2()
        self.coulomb_force = Vec2()

        self.relations = []
        self.distance_to_selected = -1

        # Owned by the graph, only read here
        self._selection = selection
        self._hovered_ids = hovered

        self.decaying = False
        self.decay_time = 0.0
        self.decay_speed = 1.0
        self._tickled_charge = self.base_charge

    @property
    def id(self):
        return self._id

    def get_id(self):
        return self._id

    @property
    def selected(self):
        return self._id in self._selection

    @property
    def hovered(self):
        return self._id in self._hovered_ids

    def __lt__(self, other):
        return self._id < other.id

    def __repr__(self):
        return f"Node({self._id}, {self.label!r}, pos={self.pos})"

    # --- Relations ---

    def get_relations(self):
        return self.relations

    def add_relation(self, to, weight=None):
        """Adds a relation from this node to `to` and returns it.

        Nothing prevents several relations between the same two nodes.
        """
        rel = Relation(self._id, to.id, weight)
        self.relations.append(rel)
        return rel

    def connected_ids(self):
        """Ids of every node one relation away, without duplicates, in relation order."""
        seen = []
        for rel in self.relations:
            other = rel.other(self._id)
            if other not in seen:
                seen.append(other)
        return seen

    def is_connected_to(self, node):
        return any(rel.links(self._id, node.id) for rel in self.relations)

    def get_relation_to(self, node):
        """Returns every relation between this node and `node` (possibly empty)."""
        return [rel for rel in self.relations if rel.links(self._id, node.id)]

    # --- Physics ---

    def net_force(self, graph):
        self.coulomb_force = graph.coulomb_repulsion_for(self)
        self.hooke_force = graph.hooke_attraction_for(self)
        return self.coulomb_force + self.hooke_force + graph.gravity_for(self)

    def integrate(self, force, dt):
        """
        Moves the node according to the force applied on it during `dt`.

        Nodes whose kinetic energy stays under the configured threshold keep
        their speed but are not moved, which freezes residual jitter.
        """
        if dt == 0:
            return

        accel = force / self.mass
        self.speed = (self.speed + accel * dt) * self.damping

        max_speed = self.config.max_speed
        speed = self.speed.length()
        if speed > max_speed:
            self.speed = self.speed * (max_speed / speed)
            # rounding can leave the norm one ulp above the bound
            while self.speed.length() > max_speed:
                self.speed = self.speed * (1.0 - 2.0 ** -52)

        self.update_kinetic_energy()

        if self.kinetic_energy < self.config.min_kinetic_energy:
            return

        self.pos = self.pos + self.speed * dt

    def step(self, graph, dt):
        """Computes the forces applied on the node and moves it.

        Graph.step() does not use this: it computes every force before moving
        any node.
        """
        self.integrate(self.net_force(graph), dt)

    def update_kinetic_energy(self):
        self.kinetic_energy = 0.5 * self.mass * self.speed.length2()

    # --- Decay ---

    def tickle(self, boost=None, decay_speed=1.0):
        """Temporarily raises the charge of the node. decay() brings it back."""
        if boost is None:
            boost = self.config.tickle_charge
        self._tickled_charge = self.base_charge + boost
        self.charge = self._tickled_charge
        self.decay_time = 0.0
        self.decay_speed = decay_speed
        self.decaying = True

    def decay(self, dt):
        if not self.decaying:
            return

        self.decay_time += dt * self.decay_speed
        duration = self.config.decay_duration

        if self.decay_time >= duration:
            self.charge = self.base_charge
            self.decay_time = 0.0
            self.decaying = False
            return

        ratio = self.decay_time / duration
        self.charge = self._tickled_charge + (self.base_charge - self._tickled_charge) * ratio
