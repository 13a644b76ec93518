import string
import logging

from .config import Config
from .graph import Graph
from .history import ActivityHistory

logger = logging.getLogger("memview")

LEFT_BUTTON = "left"
RIGHT_BUTTON = "right"

# Seconds a hovered unit stays active after the last frame that saw it hovered
HOVER_ACTIVATION_DURATION = 0.04


class MemoryView:
    """
    Frame controller of the memory network view.

    Keeps the graph in sync with the memory network and steps the simulation
    once per frame. Drawing and hit-testing belong to the renderer, which
    reports picks through on_pick() and hover().
    """

    def __init__(self, network, config=None):
        self.config = config or Config()
        self.network = network
        self.graph = Graph(self.config.physics)
        self.history = ActivityHistory()

        self.time_scale = self.config.view.time_scale
        self.max_tick_rate = self.config.view.max_tick_rate
        self.activate_on_hover = self.config.view.activate_on_hover
        self.paused = False

        self.runtime = 0.0
        self.framecount = 0

    # --- Main loop ---

    def update(self, dt):
        """Advances the view by one frame of (wall-clock) duration `dt`."""
        dt = min(dt, self.max_tick_rate) * self.time_scale

        # runtime is managed here since dt is clamped and scaled
        self.runtime += dt
        self.framecount += 1

        self.history.record(self.runtime, self.network.activations())

        if self.paused:
            return

        hovered = self.graph.get_hovered()
        if hovered is not None and self.activate_on_hover and hovered.id < self.network.size():
            self.network.activate_unit(hovered.id, 1.0, duration=HOVER_ACTIVATION_DURATION)

        self.update_from_network()
        self.graph.step(dt)

    def toggle_pause(self):
        self.paused = not self.paused
        logger.info("Simulation paused" if self.paused else "Simulation resumed")

    # --- Memory network sync ---

    def init_from_network(self):
        names = self.network.units_names()
        for i, name in enumerate(names):
            self.graph.add_node(i, name)

        for i in range(len(names) - 1):
            for j in range(i + 1, len(names)):
                self.graph.add_edge(self.graph.get_node(i), self.graph.get_node(j))

        logger.info(f"Graph synced with memory network: {self.graph.nodes_count()} nodes, "
                    f"{self.graph.edges_count()} edges")

    def update_from_network(self):
        size = self.network.size()
        if size > self.graph.nodes_count():
            self.init_from_network()

        threshold = self.config.view.tickle_threshold
        for i, level in enumerate(self.network.activations()):
            node = self.graph.get_node(i)
            if node.activity < threshold <= level:
                node.tickle()
            node.activity = level

        for edge in self.graph.get_edges():
            if edge.id1 < size and edge.id2 < size:
                edge.set_weight(self.network.weight(edge.id1, edge.id2))

    # --- Selection ---

    def select_node(self, node):
        """Selects `node` and deselects every other node."""
        if node.selected:
            return
        self.graph.clear_select()
        self.graph.select(node)

    def add_selected_node(self, node):
        """Toggles the selection of `node`, keeping the current selection."""
        if node.selected:
            self.graph.deselect(node)
        else:
            self.graph.select(node)

    def on_pick(self, node, button=LEFT_BUTTON):
        """
        Applies a click reported by the renderer.

        Args:
            node (Node): The node under the mouse, or None for the background.
            button (str): LEFT_BUTTON or RIGHT_BUTTON.
        """
        if button == RIGHT_BUTTON or node is None:
            self.graph.clear_select()
            return
        self.add_selected_node(node)

    def hover(self, node):
        self.graph.hover(node)

    # --- Testing ---

    def add_random_nodes(self, amount, nb_rel):
        """Grows the graph with `amount` random nodes, each with up to `nb_rel` edges."""
        rng = self.graph.rng
        for _ in range(amount):
            label = "".join(rng.choice(string.ascii_lowercase) for _ in range(6))
            neighbour = self.graph.get_random_node()

            node = self.graph.add_node(self.graph.nodes_count(), label, neighbour)

            if neighbour is not None:
                self.graph.add_edge(node, neighbour)

            for _ in range(nb_rel - 1):
                # may pick the node itself
                self.graph.add_edge(node, self.graph.get_random_node())
