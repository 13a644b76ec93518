import unittest
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from memview.config import Config, PhysicsConfig, ViewConfig
from memview.network import MemoryNetwork
from memview.view import MemoryView, LEFT_BUTTON, RIGHT_BUTTON, HOVER_ACTIVATION_DURATION


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def make_view(names=("a", "b", "c"), clock=None, **view_kwargs):
    network = MemoryNetwork(names, clock=clock or FakeClock())
    config = Config(PhysicsConfig(seed=11), ViewConfig(**view_kwargs))
    return MemoryView(network, config), network


class TestNetworkSync(unittest.TestCase):
    def test_init_builds_full_mesh(self):
        view, _ = make_view()
        view.update_from_network()
        g = view.graph
        self.assertEqual(g.nodes_count(), 3)
        self.assertEqual(g.edges_count(), 3)
        self.assertEqual([g.get_node(i).label for i in range(3)], ["a", "b", "c"])

    def test_activations_and_weights_are_copied(self):
        view, network = make_view()
        network.activate_unit("b", 0.25)
        network.set_weight(0, 2, 0.8)
        view.update_from_network()
        g = view.graph
        self.assertEqual(g.get_node(1).activity, 0.25)
        self.assertEqual(g.get_node(0).activity, 0.0)
        self.assertEqual(g.get_edge(g.get_node(2), g.get_node(0)).weight, 0.8)
        self.assertEqual(g.get_edge(g.get_node(0), g.get_node(1)).weight, 0.0)

    def test_graph_grows_with_network(self):
        view, network = make_view()
        view.update_from_network()
        first = view.graph.get_node(0)

        network.add_unit("d")
        network.set_weight("d", "a", 0.5)
        view.update_from_network()

        g = view.graph
        self.assertEqual(g.nodes_count(), 4)
        self.assertEqual(g.edges_count(), 6)
        self.assertIs(g.get_node(0), first)
        self.assertEqual(g.get_edge(g.get_node(3), first).weight, 0.5)

    def test_sync_is_idempotent(self):
        view, _ = make_view()
        view.update_from_network()
        view.update_from_network()
        self.assertEqual(view.graph.nodes_count(), 3)
        self.assertEqual(view.graph.edges_count(), 3)

    def test_activation_tickles_node(self):
        view, network = make_view(tickle_threshold=0.5)
        view.update_from_network()
        node = view.graph.get_node(0)

        network.activate_unit(0, 0.3)
        view.update_from_network()
        self.assertFalse(node.decaying)

        network.activate_unit(0, 0.9)
        view.update_from_network()
        self.assertTrue(node.decaying)
        self.assertGreater(node.charge, node.base_charge)


class TestFrameLoop(unittest.TestCase):
    def test_dt_is_clamped(self):
        view, _ = make_view()
        view.update(1.0)
        self.assertAlmostEqual(view.runtime, 1.0 / 60.0)
        self.assertEqual(view.framecount, 1)
        self.assertEqual(view.graph.nodes_count(), 3)

    def test_time_scale(self):
        view, _ = make_view(time_scale=0.5)
        view.update(0.01)
        self.assertAlmostEqual(view.runtime, 0.005)

    def test_pause(self):
        view, _ = make_view()
        view.toggle_pause()
        view.update(0.01)
        self.assertEqual(view.graph.nodes_count(), 0)
        self.assertAlmostEqual(view.runtime, 0.01)

        view.toggle_pause()
        view.update(0.01)
        self.assertEqual(view.graph.nodes_count(), 3)

    def test_activate_on_hover(self):
        view, network = make_view(activate_on_hover=True)
        view.update_from_network()
        view.hover(view.graph.get_node(1))
        view.update(0.01)
        self.assertEqual(network.activations()[1], 1.0)
        self.assertEqual(view.graph.get_node(1).activity, 1.0)

    def test_hover_activation_is_released(self):
        clock = FakeClock()
        view, network = make_view(clock=clock, activate_on_hover=True)
        view.update_from_network()
        view.hover(view.graph.get_node(1))

        # renewed on every frame while the node stays hovered
        for _ in range(5):
            view.update(0.01)
            clock.now += HOVER_ACTIVATION_DURATION / 2
        self.assertEqual(network.activations()[1], 1.0)

        view.hover(None)
        clock.now += HOVER_ACTIVATION_DURATION
        view.update(0.01)
        self.assertEqual(network.activations()[1], 0.0)
        self.assertEqual(view.graph.get_node(1).activity, 0.0)

    def test_hover_without_activation_mode(self):
        view, network = make_view()
        view.update_from_network()
        view.hover(view.graph.get_node(1))
        view.update(0.01)
        self.assertEqual(network.activations()[1], 0.0)

    def test_history_is_recorded(self):
        view, network = make_view()
        network.activate_unit(2, 0.7)
        view.update(0.01)
        self.assertEqual(view.history.get(2), [0.7])


class TestPicking(unittest.TestCase):
    def setUp(self):
        self.view, _ = make_view()
        self.view.update_from_network()
        self.a, self.b, self.c = (self.view.graph.get_node(i) for i in range(3))

    def test_left_click_toggles(self):
        self.view.on_pick(self.a, LEFT_BUTTON)
        self.view.on_pick(self.b, LEFT_BUTTON)
        self.assertEqual(self.view.graph.get_all_selected(), {self.a, self.b})
        self.view.on_pick(self.a, LEFT_BUTTON)
        self.assertEqual(self.view.graph.get_all_selected(), {self.b})

    def test_click_on_background_clears(self):
        self.view.on_pick(self.a)
        self.view.on_pick(None)
        self.assertIsNone(self.view.graph.get_selected())

    def test_right_click_clears(self):
        self.view.on_pick(self.a)
        self.view.on_pick(self.b, RIGHT_BUTTON)
        self.assertEqual(self.view.graph.get_all_selected(), set())

    def test_select_node_is_exclusive(self):
        self.view.add_selected_node(self.a)
        self.view.add_selected_node(self.b)
        self.view.select_node(self.c)
        self.assertEqual(self.view.graph.get_all_selected(), {self.c})
        self.view.select_node(self.c)
        self.assertTrue(self.c.selected)


class TestRandomNodes(unittest.TestCase):
    def test_add_random_nodes(self):
        view, _ = make_view(names=())
        view.add_random_nodes(5, 2)
        g = view.graph
        self.assertEqual(g.nodes_count(), 5)
        # every node but the first one is linked to an existing neighbour
        for i in range(1, 5):
            self.assertTrue(g.get_edges_for(g.get_node(i)))
        for node in g.get_nodes().values():
            self.assertEqual(len(node.label), 6)
            self.assertTrue(node.label.islower())


if __name__ == '__main__':
    unittest.main()
