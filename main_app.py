#!/usr/bin/env python3
import sys
import time
import random
import logging
import argparse

from memview.config import load_config
from memview.exceptions import NodeNotFoundError
from memview.network import MemoryNetwork
from memview.view import MemoryView

logger = logging.getLogger("memview")


def build_demo_network(units, seed=None):
    """Creates a network of `units` units with random symmetric weights."""
    rng = random.Random(seed)
    network = MemoryNetwork(f"unit{i}" for i in range(units))
    for i in range(units - 1):
        for j in range(i + 1, units):
            network.set_weight(i, j, rng.uniform(-0.2, 1.0))
    return network, rng


def run(view, rng, frames, realtime=False):
    last = time.monotonic()
    for frame in range(frames):
        if realtime:
            now = time.monotonic()
            dt = now - last
            last = now
            time.sleep(0.02)
        else:
            dt = view.max_tick_rate

        # Occasional stimulus so some nodes get tickled
        if frame % 30 == 0 and view.network.size():
            unit = rng.randrange(view.network.size())
            view.network.activate_unit(unit, rng.uniform(0.5, 1.0))

        view.update(dt)

    energy = sum(n.kinetic_energy for n in view.graph.get_nodes().values())
    logger.info(f"Ran {view.framecount} frames ({view.runtime:.2f}s simulated), "
                f"total kinetic energy {energy:.2f}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Headless memory network view simulation")
    parser.add_argument("-c", "--config", help="JSON config file (default: $MEMVIEW_CONFIG)")
    parser.add_argument("-n", "--units", type=int, default=10, help="Number of units in the demo network")
    parser.add_argument("-f", "--frames", type=int, default=600, help="Number of frames to simulate")
    parser.add_argument("--select", type=int, action="append", default=[], help="Id of a node to select")
    parser.add_argument("--realtime", action="store_true", help="Use wall-clock time between frames")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as e:
        print(f"ERROR: could not load config: {e}", file=sys.stderr)
        return 1

    logger.info(f"Starting simulation of {args.units} units for {args.frames} frames "
                f"(config: {config.source or 'defaults'})")

    network, rng = build_demo_network(args.units, seed=config.physics.seed)
    view = MemoryView(network, config)
    view.update_from_network()

    for node_id in args.select:
        try:
            view.add_selected_node(view.graph.get_node(node_id))
        except NodeNotFoundError as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    run(view, rng, args.frames, realtime=args.realtime)

    for node in sorted(view.graph.get_nodes().values()):
        print(f"{node.label:>10}  pos=({node.pos.x:8.2f}, {node.pos.y:8.2f})  "
              f"activity={node.activity:.3f}  distance={node.distance_to_selected}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
