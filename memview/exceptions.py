class MemoryViewError(RuntimeError):
    """Generic error raised by the memory view core."""

    def __init__(self, msg="A generic exception has been thrown in memory view."):
        super().__init__(msg)


class NodeNotFoundError(MemoryViewError):
    """Raised when a node id is looked up but the graph has no such node."""

    def __init__(self, node_id):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")
