class Edge:
    """Undirected weighted link between two nodes of the graph.

    The weight is written by the producer sync every tick. The edge keeps the
    relation that created it.
    """

    def __init__(self, id1, id2, relation, weight=0.0):
        self.id1 = id1
        self.id2 = id2
        self.relation = relation
        self.weight = weight

    def get_id1(self):
        return self.id1

    def get_id2(self):
        return self.id2

    def set_weight(self, weight):
        self.weight = weight

    def key(self):
        return pair_key(self.id1, self.id2)

    def touches(self, node_id):
        return node_id == self.id1 or node_id == self.id2

    def other(self, node_id):
        return self.id2 if node_id == self.id1 else self.id1

    def is_loop(self):
        return self.id1 == self.id2

    def __repr__(self):
        return f"Edge({self.id1} -- {self.id2}, w={self.weight:.3f})"


def pair_key(id1, id2):
    """Order-independent key of a node pair."""
    return (id1, id2) if id1 <= id2 else (id2, id1)
