class Relation:
    """A directed annotation between two nodes, referenced by id.

    Several relations may link the same pair of nodes: relations are
    annotations, the simulation only sees edges.
    """

    def __init__(self, source, target, weight=None):
        self.source = source
        self.target = target
        self.weight = weight

    def involves(self, node_id):
        return node_id in (self.source, self.target)

    def other(self, node_id):
        """Returns the id at the other end of the relation."""
        return self.target if node_id == self.source else self.source

    def links(self, id1, id2):
        return (self.source, self.target) in ((id1, id2), (id2, id1))

    def __repr__(self):
        return f"Relation({self.source} -> {self.target})"
