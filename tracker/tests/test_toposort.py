from collections import namedtuple

from django.test import SimpleTestCase

from tracker.migration.toposort import parents_first

Node = namedtuple('Node', 'id parent')


def _order(nodes):
    return [node.id for node in parents_first(nodes, get_id=lambda n: n.id, get_parent=lambda n: n.parent)]


class ParentsFirstTests(SimpleTestCase):

    def assertParentsFirst(self, nodes):
        ordered = _order(nodes)
        self.assertCountEqual(ordered, [node.id for node in nodes])
        ids = {node.id for node in nodes}
        for node in nodes:
            if node.parent and node.parent in ids:
                self.assertLess(ordered.index(node.parent), ordered.index(node.id))
        return ordered

    def test_children_listed_before_parents(self):
        """Test that a child appearing before its parent is moved after it."""
        nodes = [Node(3, 2), Node(2, 1), Node(1, 0), Node(4, 1)]
        ordered = self.assertParentsFirst(nodes)
        self.assertEqual(ordered[0], 1)

    def test_dangling_parent_is_a_root(self):
        nodes = [Node(5, 99), Node(6, 5)]
        self.assertEqual(self.assertParentsFirst(nodes), [5, 6])

    def test_cycle_is_appended_in_input_order(self):
        """Test that cyclic nodes are kept and appended after the placed ones."""
        nodes = [Node(1, 0), Node(2, 3), Node(3, 2), Node(4, 1)]
        with self.assertLogs('tracker', level='WARNING') as logs:
            ordered = _order(nodes)
        self.assertEqual(ordered, [1, 4, 2, 3])
        self.assertEqual(len(logs.output), 2)

    def test_deep_chain_in_reverse_order(self):
        nodes = [Node(i, i - 1) for i in range(10, 0, -1)]
        self.assertEqual(self.assertParentsFirst(nodes), list(range(1, 11)))

    def test_empty_input(self):
        self.assertEqual(_order([]), [])
