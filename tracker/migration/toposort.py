import logging

logger = logging.getLogger('tracker')


def parents_first(nodes, get_id, get_parent):
    """
    Order ``nodes`` so that every node comes after its parent.

    Nodes whose parent is 0/None or not among the input are roots. Each pass
    places the nodes whose parent is already placed; passes are bounded by
    the input size, and anything left over (cycles) is appended in input
    order as a root.
    """
    nodes = list(nodes)
    ids = {get_id(node) for node in nodes}
    placed_ids = set()
    placed = [False] * len(nodes)
    ordered = []

    def place(index):
        placed[index] = True
        placed_ids.add(get_id(nodes[index]))
        ordered.append(nodes[index])

    for index, node in enumerate(nodes):
        parent = get_parent(node)
        if not parent or parent not in ids:
            place(index)

    for _ in range(len(nodes)):
        if len(ordered) == len(nodes):
            break
        progressed = False
        for index, node in enumerate(nodes):
            if not placed[index] and get_parent(node) in placed_ids:
                place(index)
                progressed = True
        if not progressed:
            break

    for index, node in enumerate(nodes):
        if not placed[index]:
            logger.warning(
                f"Node {get_id(node)} has unresolvable parent {get_parent(node)}; treating it as a root"
            )
            place(index)

    return ordered
