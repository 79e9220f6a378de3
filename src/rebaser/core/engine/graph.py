"""Group change requests by the branch they target."""

from rebaser.core.github.types import ChangeRequest

DependencyGraph = dict[str, list[ChangeRequest]]


def build_graph(change_requests: list[ChangeRequest]) -> DependencyGraph:
    """Map each base branch to the change requests targeting it.

    Order within a group follows the order of ``change_requests``.
    """
    graph: DependencyGraph = {}
    for change_request in change_requests:
        graph.setdefault(change_request.base_branch, []).append(change_request)
    return graph


def traversal_order(graph: DependencyGraph, root: str) -> list[ChangeRequest]:
    """Depth-first pre-order of the change requests reachable from root.

    This is the order the propagator visits change requests when no rebase
    fails. Each branch is expanded at most once.

    Examples:
        >>> a = ChangeRequest(1, "A", "feat/a", "main", "me")
        >>> b = ChangeRequest(2, "B", "feat/b", "feat/a", "me")
        >>> c = ChangeRequest(3, "C", "feat/c", "main", "me")
        >>> [cr.number for cr in traversal_order(build_graph([a, b, c]), "main")]
        [1, 2, 3]
    """
    order: list[ChangeRequest] = []
    visited = {root}
    stack = list(reversed(graph.get(root, [])))
    while stack:
        change_request = stack.pop()
        head = change_request.head_branch
        if head in visited:
            continue
        visited.add(head)
        order.append(change_request)
        stack.extend(reversed(graph.get(head, [])))
    return order
