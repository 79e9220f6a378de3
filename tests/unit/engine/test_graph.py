"""Tests for dependency graph construction and traversal order."""

from rebaser.core.engine.graph import build_graph, traversal_order
from tests.test_utils.stacks import change_request


def test_build_graph_groups_by_base_in_listing_order() -> None:
    a = change_request(1, "feat/a", "main")
    b = change_request(2, "feat/b", "feat/a")
    c = change_request(3, "feat/c", "main")

    graph = build_graph([a, b, c])

    assert graph == {"main": [a, c], "feat/a": [b]}


def test_build_graph_of_nothing_is_empty() -> None:
    assert build_graph([]) == {}


def test_traversal_is_depth_first_pre_order() -> None:
    a = change_request(1, "a", "main")
    a1 = change_request(2, "a1", "a")
    a1x = change_request(3, "a1x", "a1")
    a2 = change_request(4, "a2", "a")
    b = change_request(5, "b", "main")

    order = traversal_order(build_graph([a, a1, a1x, a2, b]), "main")

    assert [cr.head_branch for cr in order] == ["a", "a1", "a1x", "a2", "b"]


def test_traversal_skips_change_requests_not_reachable_from_root() -> None:
    a = change_request(1, "a", "main")
    orphan = change_request(2, "orphan", "release")

    order = traversal_order(build_graph([a, orphan]), "main")

    assert order == [a]


def test_traversal_terminates_on_cycle() -> None:
    a = change_request(1, "a", "main")
    b = change_request(2, "b", "a")
    back = change_request(3, "a", "b")

    order = traversal_order(build_graph([a, b, back]), "main")

    assert order == [a, b]


def test_traversal_handles_deep_stacks() -> None:
    requests = [change_request(1, "b1", "main")]
    requests += [change_request(i, f"b{i}", f"b{i - 1}") for i in range(2, 5001)]

    order = traversal_order(build_graph(requests), "main")

    assert len(order) == 5000
    assert order[-1].head_branch == "b5000"
