import pytest

from infernograd.engine import (
    AccumulateGrad,
    Edge,
    Engine,
    Node,
    is_grad_enabled,
    no_grad,
)


class Leaf:
    def __init__(self):
        self.grad = None


class PassNode(Node):
    """Sends its incoming gradient, scaled, to each parent."""

    def __init__(self, *parents, scale=1):
        self._parents = list(parents)
        self.scale = scale
        self.released = False
        self.received = None

    def backward(self):
        g = Engine.grad_in(self, 0)
        self.received = g
        for p in self._parents:
            if p is not None:
                Engine.accumulate(p, 0, g * self.scale)

    def release(self):
        self.released = True

    def parents(self):
        return self._parents


class RecordingGrad:
    def __init__(self, value, log):
        self.value = value
        self.log = log

    def __add__(self, other):
        self.log.append(is_grad_enabled())
        return RecordingGrad(self.value + other.value, self.log)

    def __mul__(self, k):
        return RecordingGrad(self.value * k, self.log)


def test_no_grad_restores_state():
    assert is_grad_enabled() is True
    with no_grad():
        assert is_grad_enabled() is False
        with no_grad():
            assert is_grad_enabled() is False
        assert is_grad_enabled() is False
    assert is_grad_enabled() is True


def test_no_grad_restores_on_exception():
    with pytest.raises(KeyError):
        with no_grad():
            raise KeyError("x")
    assert is_grad_enabled() is True


def test_edge_equality_by_node_identity_and_slot():
    a = AccumulateGrad(Leaf())
    b = AccumulateGrad(Leaf())
    assert Edge(a, 0) == Edge(a, 0)
    assert hash(Edge(a, 0)) == hash(Edge(a, 0))
    assert Edge(a, 0) != Edge(a, 1)
    assert Edge(a, 0) != Edge(b, 0)


def test_grad_in_outside_backward_is_none():
    node = AccumulateGrad(Leaf())
    Engine.accumulate(node, 0, 5.0)
    assert Engine.grad_in(node, 0) is None


def test_backward_single_leaf_default_seed():
    leaf = Leaf()
    acc = AccumulateGrad(leaf)
    Engine.backward(acc)
    assert leaf.grad == 1.0


def test_backward_chain_with_seed():
    leaf = Leaf()
    acc = AccumulateGrad(leaf)
    root = PassNode(acc, scale=3)
    Engine.backward(root, 2)
    assert root.received == 2
    assert leaf.grad == 6


def test_diamond_gradients_are_summed():
    leaf = Leaf()
    acc = AccumulateGrad(leaf)
    left = PassNode(acc, scale=2)
    right = PassNode(acc, scale=5)
    root = PassNode(left, right)
    Engine.backward(root, 1)
    assert leaf.grad == 7


def test_untracked_parent_is_skipped():
    leaf = Leaf()
    acc = AccumulateGrad(leaf)
    root = PassNode(None, acc)
    Engine.backward(root, 4)
    assert leaf.grad == 4


def test_build_topo_orders_parents_first_and_once():
    acc = AccumulateGrad(Leaf())
    left = PassNode(acc)
    right = PassNode(acc, left)
    root = PassNode(left, right)
    topo = Engine.build_topo(root)
    assert len(topo) == 4
    assert len({id(n) for n in topo}) == 4
    assert topo[-1] is root
    pos = {id(n): i for i, n in enumerate(topo)}
    for n in topo:
        for p in n.parents():
            if p is not None:
                assert pos[id(p)] < pos[id(n)]


def test_build_topo_none_is_empty():
    assert Engine.build_topo(None) == []


def test_build_topo_deep_chain():
    node = AccumulateGrad(Leaf())
    for _ in range(5000):
        node = PassNode(node)
    topo = Engine.build_topo(node)
    assert len(topo) == 5001
    assert topo[-1] is node
    assert isinstance(topo[0], AccumulateGrad)


def test_backward_none_root_raises():
    with pytest.raises(ValueError):
        Engine.backward(None)


def test_nodes_released_and_map_cleared_after_backward():
    acc = AccumulateGrad(Leaf())
    mid = PassNode(acc)
    root = PassNode(mid)
    Engine.backward(root, 1)
    assert mid.released and root.released
    assert Engine.grad_in(root, 0) is None


def test_accumulate_runs_without_grad_tracking():
    log = []
    leaf = Leaf()
    acc = AccumulateGrad(leaf)
    root = PassNode(PassNode(acc), PassNode(acc))
    Engine.backward(root, RecordingGrad(3, log))
    assert leaf.grad.value == 6
    assert log == [False]
    assert is_grad_enabled() is True


def test_dead_leaf_is_ignored():
    kept = Leaf()
    gone = Leaf()
    acc_kept = AccumulateGrad(kept)
    acc_gone = AccumulateGrad(gone)
    del gone
    assert acc_gone.leaf is None
    root = PassNode(acc_kept, acc_gone)
    Engine.backward(root, 9)
    assert kept.grad == 9


def test_accumulate_grad_has_no_parents():
    acc = AccumulateGrad(Leaf())
    assert list(acc.parents()) == []


def test_node_is_abstract():
    with pytest.raises(TypeError):
        Node()