import pytest
import random
from hypothesis import given, strategies as st
from tqdm.auto import trange
from augtree import AugmentedAVLTree, Augmentation, Propagation, SubtreeSize, Entry, InvariantViolation
from augtree.avl import get_property

class LeafCount(Augmentation[int, int]):
    """Counts the leaves of every subtree. A property search for k finds the k-th leaf in key order."""
    def default_property(self):
        return 0

    def augment(self, left, right):
        return max(left + right, 1)

    def property_search(self, node, target):
        if node.is_leaf():
            return Propagation.stop(target) if target == 1 else Propagation.right(target - 1)
        left = get_property(node.left, self)
        if target <= left:
            return Propagation.left(target)
        return Propagation.right(target - left)

def height(node):
    if node is None:
        return 0
    return 1 + max(height(node.left), height(node.right))

def size(node):
    if node is None:
        return 0
    return 1 + size(node.left) + size(node.right)

def check_node(node):
    if node is None:
        return
    assert node.property == size(node)
    assert node.height == height(node)
    assert abs(height(node.left) - height(node.right)) <= 1
    check_node(node.left)
    check_node(node.right)

def check_tree(tree):
    check_node(tree.root)
    keys = [k for k, _ in tree.flatten()]
    assert keys == sorted(keys)

def make_tree(keys, aug=None):
    tree = AugmentedAVLTree(aug if aug is not None else SubtreeSize())
    for k in keys:
        tree.insert(k, f"v{k}")
    return tree

def test_avl():
    random.seed(42)
    for _ in trange(50):
        seq = []
        tree = make_tree([])
        model = []
        for _ in range(random.randint(100, 300)):
            action = random.choice(["insert", "delete", "get", "search"])
            if model and action == "delete":
                x = random.choice(model)
                deleted = tree.delete_by_key(x)
                assert deleted is not None and deleted.key == x
                model.remove(x)
                seq.append(f"delete({x})")

            if action == "insert":
                x = random.randint(0, 100)
                tree.insert(x, f"v{x}")
                model.append(x)
                seq.append(f"insert({x})")

            if model and action == "get":
                x = random.randint(0, len(model) - 1)
                node = tree.search_by_property(x + 1)
                assert node is not None and node.key == sorted(model)[x], seq
                seq.append(f"get({x})")

            if action == "search":
                x = random.randint(0, 100)
                node = tree.search_by_key(x)
                assert (node is not None) == (x in model), seq
            check_tree(tree)
        assert sorted(model) == [k for k, _ in tree.flatten()], seq

def test_single_left_rotation():
    tree = make_tree([1, 2, 3])
    assert tree.root.key == 2
    assert tree.root.left.key == 1
    assert tree.root.right.key == 3
    assert tree.root.property == 3
    assert tree.height == 2

def test_double_right_rotation():
    tree = make_tree([3, 1, 2])
    assert tree.root.key == 2
    assert (tree.root.left.key, tree.root.right.key) == (1, 3)
    check_tree(tree)

def test_double_left_rotation():
    tree = make_tree([1, 3, 2])
    assert tree.root.key == 2
    assert (tree.root.left.key, tree.root.right.key) == (1, 3)
    check_tree(tree)

def test_duplicate_keys_keep_insertion_order():
    tree = AugmentedAVLTree(SubtreeSize())
    for key, value in [(1, "a"), (1, "b"), (0, "c"), (1, "d"), (2, "e"), (1, "f")]:
        tree.insert(key, value)
    assert tree.flatten() == [(0, "c"), (1, "a"), (1, "b"), (1, "d"), (1, "f"), (2, "e")]
    check_tree(tree)

def test_search_by_key():
    tree = make_tree([5, 3, 8, 1, 4])
    node = tree.search_by_key(4)
    assert node is not None and node.value == "v4"
    assert tree.search_by_key(7) is None
    assert make_tree([]).search_by_key(1) is None

def test_search_by_property_is_order_statistic():
    tree = make_tree([5, 3, 8, 1])
    assert [tree.search_by_property(k).key for k in range(1, 5)] == [1, 3, 5, 8]
    assert tree.search_by_property(0) is None
    assert tree.search_by_property(5) is None

def test_delete_two_children_returns_deleted_payload():
    tree = make_tree(range(1, 8))
    root = tree.root
    assert root.key == 4 and root.left is not None and root.right is not None

    deleted = tree.delete_by_key(4)
    assert deleted == Entry(4, "v4")
    # The node stays in place and takes over its successor's payload
    assert tree.root is root
    assert (root.key, root.value) == (5, "v5")
    assert [k for k, _ in tree.flatten()] == [1, 2, 3, 5, 6, 7]
    check_tree(tree)

def test_delete_leaf_and_single_child():
    tree = make_tree([2, 1, 3, 4])
    assert tree.delete_by_key(3) == Entry(3, "v3")
    assert tree.root.right.key == 4
    assert tree.delete_by_key(4) == Entry(4, "v4")
    assert tree.root.right is None
    check_tree(tree)

def test_delete_missing():
    tree = make_tree([1, 2, 3])
    before = tree.flatten()
    assert tree.delete_by_key(10) is None
    assert tree.delete_by_property(4) is None
    assert tree.delete_by_property(0) is None
    assert tree.flatten() == before
    check_tree(tree)

def test_delete_from_empty():
    tree = make_tree([])
    assert tree.delete_by_key(1) is None
    assert tree.delete_by_property(1) is None
    assert tree.delete_min() is None
    assert tree.empty()

def test_delete_min_drains_in_order():
    keys = random.Random(3).sample(range(1000), 200)
    tree = make_tree(keys)
    drained = []
    while not tree.empty():
        drained.append(tree.delete_min().key)
        check_tree(tree)
    assert drained == sorted(keys)
    assert tree.root is None

def test_delete_by_property():
    tree = make_tree(range(10))
    assert tree.delete_by_property(1) == Entry(0, "v0")
    assert tree.delete_by_property(5) == Entry(5, "v5")
    assert [k for k, _ in tree.flatten()] == [1, 2, 3, 4, 6, 7, 8, 9]
    assert tree.root_property == 8
    check_tree(tree)

def test_height_bound():
    tree = make_tree(range(1000))
    check_tree(tree)
    assert tree.height <= 14

def test_clear():
    tree = make_tree(range(10))
    tree.clear()
    assert tree.empty()
    assert tree.root_property == 0
    assert tree.flatten() == []

def test_leaf_count_augmentation():
    tree = make_tree(range(1, 8), LeafCount())
    tree.verify()
    assert tree.root_property == 4
    assert [tree.search_by_property(k).key for k in range(1, 5)] == [1, 3, 5, 7]
    assert tree.search_by_property(5) is None

def test_leaf_count_random():
    rng = random.Random(7)
    tree = AugmentedAVLTree(LeafCount(), check_invariants=True)
    for _ in trange(300):
        if tree.empty() or rng.random() < 0.6:
            x = rng.randint(0, 50)
            tree.insert(x, x)
        else:
            leaves = [n for n in tree.nodes() if n.is_leaf()]
            k = rng.randint(1, len(leaves))
            assert tree.search_by_property(k) is leaves[k - 1]
            deleted = tree.delete_by_property(k)
            assert deleted is not None and deleted.key == leaves[k - 1].key
        assert tree.root_property == sum(1 for n in tree.nodes() if n.is_leaf())

def test_verify_detects_stale_property():
    tree = make_tree(range(10))
    tree.verify()
    tree.root.left.property += 1
    with pytest.raises(InvariantViolation):
        tree.verify()

def test_verify_detects_imbalance():
    tree = make_tree([1, 2])
    # Graft a chain onto the right so heights are consistent but unbalanced
    tree.root.right.right = make_tree([3]).root
    tree.root.right.height = 2
    tree.root.right.property = 2
    tree.root.height = 3
    tree.root.property = 3
    with pytest.raises(InvariantViolation):
        tree.verify()

def test_show():
    assert make_tree([]).show() == "<empty>"
    lines = make_tree([1, 2, 3]).show().splitlines()
    assert len(lines) == 3
    assert lines[1].startswith("2: 'v2'")

@given(st.lists(st.tuples(st.integers(0, 10), st.integers())))
def test_order_preservation(pairs):
    tree = AugmentedAVLTree(SubtreeSize(), check_invariants=True)
    for key, value in pairs:
        tree.insert(key, value)
    # sorted() is stable, so equal keys stay in insertion order
    assert tree.flatten() == sorted(pairs, key=lambda p: p[0])

@given(st.lists(st.integers(0, 20)), st.data())
def test_delete_insert_inverse(keys, data):
    tree = AugmentedAVLTree(SubtreeSize(), check_invariants=True)
    for k in keys:
        tree.insert(k, k)
    deleted = []
    while not tree.empty():
        rank = data.draw(st.integers(1, tree.root_property))
        deleted.append(tree.delete_by_property(rank).key)
    assert tree.root is None
    assert sorted(deleted) == sorted(keys)
