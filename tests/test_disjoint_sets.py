from maze_gen import DisjointSets


def test_singletons_are_their_own_root():
    sets = DisjointSets(5)
    assert [sets.find(i) for i in range(5)] == [0, 1, 2, 3, 4]


def test_union_joins_transitively():
    sets = DisjointSets(6)
    sets.union(0, 1)
    sets.union(2, 3)
    sets.union(1, 3)
    root = sets.find(0)
    assert all(sets.find(i) == root for i in range(4))
    assert not sets.same(0, 4)
    assert not sets.same(4, 5)


def test_union_of_same_set_keeps_forest_acyclic():
    sets = DisjointSets(3)
    sets.union(0, 1)
    sets.union(1, 0)
    sets.union(0, 0)
    assert sets.same(0, 1)
    assert sets.find(2) == 2


def test_find_compresses_long_chain():
    size = 50_000
    sets = DisjointSets(size)
    #Chain every node onto the next so the first find walks the whole list
    sets.parent = list(range(1, size)) + [size - 1]
    root = sets.find(0)
    assert root == size - 1
    assert all(p == root for p in sets.parent)
