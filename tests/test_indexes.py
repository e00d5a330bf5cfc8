import pytest

from cgrad.indexes import IndexesBatch, IndexesPermutation
from cgrad.rng import init_random_seed


def test_batch_starts_empty():
    batch = IndexesBatch(5)
    assert len(batch) == 0
    assert batch.capacity == 5


def test_batch_negative_capacity():
    with pytest.raises(ValueError):
        IndexesBatch(-1)


def test_new_permutation_is_identity():
    perm = IndexesPermutation(4)
    assert perm.indexes == [0, 1, 2, 3]
    assert perm.current == 0


def test_shuffle_is_a_permutation():
    init_random_seed(7)
    perm = IndexesPermutation(20)
    perm.shuffle()
    assert sorted(perm.indexes) == list(range(20))


def test_shuffle_reproducible_with_seed():
    init_random_seed(3)
    first = IndexesPermutation(15)
    first.shuffle()
    init_random_seed(3)
    second = IndexesPermutation(15)
    second.shuffle()
    assert first.indexes == second.indexes


def test_sample_index_batch_copies_slice():
    init_random_seed(1)
    perm = IndexesPermutation(10)
    perm.shuffle()
    batch = IndexesBatch(4)
    perm.sample_index_batch(batch, 3)
    assert batch.indexes == perm.indexes[0:3]
    assert len(batch) == 3
    perm.update(3)
    perm.sample_index_batch(batch, 4)
    assert batch.indexes == perm.indexes[3:7]


def test_sample_index_batch_exceeds_capacity():
    perm = IndexesPermutation(10)
    batch = IndexesBatch(2)
    with pytest.raises(ValueError):
        perm.sample_index_batch(batch, 3)


def test_sample_index_batch_exceeds_remaining():
    perm = IndexesPermutation(5)
    batch = IndexesBatch(5)
    perm.update(3)
    with pytest.raises(ValueError):
        perm.sample_index_batch(batch, 3)
    perm.sample_index_batch(batch, 2)
    assert batch.indexes == [3, 4]


def test_sample_index_batch_none_batch():
    perm = IndexesPermutation(5)
    with pytest.raises(TypeError):
        perm.sample_index_batch(None, 1)


def test_update_and_remaining():
    perm = IndexesPermutation(10)
    perm.update(3)
    assert perm.remaining() == 7
    assert not perm.is_terminated()


def test_update_clamps_at_end():
    perm = IndexesPermutation(10)
    perm.update(100)
    assert perm.current == 10
    assert perm.remaining() == 0
    assert perm.is_terminated()


def test_empty_permutation_is_terminated():
    perm = IndexesPermutation(0)
    perm.shuffle()
    assert perm.indexes == []
    assert perm.is_terminated()


def test_epoch_covers_every_index_once():
    init_random_seed(11)
    perm = IndexesPermutation(9)
    perm.shuffle()
    batch = IndexesBatch(4)
    seen = []
    while not perm.is_terminated():
        size = min(4, perm.remaining())
        perm.sample_index_batch(batch, size)
        seen.extend(batch.indexes)
        perm.update(size)
    assert sorted(seen) == list(range(9))