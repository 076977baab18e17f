from identity import IdentityAllocator


def test_identities_are_unique_strings():
    alloc = IdentityAllocator()
    ids = [alloc.allocate() for _ in range(5000)]
    assert all(isinstance(i, str) and i for i in ids)
    assert len(set(ids)) == len(ids)


def test_identities_start_with_random_part():
    # clients show a short prefix, so the prefix must not be the counter
    alloc = IdentityAllocator(random_bytes=4)
    first, second = alloc.allocate(), alloc.allocate()
    assert len(first) > 8
    assert first[8:-1] == second[8:-1]  # same nonce
    assert first[-1] == "1" and second[-1] == "2"
