"""Unit tests for the read-only BloomRef view."""
import pytest

from pyethbloom import Bloom, BloomRef, Raw
from pyethbloom.bloom import BLOOM_SIZE


@pytest.fixture
def bloom():
    """A bloom with a handful of items."""
    return Bloom.from_inputs(Raw(f"topic{i}".encode()) for i in range(4))


def test_view_equals_owner(bloom):
    """A view compares equal to the bloom it looks at, both ways."""
    ref = BloomRef(bloom)
    assert ref == bloom
    assert bloom == ref
    assert repr(ref).startswith("BloomRef(data=")


def test_view_tracks_owner(bloom):
    """Accruals into the owner are visible through the view."""
    ref = BloomRef(bloom)
    assert not ref.contains(b"late")
    bloom.accrue(b"late")
    assert ref.contains(b"late")
    assert ref == bloom


def test_view_over_raw_buffer(bloom):
    """A view can wrap plain bytes."""
    ref = BloomRef(bytes(bloom))
    assert ref == bloom
    assert ref.contains(Raw(b"topic0"))
    assert BloomRef(bytes(BLOOM_SIZE)).is_empty()


def test_view_rejects_wrong_size():
    """Only 256-byte buffers can be viewed."""
    with pytest.raises(ValueError):
        BloomRef(bytes(BLOOM_SIZE + 1))


def test_mixed_owned_and_borrowed(bloom):
    """Union, intersection and containment accept any owned/borrowed mix."""
    other = Bloom.from_input(b"other")
    ref, other_ref = BloomRef(bloom), BloomRef(other)
    expected = bloom.union(other)
    assert ref.union(other) == expected
    assert bloom.union(other_ref) == expected
    assert ref.union(other_ref) == expected
    assert expected.contains_bloom(ref)
    assert BloomRef(expected).contains_bloom(other_ref)
    assert ref.intersection(bloom) == bloom
    assert bloom.contains_bloom(bytes(bloom))


def test_view_is_read_only(bloom):
    """Views expose no mutators and a read-only buffer."""
    ref = BloomRef(bloom)
    assert not hasattr(ref, "accrue")
    with pytest.raises(TypeError):
        ref.data[0] = 1


def test_to_bloom_copies(bloom):
    """to_bloom detaches from the viewed buffer."""
    snapshot = bytes(bloom)
    owned = BloomRef(bloom).to_bloom()
    bloom.accrue(b"after")
    assert bytes(owned) == snapshot
    assert owned.contains(Raw(b"topic1"))
