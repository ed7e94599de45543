"""Tests for the seeded random stream."""

import pytest

from fakehuman.pseudo_random import PseudoRandom, simple_hash


def test_simple_hash_matches_java_string_hash():
    assert simple_hash("") == 0
    assert simple_hash("a") == 97
    assert simple_hash("ab") == 97 * 31 + 98
    assert simple_hash("hello") == 99162322
    # Wraps to a signed 32-bit value
    assert simple_hash("polygenelubricants") == -2147483648


def test_same_seed_replays_same_draws():
    a = PseudoRandom(42)
    b = PseudoRandom(42)
    assert [a.next_int(0, 1000) for _ in range(20)] == [b.next_int(0, 1000) for _ in range(20)]


def test_next_int_upper_bound_is_exclusive():
    random = PseudoRandom(1)
    draws = {random.next_int(3, 6) for _ in range(200)}
    assert draws == {3, 4, 5}
    assert random.next_int(5, 5) == 5


def test_chance_edges():
    random = PseudoRandom(3)
    assert all(random.chance(1) for _ in range(20))
    assert not any(random.chance(0) for _ in range(20))
    assert not any(random.chance(-4) for _ in range(20))


def test_rand_element_rejects_empty_sequence():
    random = PseudoRandom(5)
    with pytest.raises(ValueError):
        random.rand_element([])
    assert random.rand_element(["only"]) == "only"
    assert random.rand_from_set({"x"}) == "x"


def test_next_float_is_a_unit_interval_draw():
    random = PseudoRandom(11)
    draws = [random.next_float() for _ in range(200)]
    assert all(0.0 <= d < 1.0 for d in draws)
    assert draws == [PseudoRandom(11).next_float()] + draws[1:]
