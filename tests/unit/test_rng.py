"""Tests for seeded randomness."""

from dragonsolitaire.simulation.rng import Mulberry32, random_seed, shuffle


class TestMulberry32:
    def test_same_seed_same_sequence(self):
        a, b = Mulberry32(42), Mulberry32(42)
        assert [a() for _ in range(20)] == [b() for _ in range(20)]

    def test_different_seeds_diverge(self):
        a, b = Mulberry32(1), Mulberry32(2)
        assert [a() for _ in range(5)] != [b() for _ in range(5)]

    def test_values_in_unit_interval(self):
        rng = Mulberry32(7)
        for _ in range(1000):
            value = rng.next_float()
            assert 0.0 <= value < 1.0

    def test_state_is_32_bit(self):
        assert Mulberry32(2**32 + 5).state == 5

    def test_state_advances_by_constant(self):
        rng = Mulberry32(100)
        rng()
        assert rng.state == (100 + 0x6D2B79F5) & 0xFFFFFFFF

    def test_resume_from_state(self):
        rng = Mulberry32(9)
        rng()
        rng()
        resumed = Mulberry32(0)
        resumed.state = rng.state
        assert resumed() == rng()


class TestShuffle:
    def test_returns_permutation_without_mutating(self):
        items = list(range(27))
        shuffled = shuffle(items, Mulberry32(3))
        assert items == list(range(27))
        assert sorted(shuffled) == items

    def test_deterministic_with_seed(self):
        assert shuffle(range(10), Mulberry32(5)) == shuffle(range(10), Mulberry32(5))

    def test_default_rng(self):
        assert sorted(shuffle([3, 1, 2])) == [1, 2, 3]

    def test_random_seed_range(self):
        for _ in range(10):
            assert 0 <= random_seed() <= 2**32 - 1
