"""Tests for per-task random streams."""

import pytest

from glowtrace.sampling import RandomSource


class TestUniform:
    """Test uniform samples."""

    def test_range(self):
        rng = RandomSource(1)
        samples = [rng.uniform() for _ in range(1000)]
        assert all(0.0 <= s < 1.0 for s in samples)

    def test_mean_is_about_half(self):
        rng = RandomSource(2)
        samples = [rng.uniform() for _ in range(5000)]
        assert abs(sum(samples) / len(samples) - 0.5) < 0.03


class TestUnitVector:
    """Test rejection-sampled directions."""

    def test_unit_length(self):
        rng = RandomSource(4)
        for _ in range(200):
            assert abs(rng.unit_vector().length() - 1.0) < 1e-9

    def test_covers_all_octants(self):
        rng = RandomSource(5)
        octants = set()
        for _ in range(500):
            v = rng.unit_vector()
            octants.add((v.x > 0, v.y > 0, v.z > 0))
        assert len(octants) == 8

    def test_mean_near_zero(self):
        rng = RandomSource(6)
        n = 4000
        total = [0.0, 0.0, 0.0]
        for _ in range(n):
            v = rng.unit_vector()
            total = [t + c for t, c in zip(total, v)]
        assert all(abs(t / n) < 0.05 for t in total)


class TestDeterminism:
    """Seeded streams are reproducible and independent."""

    def test_same_seed_same_stream(self):
        a = RandomSource(42)
        b = RandomSource(42)
        assert [a.uniform() for _ in range(10)] == [b.uniform() for _ in range(10)]

    def test_for_task_is_reproducible(self):
        a = RandomSource.for_task(1234, 7)
        b = RandomSource.for_task(1234, 7)
        assert a.unit_vector() == b.unit_vector()

    def test_tasks_differ(self):
        a = RandomSource.for_task(1234, 0)
        b = RandomSource.for_task(1234, 1)
        assert [a.uniform() for _ in range(5)] != [b.uniform() for _ in range(5)]

    def test_spawn_children_differ(self):
        children = RandomSource(9).spawn(3)
        firsts = {child.uniform() for child in children}
        assert len(firsts) == 3

    def test_unseeded_has_entropy(self):
        assert isinstance(RandomSource().entropy, int)
