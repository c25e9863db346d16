import random

from impairnet.emulation.random_source import RandomSource


class _ZeroUntilSeeded(random.Random):
    """Generator that yields zeroes until it is explicitly reseeded."""

    def __init__(self):
        super().__init__(0)
        self.reseeded = False

    def seed(self, a=None, version=2):
        super().seed(a, version)
        self.reseeded = True

    def random(self):
        if not self.reseeded:
            return 0.0
        return super().random()


def test_same_seed_gives_same_draws():
    first = RandomSource(seed=7)
    second = RandomSource(seed=7)
    assert [first.uniform() for _ in range(20)] == [second.uniform() for _ in range(20)]


def test_draws_are_in_unit_interval(rng):
    draws = [rng.uniform() for _ in range(1000)]
    assert all(0.0 <= d < 1.0 for d in draws)


def test_healthy_source_is_not_reseeded(rng):
    assert rng.ensure_entropy() is False
    assert rng.seed == 1050


def test_degenerate_source_is_reseeded():
    source = RandomSource(seed=3, generator=_ZeroUntilSeeded())
    assert source.uniform() == 0.0

    assert source.ensure_entropy() is True
    assert source.seed is None
    assert any(source.uniform() != 0.0 for _ in range(10))


def test_spawned_sources_are_reproducible_and_independent():
    children_a = RandomSource(seed=11)
    children_b = RandomSource(seed=11)
    a1, a2 = children_a.spawn(), children_a.spawn()
    b1 = children_b.spawn()

    draws_a1 = [a1.uniform() for _ in range(10)]
    assert draws_a1 == [b1.uniform() for _ in range(10)]
    assert draws_a1 != [a2.uniform() for _ in range(10)]
