import random
import pytest

class ScriptedRng:
    """randrange() answers from a fixed list; checks the requested range."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def randrange(self, lo, hi):
        self.calls += 1
        v = self.values.pop(0)
        assert lo <= v < hi
        return v

class CountingRng(random.Random):
    def __init__(self, seed=0):
        super().__init__(seed)
        self.calls = 0

    def randrange(self, *a, **kw):
        self.calls += 1
        return super().randrange(*a, **kw)

@pytest.fixture
def seeded():
    return random.Random(1234)
