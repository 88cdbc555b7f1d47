import pytest

from catfacts.infrastructure.resilience.backoff import constant_backoff, linear_backoff

def test_linear_backoff_grows_by_base_per_attempt():
    backoff = linear_backoff(0.3)
    assert [backoff(n) for n in range(1, 5)] == pytest.approx([0.3, 0.6, 0.9, 1.2])

def test_linear_backoff_is_deterministic():
    backoff = linear_backoff(0.3)
    assert backoff(3) == backoff(3)

def test_constant_backoff_ignores_attempt():
    backoff = constant_backoff(0.5)
    assert {backoff(n) for n in range(1, 7)} == {0.5}

def test_zero_base_never_waits():
    assert linear_backoff(0)(10) == 0

@pytest.mark.parametrize("factory", [linear_backoff, constant_backoff])
def test_negative_base_rejected(factory):
    with pytest.raises(ValueError, match="non-negative"):
        factory(-0.1)

@pytest.mark.parametrize("factory", [linear_backoff, constant_backoff])
def test_attempt_index_is_one_based(factory):
    with pytest.raises(ValueError, match="1-based"):
        factory(0.1)(0)
