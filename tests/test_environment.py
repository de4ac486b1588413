from environment import Environment


def test_unset_variable_reads_zero():
    env = Environment()
    assert env.get(0) == 0
    assert env.get(12345) == 0
    assert 7 not in env


def test_set_returns_value_and_overwrites():
    env = Environment()
    assert env.set(1, 10) == 10
    assert env.set(1, -3) == -3
    assert env.get(1) == -3
    assert 1 in env


def test_fresh_environment_is_independent():
    env = Environment()
    env.set(1, 5)
    fresh = env.fresh()
    assert fresh.get(1) == 0
    fresh.set(1, 9)
    assert env.get(1) == 5


def test_bindings_is_a_snapshot():
    env = Environment()
    env.set(2, 4)
    snap = env.bindings()
    env.set(3, 6)
    assert snap == {2: 4}
    assert env.bindings() == {2: 4, 3: 6}
