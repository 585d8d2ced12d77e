import jax
import jax.numpy as jnp
import pytest
from nano_proxnorm import pareto_objective, pareto_search


def test_pareto_search_known_threshold():
    # (3 - 1) + (1 - 1) + 0 = 2
    ptn = jnp.array([3.0, 1.0, 0.5])
    lam = pareto_search(ptn, 2.0)
    assert jnp.allclose(lam, 1.0, atol=1e-10)


def test_pareto_search_interior_root():
    # Only the largest entry survives: 4 - lam = 1.5
    ptn = jnp.array([4.0, 2.0, 1.0])
    lam = pareto_search(ptn, 1.5)
    assert jnp.allclose(lam, 2.5, atol=1e-10)


def test_pareto_search_solves_objective(random_vector):
    ptn = jnp.abs(random_vector)
    eps = 0.3 * jnp.sum(ptn)
    lam = pareto_search(ptn, eps)

    assert 0.0 <= lam <= jnp.max(ptn)
    assert jnp.abs(pareto_objective(lam, ptn, eps)) < 1e-8 * jnp.sum(ptn)


def test_pareto_search_zero_budget():
    ptn = jnp.array([0.5, 2.0, 1.0])
    lam = pareto_search(ptn, 0.0)
    assert jnp.allclose(lam, 2.0, atol=1e-10)


def test_pareto_search_float32():
    ptn = jnp.array([3.0, 1.0, 0.5], dtype=jnp.float32)
    lam = pareto_search(ptn, 2.0)
    assert lam.dtype == jnp.float32
    assert jnp.allclose(lam, 1.0, atol=1e-5)


def test_pareto_search_large_float32():
    # 1e5 * (1 - lam) = 49000
    ptn = jnp.ones(100_000, dtype=jnp.float32)
    lam = pareto_search(ptn, 49_000.0)
    assert lam.dtype == jnp.float32
    assert jnp.allclose(lam, 0.51, atol=1e-5)

    ptn = jnp.abs(jax.random.normal(jax.random.PRNGKey(3), (200_000,), dtype=jnp.float32))
    eps = 0.2 * jnp.sum(ptn)
    lam = pareto_search(ptn, eps)
    residual = pareto_objective(lam.astype(jnp.float64), ptn.astype(jnp.float64), float(eps))
    assert abs(float(residual)) <= 1e-3 * float(eps)


@pytest.mark.parametrize(
    "ptn", [jnp.array([0.5, 0.2, 0.1]), jnp.zeros(3)], ids=["inside", "zeros"]
)
def test_pareto_search_inside_ball_is_zero(ptn):
    assert pareto_search(ptn, 1.0) == 0.0


def test_pareto_search_under_vmap():
    rows = jnp.array([[3.0, 1.0, 0.5], [0.0, 0.0, 0.0], [0.1, 0.1, 0.1]])
    lam = jax.vmap(pareto_search, in_axes=(0, None))(rows, 2.0)
    assert jnp.allclose(lam, jnp.array([1.0, 0.0, 0.0]), atol=1e-10)


def test_pareto_search_custom_tolerance():
    ptn = jnp.array([5.0, 3.0, 2.0, 0.1])
    lam = pareto_search(ptn, 4.0, xrtol=1e-6)
    # (5 - lam) + (3 - lam) = 4
    assert jnp.allclose(lam, 2.0, atol=1e-4)


def test_pareto_search_under_jit():
    search = jax.jit(lambda ptn, eps: pareto_search(ptn, eps))
    lam = search(jnp.array([3.0, 1.0, 0.5]), jnp.array(2.0))
    assert jnp.allclose(lam, 1.0, atol=1e-10)


@pytest.mark.parametrize("lam, expected", [(0.0, 2.5), (1.0, 0.0), (3.0, -2.0)])
def test_pareto_objective(lam, expected):
    ptn = jnp.array([3.0, 1.0, 0.5])
    assert jnp.allclose(pareto_objective(lam, ptn, 2.0), expected)
