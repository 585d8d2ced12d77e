import jax

# Exact-value checks below are written for double precision.
jax.config.update("jax_enable_x64", True)

import jax.numpy as jnp  # noqa: E402
import pytest  # noqa: E402


@pytest.fixture
def random_vector():
    key = jax.random.PRNGKey(0)
    return jax.random.normal(key, (20,), dtype=jnp.float64)


@pytest.fixture
def random_pair():
    key_x, key_y = jax.random.split(jax.random.PRNGKey(1))
    x = 3.0 * jax.random.normal(key_x, (4, 5), dtype=jnp.float64)
    y = 3.0 * jax.random.normal(key_y, (4, 5), dtype=jnp.float64)
    return x, y


@pytest.fixture
def grouped_array():
    # 6 groups of 3 components; group 2 is exactly zero.
    key = jax.random.PRNGKey(2)
    p = jax.random.normal(key, (6, 3), dtype=jnp.float64)
    return p.at[2].set(0.0)
