r"""Pointwise norms along the trailing group axis.

For an array $p$ of shape `(*outer, G)` the pointwise functions reduce the
last axis and keep it with length 1, so the result broadcasts against $p$.
Magnitudes are taken in the real subfield, so complex inputs give real norms.
"""

import jax
import jax.numpy as jnp

from .types import ArrayLike


def relu(x: jax.Array) -> jax.Array:
    """Positive part `x * (x > 0)`."""
    return x * (x > 0)


def ptdot(v1: ArrayLike, v2: ArrayLike) -> jax.Array:
    r"""Pointwise inner product $\sum_g v_1 \bar{v}_2$ over the group axis."""
    v1 = jnp.asarray(v1)
    return jnp.sum(v1 * jnp.conj(v2), axis=-1, keepdims=True)


def ptnorm1(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    r"""Pointwise $\sum_g (|p_g| + \eta)$."""
    return jnp.sum(jnp.abs(p) + eta, axis=-1, keepdims=True)


def ptnorm2(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    r"""Pointwise $\sqrt{\sum_g (|p_g|^2 + \eta^2)}$.

    A positive `eta` keeps every group norm strictly positive, which makes it
    safe to divide by the result.
    """
    return jnp.sqrt(jnp.sum(jnp.abs(p) ** 2 + eta**2, axis=-1, keepdims=True))


def ptnorm_inf(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    r"""Pointwise $\sqrt{\max_g (|p_g| + \eta)}$.

    Note the square root: this is not the plain pointwise max-norm. No
    prox/proj routine uses it.
    """
    return jnp.sqrt(jnp.max(jnp.abs(p) + eta, axis=-1, keepdims=True))


def norm21(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    """Sum over groups of the group l2 norms."""
    return jnp.sum(ptnorm2(p, eta))


def norm22(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    """Root-sum-square of the group l2 norms (the flat l2 norm when eta=0)."""
    return jnp.sqrt(jnp.sum(ptnorm2(p, eta) ** 2))


def norm2inf(p: ArrayLike, eta: float = 0.0) -> jax.Array:
    """Largest group l2 norm."""
    return jnp.max(ptnorm2(p, eta))
