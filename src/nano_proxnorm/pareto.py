r"""Pareto search for the l1-ball soft threshold.

Projecting onto $\{x : \sum_g n_g(x) \le \varepsilon\}$ amounts to soft
thresholding at the unique $\lambda \ge 0$ solving

$$
h(\lambda) = \sum_g \max(n_g - \lambda, 0) - \varepsilon = 0.
$$

$h$ is continuous, non-increasing and piecewise linear, with $h(0) > 0$
whenever the input lies outside the ball and $h(\max_g n_g) = -\varepsilon$,
so the root is bracketed by $[0, \max_g n_g]$.
"""

import jax
import jax.numpy as jnp
import optimistix as optx

from .pointwise import relu
from .types import ArrayLike, Scalar


def pareto_objective(lam: Scalar, ptn: ArrayLike, eps: Scalar) -> jax.Array:
    """Evaluate `h(lam) = sum(relu(ptn - lam)) - eps`."""
    return jnp.sum(relu(jnp.asarray(ptn) - lam)) - eps


def _scaled_objective(
    t: jax.Array, args: tuple[jax.Array, jax.Array, jax.Array]
) -> jax.Array:
    weights, budget, denom = args
    return pareto_objective(t, weights, budget) / denom


def pareto_search(
    ptn: ArrayLike,
    eps: Scalar,
    *,
    xrtol: float | None = None,
    max_steps: int = 256,
) -> jax.Array:
    r"""Find the threshold $\lambda$ solving $\sum_g \max(n_g - \lambda, 0) = \varepsilon$.

    Args:
        ptn: Non-negative real array of per-element or per-group norms.
        eps: Budget $\varepsilon \ge 0$.
        xrtol: Relative tolerance on $\lambda$, measured against
            `max(ptn)`. Defaults to the machine epsilon of `ptn`'s dtype.
        max_steps: Bisection step budget.

    Returns:
        Scalar threshold in `[0, max(ptn)]`, same dtype as `ptn`. Inputs
        already inside the ball (`sum(ptn) <= eps`) give 0.

    Note:
        Exhausting `max_steps` raises the solver's runtime error.
    """
    ptn = jnp.asarray(ptn)
    if not jnp.issubdtype(ptn.dtype, jnp.floating):
        ptn = ptn.astype(jnp.result_type(float))
    dtype = ptn.dtype
    rtol = float(jnp.finfo(dtype).eps) if xrtol is None else float(xrtol)
    n = max(ptn.size, 1)

    budget = jnp.asarray(eps, dtype)
    peak = jnp.max(ptn)
    scale = jnp.where(peak > 0, peak, 1)

    # Inputs inside the ball are swapped for a well-posed stand-in so that
    # batched solves (under vmap both cond branches run) stay finite.
    inside = jnp.sum(ptn) <= budget
    weights = jnp.where(inside, 1, ptn / scale)
    budget = jnp.where(inside, 0.5 * n, budget / scale)

    # Rounding in the n-term sum is at most about n * eps * (sum + budget);
    # dividing by four times that keeps the residual test |f| < rtol
    # reachable, so the bracket width on [0, 1] decides termination.
    denom = 4 * n * (jnp.sum(weights) + budget)

    solver = optx.Bisection(rtol=rtol, atol=rtol, flip=True)
    solution = optx.root_find(
        _scaled_objective,
        solver,
        jnp.asarray(0.5, dtype),
        args=(weights, budget, denom),
        options=dict(lower=jnp.zeros((), dtype), upper=jnp.ones((), dtype)),
        max_steps=max_steps,
        throw=True,
    )
    lam = jnp.clip(solution.value, 0, 1) * scale
    return jnp.where(inside, jnp.zeros((), dtype), lam)
