r"""Proximal and projection operators for the flat $\ell_1$, $\ell_2$ and $\ell_\infty$ norms."""

import jax
import jax.numpy as jnp

from .base import ProximableFunction
from .pareto import pareto_search
from .types import ArrayLike, NormOrder, Scalar, Strategy


def shrink_l2(y: jax.Array, lam: jax.Array, norm_y: jax.Array) -> jax.Array:
    r"""Block shrinkage $(1 - \lambda / \|y\|) y$, or zero when $\|y\| \le \lambda$."""
    return jax.lax.cond(
        norm_y <= lam,
        lambda operand: jnp.zeros_like(operand),
        lambda operand: (1 - lam / norm_y) * operand,
        y,
    )


def clip_l2(y: jax.Array, eps: jax.Array, norm_y: jax.Array) -> jax.Array:
    r"""Rescale $y$ onto the sphere of radius $\varepsilon$ if it lies outside."""
    return jax.lax.cond(
        norm_y <= eps,
        lambda operand: operand,
        lambda operand: (eps / norm_y) * operand,
        y,
    )


def soft_threshold(
    y: ArrayLike,
    lam: Scalar,
    magnitude: ArrayLike | None = None,
) -> jax.Array:
    r"""Soft thresholding $(1 - \lambda / m)\,[m \ge \lambda]\, y$.

    Args:
        y: Input array (real or complex).
        lam: Threshold $\lambda \ge 0$.
        magnitude: Magnitudes $m$ broadcastable to `y`. Defaults to `|y|`;
            pass group norms to threshold whole groups at once.

    Returns:
        `y` scaled by a real non-negative factor.
    """
    y = jnp.asarray(y)
    magnitude = jnp.abs(y) if magnitude is None else jnp.asarray(magnitude)
    keep = magnitude >= lam
    safe = jnp.where(magnitude > 0, magnitude, 1)
    scale = jnp.where(keep, 1 - lam / safe, 0)
    return (scale * y).astype(y.dtype)


def clip_magnitude(y: jax.Array, eps: jax.Array, magnitude: jax.Array) -> jax.Array:
    """Rescale entries whose magnitude exceeds `eps` to magnitude `eps`, keeping phase."""
    over = magnitude > eps
    return jnp.where(over, eps * y / jnp.where(over, magnitude, 1), y)


class ProximableNorm(ProximableFunction):
    r"""The norm $g(x) = \|x\|_p$, $p \in \{1, 2, \infty\}$, over a whole array.

    The $\ell_1$ projection has no closed form: it soft thresholds at the
    level found by `pareto_search`. The $\ell_\infty$ prox follows from the
    Moreau decomposition

    $$
    \operatorname{prox}_{\lambda\|\cdot\|_\infty}(y) = y - \operatorname{proj}_{\{\|x\|_1 \le \lambda\}}(y).
    $$
    """

    def __init__(
        self,
        dtype: jnp.dtype | type,
        ndim: int,
        order: NormOrder | int | float | str,
        pareto_tol: float | None = None,
        max_steps: int = 256,
    ) -> None:
        """Initialize the norm.

        Args:
            dtype: Element type of the input arrays.
            ndim: Rank of the input arrays.
            order: Norm order, one of 1, 2, inf.
            pareto_tol: Relative tolerance of the Pareto search.
            max_steps: Step budget of the Pareto search.
        """
        super().__init__(dtype, ndim, pareto_tol=pareto_tol, max_steps=max_steps)
        self.order = NormOrder.parse(order)
        kernels = {
            NormOrder.L1: (self._prox_l1, self._proj_l1),
            NormOrder.L2: (self._prox_l2, self._proj_l2),
            NormOrder.LINF: (self._prox_linf, self._proj_linf),
        }
        self._kernels = {Strategy.EXACT_ARGMIN: kernels[self.order]}

    def _funeval(self, x: jax.Array) -> jax.Array:
        return jnp.linalg.norm(jnp.ravel(x), ord=self.order.value)

    # l2

    def _prox_l2(self, y: jax.Array, lam: jax.Array) -> jax.Array:
        return shrink_l2(y, lam, jnp.linalg.norm(jnp.ravel(y)))

    def _proj_l2(self, y: jax.Array, eps: jax.Array) -> jax.Array:
        return clip_l2(y, eps, jnp.linalg.norm(jnp.ravel(y)))

    # l1

    def _prox_l1(self, y: jax.Array, lam: jax.Array) -> jax.Array:
        return soft_threshold(y, lam)

    def _proj_l1(self, y: jax.Array, eps: jax.Array) -> jax.Array:
        abs_y = jnp.abs(y)

        def outside(operand):
            y, abs_y, eps = operand
            lam = pareto_search(
                abs_y, eps, xrtol=self.pareto_tol, max_steps=self.max_steps
            )
            return soft_threshold(y, lam, abs_y)

        return jax.lax.cond(
            jnp.sum(abs_y) <= eps,
            lambda operand: operand[0],
            outside,
            (y, abs_y, eps),
        )

    # linf

    def _prox_linf(self, y: jax.Array, lam: jax.Array) -> jax.Array:
        return y - self._proj_l1(y, lam)

    def _proj_linf(self, y: jax.Array, eps: jax.Array) -> jax.Array:
        return clip_magnitude(y, eps, jnp.abs(y))


def norm(
    dtype: jnp.dtype | type,
    ndim: int,
    order: NormOrder | int | float | str,
    *,
    pareto_tol: float | None = None,
    max_steps: int = 256,
) -> ProximableNorm:
    r"""Return the proximable function $g(x) = \|x\|_p$ for $p \in \{1, 2, \infty\}$.

    Must specify the element type and rank of the input arrays.
    """
    return ProximableNorm(
        dtype, ndim, order, pareto_tol=pareto_tol, max_steps=max_steps
    )
