r"""Mixed norms $\ell_{2} \to \ell_{q}$, $q \in \{1, 2, \infty\}$.

For an input $p$ of rank $D + 1$, the inner $\ell_2$ norm is taken over the
last (group) axis and the outer $\ell_q$ norm over the remaining $D$ axes:

$$
g(p) = \big\| (i_1, \ldots, i_D) \mapsto \|p_{i_1, \ldots, i_D, :}\|_2 \big\|_q.
$$
"""

import jax
import jax.numpy as jnp

from .base import ProximableFunction
from .norms import clip_l2, shrink_l2, soft_threshold
from .pareto import pareto_search
from .pointwise import norm21, norm22, norm2inf, ptnorm2
from .types import NormOrder, Strategy


class ProximableMixedNorm(ProximableFunction):
    r"""Mixed norm $\ell_{2} \to \ell_{q}$ over arrays with a trailing group axis.

    - $q = 2$ collapses to the flat $\ell_2$ norm.
    - $q = 1$ (group lasso) shrinks whole groups: a group whose norm is below
      $\lambda$ is zeroed, the others are scaled uniformly.
    - $q = \infty$ clips group norms; its prox uses the Moreau decomposition
      with the $\ell_{2,1}$ ball.

    Group norms used in divisions carry an offset of one machine epsilon so
    that all-zero groups never divide by zero.
    """

    def __init__(
        self,
        dtype: jnp.dtype | type,
        outer_ndim: int,
        inner_order: NormOrder | int | float | str,
        outer_order: NormOrder | int | float | str,
        pareto_tol: float | None = None,
        max_steps: int = 256,
    ) -> None:
        """Initialize the mixed norm.

        Args:
            dtype: Element type of the input arrays.
            outer_ndim: Number of outer axes $D$; inputs have rank $D + 1$.
            inner_order: Norm order over the group axis. Only 2 is supported.
            outer_order: Norm order over the outer axes, one of 1, 2, inf.
            pareto_tol: Relative tolerance of the Pareto search.
            max_steps: Step budget of the Pareto search.
        """
        if outer_ndim < 0:
            raise ValueError("outer_ndim must be >= 0")
        inner_order = NormOrder.parse(inner_order)
        if inner_order is not NormOrder.L2:
            raise ValueError(
                f"Mixed norms are only implemented for inner order 2, got {inner_order.value}"
            )
        super().__init__(
            dtype, outer_ndim + 1, pareto_tol=pareto_tol, max_steps=max_steps
        )
        self.outer_ndim = outer_ndim
        self.inner_order = inner_order
        self.outer_order = NormOrder.parse(outer_order)
        kernels = {
            NormOrder.L1: (norm21, self._prox_l21, self._proj_l21),
            NormOrder.L2: (norm22, self._prox_l22, self._proj_l22),
            NormOrder.LINF: (norm2inf, self._prox_l2inf, self._proj_l2inf),
        }
        self._value_fn, prox_kernel, proj_kernel = kernels[self.outer_order]
        self._kernels = {Strategy.EXACT_ARGMIN: (prox_kernel, proj_kernel)}

    def _funeval(self, p: jax.Array) -> jax.Array:
        return self._value_fn(p)

    def _group_norms(self, p: jax.Array) -> jax.Array:
        return ptnorm2(p, eta=self.eta)

    # l22

    def _prox_l22(self, p: jax.Array, lam: jax.Array) -> jax.Array:
        return shrink_l2(p, lam, jnp.linalg.norm(jnp.ravel(p)))

    def _proj_l22(self, p: jax.Array, eps: jax.Array) -> jax.Array:
        return clip_l2(p, eps, norm22(p))

    # l21

    def _prox_l21(self, p: jax.Array, lam: jax.Array) -> jax.Array:
        return soft_threshold(p, lam, self._group_norms(p))

    def _proj_l21(self, p: jax.Array, eps: jax.Array) -> jax.Array:
        ptn = self._group_norms(p)

        def outside(operand):
            p, ptn, eps = operand
            lam = pareto_search(
                ptn, eps, xrtol=self.pareto_tol, max_steps=self.max_steps
            )
            return soft_threshold(p, lam, ptn)

        return jax.lax.cond(
            jnp.sum(ptn) <= eps,
            lambda operand: operand[0],
            outside,
            (p, ptn, eps),
        )

    # l2inf

    def _prox_l2inf(self, p: jax.Array, lam: jax.Array) -> jax.Array:
        # Dual ball is the l21 ball over the same D outer axes.
        return p - self._proj_l21(p, lam)

    def _proj_l2inf(self, p: jax.Array, eps: jax.Array) -> jax.Array:
        ptn = self._group_norms(p)
        scale = jnp.where(ptn >= eps, eps / ptn, 1)
        return (scale * p).astype(p.dtype)


def mixed_norm(
    dtype: jnp.dtype | type,
    outer_ndim: int,
    inner_order: NormOrder | int | float | str,
    outer_order: NormOrder | int | float | str,
    *,
    pareto_tol: float | None = None,
    max_steps: int = 256,
) -> ProximableMixedNorm:
    r"""Return the mixed-norm proximable function for rank `outer_ndim + 1` inputs.

    Implementations are available for `inner_order=2` and
    `outer_order` in $\{1, 2, \infty\}$.
    """
    return ProximableMixedNorm(
        dtype,
        outer_ndim,
        inner_order,
        outer_order,
        pareto_tol=pareto_tol,
        max_steps=max_steps,
    )
