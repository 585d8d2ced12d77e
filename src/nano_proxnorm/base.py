import warnings
from abc import ABC, abstractmethod
from typing import Callable

import jax
import jax.numpy as jnp

from .types import ArrayLike, ProxFn, Scalar, Strategy

Kernel = Callable[[jax.Array, jax.Array], jax.Array]


class ProximableFunction(ABC):
    r"""Abstract base class for proximable functions in nano-proxnorm.

    A proximable function $g$ on arrays of a fixed dtype and rank exposes

    - `funeval(x)`: the value $g(x)$ (also available as `g(x)`),
    - `prox(y, lam)`: $\operatorname{prox}_{\lambda g}(y) = \operatorname*{arg min}_x \lambda g(x) + \frac{1}{2}\|x - y\|_2^2$,
    - `proj(y, eps)`: the Euclidean projection onto $\{x : g(x) \le \varepsilon\}$.

    Subclasses resolve their kernels once in `__init__` by filling
    `self._kernels`, a mapping `Strategy -> (prox_kernel, proj_kernel)`.
    """

    def __init__(
        self,
        dtype: jnp.dtype | type,
        ndim: int,
        pareto_tol: float | None = None,
        max_steps: int = 256,
    ) -> None:
        """Initialize the function.

        Args:
            dtype: Element type of the input arrays (real or complex).
            ndim: Rank of the input arrays.
            pareto_tol: Relative tolerance of the Pareto search. None uses the
                machine epsilon of `dtype`.
            max_steps: Step budget of the Pareto search.
        """
        dtype = jax.dtypes.canonicalize_dtype(dtype)
        if not jnp.issubdtype(dtype, jnp.inexact):
            raise TypeError(f"dtype must be a real or complex float type, got {dtype}")
        if ndim < 0:
            raise ValueError("ndim must be >= 0")
        if max_steps < 1:
            raise ValueError("max_steps must be >= 1")
        if pareto_tol is not None:
            if pareto_tol <= 0:
                raise ValueError("pareto_tol must be positive")
            if pareto_tol < jnp.finfo(dtype).eps:
                warnings.warn(
                    f"pareto_tol={pareto_tol} is below the machine epsilon of "
                    f"{dtype}; the Pareto search may exhaust max_steps.",
                    UserWarning,
                    stacklevel=3,
                )
        self.dtype = dtype
        self.ndim = ndim
        self.pareto_tol = pareto_tol
        self.max_steps = max_steps
        self._kernels: dict[Strategy, tuple[Kernel, Kernel]] = {}

    @property
    def real_dtype(self) -> jnp.dtype:
        """Dtype of norms and thresholds (the real subfield of `dtype`)."""
        return jnp.finfo(self.dtype).dtype

    @property
    def eta(self) -> float:
        """Offset used to keep group norms away from zero."""
        return float(jnp.finfo(self.dtype).eps)

    def _check_input(self, x: ArrayLike) -> jax.Array:
        x = jnp.asarray(x)
        if x.ndim != self.ndim:
            raise ValueError(
                f"{type(self).__name__} expects arrays with ndim={self.ndim}, "
                f"got shape {x.shape}"
            )
        if x.dtype != self.dtype:
            raise TypeError(
                f"{type(self).__name__} expects dtype {self.dtype}, got {x.dtype}"
            )
        return x

    def _check_scalar(self, value: Scalar, name: str) -> jax.Array:
        value = jnp.asarray(value)
        if value.ndim != 0 or jnp.iscomplexobj(value):
            raise ValueError(f"{name} must be a real scalar.")
        # Traced values are only known at run time.
        if not isinstance(value, jax.core.Tracer) and value < 0:
            raise ValueError(f"{name} must be nonnegative.")
        return value.astype(self.real_dtype)

    def _resolve(self, strategy: Strategy) -> tuple[Kernel, Kernel]:
        try:
            return self._kernels[strategy]
        except KeyError:
            raise ValueError(
                f"{type(self).__name__} does not implement strategy {strategy!r}"
            ) from None

    @abstractmethod
    def _funeval(self, x: jax.Array) -> jax.Array:
        """Evaluate the function on a validated input."""

    def funeval(self, x: ArrayLike) -> jax.Array:
        """Evaluate the function.

        Raises:
            ValueError: If `x` has the wrong rank.
            TypeError: If `x` has the wrong dtype.
        """
        return self._funeval(self._check_input(x))

    def __call__(self, x: ArrayLike) -> jax.Array:
        return self.funeval(x)

    def prox(
        self,
        y: ArrayLike,
        lam: Scalar,
        strategy: Strategy = Strategy.EXACT_ARGMIN,
    ) -> jax.Array:
        r"""Proximal operator $\operatorname{prox}_{\lambda g}(y)$.

        Args:
            y: Input array matching `dtype` and `ndim`.
            lam: Threshold $\lambda \ge 0$.
            strategy: Solver strategy.

        Returns:
            A new array with the shape and dtype of `y`.
        """
        prox_kernel, _ = self._resolve(strategy)
        return prox_kernel(self._check_input(y), self._check_scalar(lam, "lam"))

    def proj(
        self,
        y: ArrayLike,
        eps: Scalar,
        strategy: Strategy = Strategy.EXACT_ARGMIN,
    ) -> jax.Array:
        r"""Projection onto the ball $\{x : g(x) \le \varepsilon\}$.

        Args:
            y: Input array matching `dtype` and `ndim`.
            eps: Radius $\varepsilon \ge 0$.
            strategy: Solver strategy.

        Returns:
            A new array with the shape and dtype of `y`.
        """
        _, proj_kernel = self._resolve(strategy)
        return proj_kernel(self._check_input(y), self._check_scalar(eps, "eps"))

    def as_prox(self, reg: float = 1.0) -> ProxFn:
        r"""Return the callable $(x, \eta) \mapsto \operatorname{prox}_{\eta \cdot \text{reg} \cdot g}(x)$."""
        if reg < 0:
            raise ValueError("Regularization coefficient must be nonnegative.")
        return lambda x, lr: self.prox(x, reg * lr)

    def as_proj(self, radius: float) -> ProxFn:
        """Return the callable `(x, eta) -> proj(x, radius)`, ignoring the step size."""
        if radius < 0:
            raise ValueError("radius must be nonnegative.")
        return lambda x, lr: self.proj(x, radius)

    def __repr__(self) -> str:
        attrs = ", ".join(
            f"{k}={v!r}" for k, v in vars(self).items() if not k.startswith("_")
        )
        return f"{type(self).__name__}({attrs})"
