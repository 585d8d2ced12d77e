import enum
import math
from typing import Callable

import jax
from jax.typing import ArrayLike

Scalar = float | jax.Array
"""Real threshold or radius (python float or 0-d array)."""

ProxFn = Callable[[jax.Array, Scalar], jax.Array]
"""Proximal callable with signature `(x, eta) -> prox_{eta g}(x)`."""


class NormOrder(enum.Enum):
    """Supported norm orders."""

    L1 = 1
    L2 = 2
    LINF = math.inf

    @classmethod
    def parse(cls, value: "NormOrder | int | float | str") -> "NormOrder":
        """Coerce `1`, `2`, `inf` (number or string) into a NormOrder."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            if key in ("inf", "infinity"):
                return cls.LINF
            try:
                value = float(key)
            except ValueError:
                raise ValueError(f"Unsupported norm order: {value!r}") from None
        if isinstance(value, bool):
            raise ValueError(f"Unsupported norm order: {value!r}")
        for member in cls:
            if value == member.value:
                return member
        raise ValueError(
            f"Unsupported norm order: {value!r}. Expected one of 1, 2, inf."
        )


class Strategy(enum.Enum):
    """How a proximal/projection step is solved."""

    EXACT_ARGMIN = "exact_argmin"
