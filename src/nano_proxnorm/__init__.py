from .base import ProximableFunction
from .mixed_norms import ProximableMixedNorm, mixed_norm
from .norms import ProximableNorm, norm, soft_threshold
from .pareto import pareto_objective, pareto_search
from .pointwise import (
    norm2inf,
    norm21,
    norm22,
    ptdot,
    ptnorm1,
    ptnorm2,
    ptnorm_inf,
    relu,
)
from .types import NormOrder, ProxFn, Scalar, Strategy

__all__ = [
    "ProximableFunction",
    "ProximableNorm",
    "ProximableMixedNorm",
    "norm",
    "mixed_norm",
    "soft_threshold",
    "pareto_search",
    "pareto_objective",
    "ptdot",
    "ptnorm1",
    "ptnorm2",
    "ptnorm_inf",
    "norm21",
    "norm22",
    "norm2inf",
    "relu",
    "NormOrder",
    "Strategy",
    "ProxFn",
    "Scalar",
]
