"""Config knobs for the non-analytic (long-range) correction."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from dynmatpy.core.types import EwaldParams


Array = np.ndarray

NAC_METHODS = ("gonze", "wang")


@dataclass(frozen=True)
class NACParams:
    """Born charges, dielectric tensor and the correction strategy.

    ``method`` is ``"gonze"`` (Ewald dipole-dipole sum, needs ``ewald``) or
    ``"wang"`` (charge sum folded into the force constants). ``e2`` is the
    squared electron charge in the caller's unit system.
    """

    born: Array
    dielectric: Array
    method: str = "gonze"
    e2: float = 1.0
    ewald: EwaldParams | None = None
    q_tolerance: float = 1e-5

    def __post_init__(self) -> None:
        born = np.asarray(self.born)
        if born.ndim != 3 or born.shape[1:] != (3, 3):
            raise ValueError("born must have shape (n_atoms, 3, 3).")
        if np.asarray(self.dielectric).shape != (3, 3):
            raise ValueError("dielectric must have shape (3, 3).")
        if self.method not in NAC_METHODS:
            raise ValueError(f"Unknown NAC method '{self.method}'. Expected one of: {', '.join(NAC_METHODS)}.")
        if self.method == "gonze" and self.ewald is None:
            raise ValueError("The 'gonze' method requires EwaldParams.")
        if self.q_tolerance <= 0.0:
            raise ValueError("q_tolerance must be positive.")
