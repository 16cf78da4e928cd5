from .core import (
    AtomMaps,
    EwaldParams,
    PeriodicImages,
    ReciprocalSum,
    ScratchAllocationError,
    charge_sum,
    dipole_dipole,
    dynamical_matrix_at_q,
    reciprocal_kernel_sum,
    symmetrize_hermitian,
)
from .modeling import NACParams, PhononData
from .models import phonon_dynamical_matrices, phonon_dynamical_matrix

__all__ = [
    "AtomMaps",
    "EwaldParams",
    "PeriodicImages",
    "ScratchAllocationError",
    "dynamical_matrix_at_q",
    "symmetrize_hermitian",
    "ReciprocalSum",
    "reciprocal_kernel_sum",
    "dipole_dipole",
    "charge_sum",
    "PhononData",
    "NACParams",
    "phonon_dynamical_matrix",
    "phonon_dynamical_matrices",
]
