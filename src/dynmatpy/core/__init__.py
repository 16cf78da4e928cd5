from .dynmat import add_dipole_dipole, dynamical_matrix_at_q, symmetrize_hermitian
from .ewald import ReciprocalSum, reciprocal_kernel_sum
from .nac import charge_sum, contract_born, dipole_dipole, neutralize_self_term, screened_kernel
from .types import AtomMaps, EwaldParams, PeriodicImages, ScratchAllocationError

__all__ = [
    "AtomMaps",
    "EwaldParams",
    "PeriodicImages",
    "ScratchAllocationError",
    "dynamical_matrix_at_q",
    "symmetrize_hermitian",
    "add_dipole_dipole",
    "ReciprocalSum",
    "reciprocal_kernel_sum",
    "screened_kernel",
    "neutralize_self_term",
    "contract_born",
    "dipole_dipole",
    "charge_sum",
]
