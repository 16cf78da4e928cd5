from .fc_tools import enforce_charge_neutrality, enforce_translational_asr
from .geometry import atom_maps_from_supercell, periodic_images, reciprocal_vectors
from .schema import NAC_METHODS, NACParams, PhononData
from .units import (
    E2_EV_ANGSTROM,
    E2_HARTREE,
    E2_RYDBERG,
    charge_sum_factor,
    dipole_dipole_factor,
)
from .validators import validate_nac_params, validate_phonon_data

__all__ = [
    "PhononData",
    "NACParams",
    "NAC_METHODS",
    "atom_maps_from_supercell",
    "periodic_images",
    "reciprocal_vectors",
    "enforce_translational_asr",
    "enforce_charge_neutrality",
    "validate_phonon_data",
    "validate_nac_params",
    "E2_HARTREE",
    "E2_RYDBERG",
    "E2_EV_ANGSTROM",
    "dipole_dipole_factor",
    "charge_sum_factor",
]
