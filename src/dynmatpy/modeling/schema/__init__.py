from .nac_params import NAC_METHODS, NACParams
from .phonon_data import PhononData

__all__ = ["PhononData", "NACParams", "NAC_METHODS"]
