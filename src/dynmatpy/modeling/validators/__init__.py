from .data_validator import validate_nac_params, validate_phonon_data

__all__ = ["validate_phonon_data", "validate_nac_params"]
