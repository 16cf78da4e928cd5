from .phonon import phonon_dynamical_matrices, phonon_dynamical_matrix

__all__ = ["phonon_dynamical_matrix", "phonon_dynamical_matrices"]
