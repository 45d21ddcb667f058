"""
biometrics: local Biometric Gate interface.

The application never sees biometric data, only a yes/no verdict from
the platform security layer.
"""

from biometrics.base import BiometricGate, UnavailableBiometricGate

__all__ = ["BiometricGate", "UnavailableBiometricGate"]
