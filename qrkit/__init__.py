"""QR Kit API — QR-bound kit entitlements and single-use content access."""

__version__ = "1.0.0"
