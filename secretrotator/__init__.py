"""Secret Rotator - random secret rotation for AWS Secrets Manager."""

__version__ = "0.1.0"
__author__ = "Secret Rotator Team"
