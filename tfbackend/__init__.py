"""
tfbackend - provisions an Azure remote state backend for Terraform.
"""

__version__ = "1.0.0"
