#!/usr/bin/env python3
"""
tfbackend - Main entry point.

Runs the Terraform backend provisioning step.
"""

import sys

from tfbackend.main import main


if __name__ == "__main__":
    sys.exit(main())
