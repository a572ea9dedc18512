"""Local package probes for different package managers.

This module exports the scanner classes for querying installed packages.
"""

from mirrorctl.scanners.base import InstalledPackage, Scanner
from mirrorctl.scanners.cargo import CargoScanner

__all__ = ["CargoScanner", "InstalledPackage", "Scanner"]
