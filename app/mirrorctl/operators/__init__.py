"""Package operators for installing and updating packages.

This module provides the abstract operator interface and the cargo
implementation.
"""

from mirrorctl.operators.base import Operator
from mirrorctl.operators.cargo import CargoOperator

__all__ = ["Operator", "CargoOperator"]
