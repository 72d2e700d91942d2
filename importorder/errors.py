"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
Exception types raised by the import sorting core.
"""


class ImportOrderError(Exception):
    """Base class for all import sorting errors."""


class InvalidOrderSpec(ImportOrderError):
    """Exception raised when an import order configuration cannot be compiled."""


class MalformedImportBlock(ImportOrderError):
    """Exception raised when the import block boundaries cannot be resolved."""
