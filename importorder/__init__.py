"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""
IMPORTORDER - import block sorting
A CLI tool that regroups and sorts the import block of pretty-formatted source files
"""

__version__ = "0.1.0"
