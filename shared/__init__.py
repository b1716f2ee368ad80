"""
ElfScope Shared Module
=======================

Configuration, logging, and console presentation shared by the ElfScope
engine and command line.
"""

from shared.config import ScopeConfig

__all__ = ["ScopeConfig"]
