"""
Module processing service.

Usage:
    from trainforge.services.processing import ModuleAssembler
"""

from trainforge.services.processing.pipeline import ModuleAssembler

__all__ = ["ModuleAssembler"]
