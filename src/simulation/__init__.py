"""Simulation package shim.

This module exposes the Simulation class at `src.simulation` so imports
such as `from src.simulation import Simulation` work.
"""
from .simulation import Simulation

__all__ = ["Simulation"]
