"""Ordered entity containers shared by the scheduler and modulation hosts."""
from .entity import Entity
from .modulation import ModulationHost, Modulator
from .ordered import OrderedEntityList

__all__ = [
    "Entity",
    "ModulationHost",
    "Modulator",
    "OrderedEntityList",
]
