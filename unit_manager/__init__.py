# unit_manager/__init__.py

from .units import MASS, Unit, UnitRegistry, UnknownUnitError
from .converter import convert, convert_all, convert_mass
from .system import ConverterSession, DisplayAwareMixin
from .manager import get_converter_session, get_store, set_display

__all__ = [
    "MASS",
    "Unit",
    "UnitRegistry",
    "UnknownUnitError",
    "convert",
    "convert_all",
    "convert_mass",
    "ConverterSession",
    "DisplayAwareMixin",
    "get_converter_session",
    "get_store",
    "set_display",
]
