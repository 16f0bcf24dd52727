"""
Domain Layer

Pure reading logic with no inference or image-library dependencies beyond numpy.
Contains entities, value objects, ports (interfaces), and domain services.
"""

from .entities import *
from .value_objects import *
from .ports import *
from .services import *
from .exceptions import *
