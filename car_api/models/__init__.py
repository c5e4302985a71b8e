from .colour import Colour
from .car import Car
