from .builder import build_program
from .printer import format_program
