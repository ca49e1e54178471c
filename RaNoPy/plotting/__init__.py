from . import functions
