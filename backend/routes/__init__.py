"""Route modules for the Jokebook API."""

from . import jokebook
from . import health

__all__ = ['jokebook', 'health']
