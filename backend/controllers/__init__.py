"""Controllers: request validation and response shaping for the API routes."""

from .jokebook_controller import JokebookController, BadRequest

__all__ = ['JokebookController', 'BadRequest']
