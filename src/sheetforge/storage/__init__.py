"""Repositories for characters and homebrew content.

Import the repository modules directly::

    from sheetforge.storage import characters, homebrew

    sheet = await characters.compute_stored_character(session, character_id)
"""

from . import characters, homebrew
from .characters import CharacterImportError

__all__ = ["CharacterImportError", "characters", "homebrew"]
