# rpglump/__init__.py
"""Decoder for legacy RPG project lump containers."""
from .constants import DecoderLimits
from .container import LumpStore
from .errors import (
    CursorError,
    DimensionOutOfRangeError,
    LumpNotFoundError,
    MalformedContainerError,
    MalformedRecordError,
    RpgLumpError,
)
from .models import MapData
from .naming import resolve_project_name
from .project import DomainResult, GameData, Project, load_game_data

__version__ = '0.1.0'

__all__ = [
    'Project',
    'GameData',
    'DomainResult',
    'load_game_data',
    'LumpStore',
    'MapData',
    'DecoderLimits',
    'resolve_project_name',
    'RpgLumpError',
    'LumpNotFoundError',
    'MalformedContainerError',
    'MalformedRecordError',
    'CursorError',
    'DimensionOutOfRangeError',
]
