"""Legacy project name resolution."""
from pathlib import PurePath
from typing import Dict, Optional, Union
import logging

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "GAME"

# Projects whose lumps use a different prefix than their file name.
# vikings.rpg names its lumps VIKING.*; do not generalize to other plurals.
PROJECT_NAME_OVERRIDES: Dict[str, str] = {
    "VIKINGS": "VIKING",
}


def resolve_project_name(path: Optional[Union[str, PurePath]]) -> str:
    """Derive the short identifier used to prefix legacy lump names.

    The file or directory name with its extension stripped, upper-cased.
    """
    if path is None or str(path) == "":
        return DEFAULT_PROJECT_NAME

    pure = PurePath(path)
    name = pure.stem or pure.name
    if not name:
        return DEFAULT_PROJECT_NAME

    project_name = name.upper()
    project_name = PROJECT_NAME_OVERRIDES.get(project_name, project_name)
    logger.debug(f"Detected project name {project_name!r} from path {str(path)!r}")
    return project_name
