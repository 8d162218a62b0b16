"""Resolve where the mapping for an output folder lives.

Two layouts are supported:

* new: ``<parent>/.mapping/<output folder name>.json``, outside the folder
  handed to the agent;
* legacy: ``<output folder>/mapping.json``.

Lookups walk from the given folder up through its ancestors so a file deep
inside an output tree still finds the mapping of the tree's root.
"""

from pathlib import Path

MAPPING_FOLDER = ".mapping"
MAPPING_FILENAME = "mapping.json"


def mapping_path_for(output_folder: Path) -> Path:
    """New-layout mapping path for *output_folder* (may not exist yet)."""
    return output_folder.parent / MAPPING_FOLDER / f"{output_folder.name}.json"


def legacy_mapping_path_for(output_folder: Path) -> Path:
    return output_folder / MAPPING_FILENAME


def find_mapping_path(folder: Path, walk_up: bool = True) -> Path | None:
    """First existing mapping for *folder* or, with *walk_up*, its nearest ancestor."""
    folder = folder.absolute()
    candidates = (folder, *folder.parents) if walk_up else (folder,)
    for candidate in candidates:
        if candidate.name:
            new_path = mapping_path_for(candidate)
            if new_path.is_file():
                return new_path
        legacy_path = legacy_mapping_path_for(candidate)
        if legacy_path.is_file():
            return legacy_path
    return None


def resolve_mapping_path(folder: Path) -> Path:
    """Existing mapping path, or the new-layout path for *folder*."""
    found = find_mapping_path(folder)
    return found if found is not None else mapping_path_for(folder.absolute())


def mapping_exists(folder: Path) -> bool:
    return find_mapping_path(folder) is not None
