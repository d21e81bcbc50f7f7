"""
Template Resolver

Locates control templates on a search path. Template files are named

    <control_name>.<format>.<engine_tag>

e.g. select_control.xhtml.jinja. Directories are scanned in order and the first
directory containing a match wins.
"""

import glob
import re
from pathlib import Path
from typing import Iterable, List, Optional, Set

from instrument.exceptions import ResourceNotFoundError
from instrument.logger import _log_debug, log_template_resolved

FORMAT_TOKEN = re.compile(r"^[-_a-zA-Z0-9]+$")


def contained_base(directory: Path, control_name: str) -> Optional[Path]:
    """
    Get the absolute base path of a control's templates inside directory.

    Check to make sure the requested template is within the load path to avoid
    rendering something like /etc/passwd through a crafted control name.

    Args:
        directory: Search-path entry
        control_name: Control name (e.g., 'select_control')

    Returns:
        The resolved <directory>/<control_name> path, or None if it escapes directory
    """
    root = Path(directory).resolve()
    candidate = (root / control_name).resolve()
    if not candidate.is_relative_to(root):
        _log_debug(f"Skipping {directory}: '{control_name}' resolves outside of it")
        return None
    return candidate


def _glob(base: Path, suffix: str) -> List[Path]:
    pattern = glob.escape(str(base)) + suffix
    return [Path(match) for match in glob.glob(pattern)]


def find_template(search_path: Iterable[Path], control_name: Optional[str], format: str) -> Path:
    """
    Find the template file for a control rendered as format.

    Within a directory the first filesystem match is used; if several files
    match the same name and format a warning is logged.

    Args:
        search_path: Directories to scan, in priority order
        control_name: Control name (e.g., 'select_control')
        format: Output format (e.g., 'xhtml')

    Returns:
        Path to the template file

    Raises:
        ResourceNotFoundError: If nothing matches, or the first match is a directory
    """
    search_path = list(search_path)
    path = None

    if control_name is not None:
        for load_path in search_path:
            base = contained_base(load_path, control_name)
            if base is None:
                continue

            templates = _glob(base, f".{glob.escape(format)}.*")
            if templates:
                path = templates[0]
                log_template_resolved(control_name, format, path, len(templates))
                break

    if path is None or path.is_dir():
        raise ResourceNotFoundError(control_name, format, search_path)

    return path


def engine_tag(path: Path) -> str:
    """Get the engine tag of a template file: the text after its last dot."""
    return path.suffix.lstrip(".")


def list_formats(search_path: Iterable[Path], control_name: Optional[str]) -> Set[str]:
    """
    List every format a control has templates for.

    Args:
        search_path: Directories to scan
        control_name: Control name (e.g., 'select_control')

    Returns:
        Set of format names (e.g., {'xhtml', 'json'})
    """
    if control_name is None:
        return set()

    formats = set()
    for load_path in search_path:
        base = contained_base(load_path, control_name)
        if base is None:
            continue

        for template in _glob(base, ".*"):
            if template.is_dir():
                continue
            # select_control.xhtml.jinja -> ["xhtml", "jinja"]
            segments = template.name[len(base.name) + 1 :].split(".")
            if len(segments) >= 2 and FORMAT_TOKEN.match(segments[0]):
                formats.add(segments[0])

    return formats
