"""Build directory enumeration and object key planning."""

import mimetypes
from pathlib import Path
from typing import List, Optional

from s3deployer.constants import FALLBACK_CONTENT_TYPE
from s3deployer.errors import NoFilesFound
from s3deployer.errors_catalog import actionable_error
from s3deployer.models import UploadPlanEntry


def destination_key(relative_path: str, version: Optional[str], entry_html: str) -> str:
    if relative_path == entry_html or version is None:
        return relative_path
    return f"{version}/{relative_path}"


def is_hidden(relative_path: Path) -> bool:
    return any(part.startswith(".") for part in relative_path.parts)


def content_type_for(path: str) -> str:
    content_type, _ = mimetypes.guess_type(path)
    return content_type or FALLBACK_CONTENT_TYPE


class UploadPlanner:
    """Turns the files of a build directory into upload plan entries.

    Dotfiles and anything below a dot-directory are never planned.
    """

    def __init__(self, logger):
        self.logger = logger

    def plan(
        self,
        build_path: str,
        pattern: str,
        version: Optional[str],
        entry_html: str,
    ) -> List[UploadPlanEntry]:
        root = Path(build_path)
        files = sorted(
            (
                path
                for path in root.glob(pattern)
                if path.is_file() and not is_hidden(path.relative_to(root))
            ),
            key=lambda path: path.relative_to(root).as_posix(),
        )

        if not files:
            raise NoFilesFound(actionable_error("no_files_found", path=build_path, pattern=pattern))

        entries = []
        for path in files:
            relative_path = path.relative_to(root).as_posix()
            entries.append(
                UploadPlanEntry(
                    source_path=str(path),
                    destination_key=destination_key(relative_path, version, entry_html),
                    content_type=content_type_for(relative_path),
                )
            )

        self.logger.debug("Planned %s upload(s) from %s", len(entries), build_path)
        return entries
