"""Rewrites asset references in the entry document to the versioned folder."""

import os
import re
from typing import Optional, Tuple

from s3deployer.errors import RewriteFailed
from s3deployer.errors_catalog import actionable_error

ASSET_REFERENCE = re.compile(
    r"""(?P<attr>\b(?:src|href)=)(?P<quote>["'])"""
    r"""(?![a-z][a-z0-9+.\-]*:)(?!//)(?!\.\./)"""
    r"""(?P<lead>\./|/)?(?P<path>[^"'<>]+?\.(?:js|css))(?P=quote)""",
    re.IGNORECASE,
)


def _already_versioned(lead: Optional[str], path: str, root: str) -> bool:
    # "/{version}/app.js" written by an earlier run: the prefixed path is not in
    # the build, the unprefixed one is.
    if lead != "/" or "/" not in path:
        return False
    _, rest = path.split("/", 1)
    return not os.path.isfile(os.path.join(root, path)) and os.path.isfile(os.path.join(root, rest))


def rewrite_references(content: str, version: str, root: Optional[str] = None) -> Tuple[str, int]:
    """Returns the rewritten content and the number of rewritten references.

    With ``root`` set, root-relative references that already point into a
    version folder of that build directory are left as they are.
    """
    count = 0

    def _prefix(match):
        nonlocal count
        path = match.group("path")
        if root is not None and _already_versioned(match.group("lead"), path, root):
            return match.group(0)
        count += 1
        quote = match.group("quote")
        return f"{match.group('attr')}{quote}/{version}/{path}{quote}"

    return ASSET_REFERENCE.sub(_prefix, content), count


class EntryRewriter:
    """Prefixes relative ``.js``/``.css`` references with ``/{version}/``."""

    def __init__(self, logger):
        self.logger = logger

    def rewrite(self, entry_path: str, version: str, build_path: Optional[str] = None) -> int:
        try:
            with open(entry_path, "r", encoding="utf-8") as file_obj:
                content = file_obj.read()
        except OSError as exc:
            raise RewriteFailed(
                actionable_error("entry_rewrite_failed", path=entry_path, reason=str(exc))
            ) from exc

        rewritten, count = rewrite_references(
            content,
            version,
            root=build_path or os.path.dirname(entry_path),
        )
        if count == 0:
            self.logger.warning("No relative script or stylesheet references found in %s", entry_path)
            return 0

        try:
            with open(entry_path, "w", encoding="utf-8") as file_obj:
                file_obj.write(rewritten)
        except OSError as exc:
            raise RewriteFailed(
                actionable_error("entry_rewrite_failed", path=entry_path, reason=str(exc))
            ) from exc

        self.logger.info("Rewrote %s asset reference(s) in %s to version %s", count, entry_path, version)
        return count
