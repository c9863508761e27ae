"""Actionable error catalog for s3deployer."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "environments_missing": {
        "what": "Environment configuration is missing.",
        "next": "Add an `environments` mapping with at least one entry to the config file.",
    },
    "environment_missing": {
        "what": "No {environment} environment configuration found.",
        "next": "Choose one of: {available}.",
    },
    "object_store_incomplete": {
        "what": "Something is missing in the {environment} object store configuration ({missing}).",
        "next": "Set both `region` and `bucket` for the environment.",
    },
    "git_hash_unavailable": {
        "what": "Git hash was not found.",
        "next": "Run the deploy inside a git checkout or disable `versioning.git_hash`.",
    },
    "versioning_misconfigured": {
        "what": "Versioning is enabled, but timestamp, git_hash and custom are all unset.",
        "next": "Enable at least one of them or set `versioning: false`.",
    },
    "entry_rewrite_failed": {
        "what": "Could not rewrite entry document {path}: {reason}",
        "next": "Check that `entry_html` names a file inside the build directory.",
    },
    "deploy_record_failed": {
        "what": "{path} was unable to be created: {reason}",
        "next": "Check write permissions on the build directory.",
    },
    "no_files_found": {
        "what": "No files to upload in {path} matching `{pattern}`.",
        "next": "Run the build first or adjust `path_glob`.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
