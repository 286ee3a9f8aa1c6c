"""
Application scaffolding: default web-app-manifest and bundled files.
"""

import json
from importlib import resources

from pwa_precache.config import MANIFEST_FILENAME, SCAFFOLD_FILES, default_manifest
from pwa_precache.core.storage import AppFileSystem
from pwa_precache.errors import MissingManifestData
from pwa_precache.utils.log import log


def _resource_bytes(name: str) -> bytes:
    return (resources.files("pwa_precache") / "resources" / name).read_bytes()


def prepare_app(app_fs: AppFileSystem, app_name: str) -> list[str]:
    """
    Create the files the PWA build needs in *app_fs* when they are missing:
    ``manifest.json`` and the bundled service-worker template and icon.

    Returns the relative paths written.
    """
    written: list[str] = []
    if not app_fs.path_exists(MANIFEST_FILENAME):
        app_fs.write_text(
            MANIFEST_FILENAME,
            json.dumps(default_manifest(app_name), indent=4),
        )
        written.append(MANIFEST_FILENAME)

    for name in SCAFFOLD_FILES:
        if app_fs.path_exists(name):
            continue
        app_fs.write_bytes(name, _resource_bytes(name))
        written.append(name)

    if written:
        log.info("Prepared %s: %s", app_name, ", ".join(written))
    return written


def clean_app(app_fs: AppFileSystem) -> bool:
    """Remove the application's ``manifest.json``; True when one existed."""
    if not app_fs.path_exists(MANIFEST_FILENAME):
        return False
    app_fs.remove(MANIFEST_FILENAME)
    log.info("Removed %s from %s", MANIFEST_FILENAME, app_fs.app_name)
    return True


def save_manifest(app_fs: AppFileSystem, manifest_data) -> None:
    """Persist *manifest_data* verbatim; non-string payloads are
    serialized as indented JSON."""
    if not manifest_data:
        raise MissingManifestData()
    if not isinstance(manifest_data, str):
        manifest_data = json.dumps(manifest_data, indent=4)
    app_fs.write_text(MANIFEST_FILENAME, manifest_data)
