"""Application manifests and discovery."""

from .discovery import discover_applications, find_manifests
from .manifest import MANIFEST_FILE, application_from_payload, parse_manifest
from .models import Application, AppRef, Dependency, PathRef, classify_dependency

__all__ = [
    "AppRef",
    "Application",
    "Dependency",
    "MANIFEST_FILE",
    "PathRef",
    "application_from_payload",
    "classify_dependency",
    "discover_applications",
    "find_manifests",
    "parse_manifest",
]
