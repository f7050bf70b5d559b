"""Remote artifact lifecycle."""

from .artifacts import ArtifactStager, build_display_name, purge_remote_files, staged_artifact

__all__ = ["ArtifactStager", "build_display_name", "purge_remote_files", "staged_artifact"]
