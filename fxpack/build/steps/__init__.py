"""打包步骤"""

from .build_step import BuildStep
from .metadata_step import ModuleMetadataStep, ReleaseMetadataStep
from .file_collection_step import FileCollectionStep
from .manifest_step import ChecksumManifestStep, ReleaseManifestStep
from .archive_step import ArchiveStep, CleanupStep
from .release_entries_step import SHELL_ENTRIES, ExtraModulesStep, ModuleBuildStep, ShellEntriesStep

__all__ = [
    "BuildStep",
    "ModuleMetadataStep",
    "ReleaseMetadataStep",
    "FileCollectionStep",
    "ChecksumManifestStep",
    "ReleaseManifestStep",
    "ArchiveStep",
    "CleanupStep",
    "SHELL_ENTRIES",
    "ShellEntriesStep",
    "ModuleBuildStep",
    "ExtraModulesStep",
]
