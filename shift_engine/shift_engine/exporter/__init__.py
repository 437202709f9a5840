"""Export schema snapshots as DMD model definition files."""

from shift_engine.exporter.dmd_exporter import export_to_directory, generate_dmd_content

__all__ = [
    "export_to_directory",
    "generate_dmd_content",
]
