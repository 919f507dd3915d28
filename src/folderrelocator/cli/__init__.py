"""Command line interface for FolderRelocator."""
