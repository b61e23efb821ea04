#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Catalog discovery: find candidate audio files under a library root.
"""

import os
from pathlib import Path
from typing import Iterable, List

from ..errors import CatalogError


class FileCatalog:
    """Recursive, sorted listing of audio files with the given extensions"""

    AUDIO_EXTENSIONS = {'.mp3'}

    def __init__(self, extensions: Iterable[str] = None):
        if extensions:
            self.extensions = {self._normalize_ext(e) for e in extensions}
        else:
            self.extensions = set(self.AUDIO_EXTENSIONS)

    def scan(self, root: str) -> List[str]:
        """
        List audio files below root.

        Directories and files are visited in sorted order, so two scans
        of an unchanged tree return the same sequence.

        Args:
            root: Library root directory

        Returns:
            File paths as strings

        Raises:
            CatalogError: if root does not exist or is not a directory
        """
        path = Path(root)
        if not path.exists():
            raise CatalogError(f"Path not found: {root}")
        if not path.is_dir():
            raise CatalogError(f"Not a directory: {root}")

        files = []
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames.sort()
            for filename in sorted(filenames):
                if Path(filename).suffix.lower() in self.extensions:
                    files.append(os.path.join(dirpath, filename))

        return files

    def _normalize_ext(self, ext: str) -> str:
        ext = ext.strip().lower()
        return ext if ext.startswith('.') else f'.{ext}'
