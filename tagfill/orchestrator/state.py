#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Processed-file state for resumable runs.

ProcessedSet holds the paths that reached a terminal outcome in this run.
With a journal path it also appends each decision as a JSON line and
replays the file on startup, so progress survives a full process restart.
A read-only set replays the journal but never appends to it (dry runs).
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, Optional

from ..utilities.logger import get_logger


class ProcessedSet:
    """
    Append-only set of settled file paths.

    Args:
        journal_path: Optional JSON-lines file backing the set
        logger: Injected logger
        read_only: Replay the journal but keep new entries in memory
    """

    def __init__(self, journal_path: Optional[str] = None,
                 logger: Optional[logging.Logger] = None, read_only: bool = False):
        self.journal_path = Path(journal_path) if journal_path else None
        self.read_only = read_only
        self.logger = logger or get_logger("state")
        self._outcomes: Dict[str, str] = {}

    def load(self) -> int:
        """
        Replay the journal into memory.

        Returns:
            Number of paths restored
        """
        if not self.journal_path or not self.journal_path.exists():
            return 0

        with open(self.journal_path, 'r', encoding='utf-8') as f:
            for line_number, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                    self._outcomes[entry["path"]] = entry.get("outcome", "")
                except (json.JSONDecodeError, KeyError, TypeError):
                    self.logger.warning(
                        f"[State] Ignoring bad journal line {line_number} in {self.journal_path}"
                    )

        self.logger.info(f"[State] Restored {len(self._outcomes)} settled files from journal")
        return len(self._outcomes)

    def add(self, path: str, outcome: str = "") -> None:
        """Mark path as settled; re-adding a settled path is a no-op"""
        if path in self._outcomes:
            return

        self._outcomes[path] = outcome

        if self.journal_path and not self.read_only:
            self.journal_path.parent.mkdir(parents=True, exist_ok=True)
            entry = {
                "path": path,
                "outcome": outcome,
                "timestamp": datetime.now().isoformat()
            }
            with open(self.journal_path, 'a', encoding='utf-8') as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")

    def outcome(self, path: str) -> Optional[str]:
        return self._outcomes.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._outcomes

    def __len__(self) -> int:
        return len(self._outcomes)

    def __iter__(self) -> Iterator[str]:
        return iter(self._outcomes)

    def __repr__(self) -> str:
        return f"ProcessedSet(count={len(self)}, journal={self.journal_path}, read_only={self.read_only})"
