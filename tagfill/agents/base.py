#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Base class for processing agents.
All agents (MetadataResolver, CoverResolver, ReconciliationEngine) inherit from this.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..utilities.logger import get_logger


class BaseAgent(ABC):
    """
    Abstract base class for processing agents.

    Agents are responsible for specific tasks in the pipeline:
    - MetadataResolver: Turn a filename guess into canonical tags
    - CoverResolver: Find a cover image for a confirmed artist/album
    - ReconciliationEngine: Settle one file's tags and artwork
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize agent with an injected logger.

        Args:
            logger: Logger to report through (defaults to "tagfill.agents")
        """
        self.logger = logger or get_logger("agents")

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name identifier"""
        pass

    def log(self, message: str) -> None:
        """Log a message with agent name prefix"""
        self.logger.info(f"[{self.name}] {message}")

    def log_warning(self, message: str) -> None:
        """Log a warning message"""
        self.logger.warning(f"[{self.name}] {message}")
