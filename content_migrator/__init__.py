#!/usr/bin/env python3
"""
Object store content migration tool
"""

__version__ = "0.1.0"

from content_migrator.core.config import MigrationConfig, load_config
from content_migrator.core.migrator import ContentMigrator
from content_migrator.core.results import ResultStore
from content_migrator.core.state import MigrationStatus
