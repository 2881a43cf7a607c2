"""
Migration driver.

Pulls object processors from a source and hands each object's version
history to the version handler, one object at a time.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from tqdm import tqdm

from constants import MigrationDefaults
from plugins.protocols import ObjectSourceProtocol, ObjectVersionHandlerProtocol, is_object_source
from .errors import MigrationError, ObjectMigrationError

logger = logging.getLogger(__name__)


@dataclass
class MigrationSummary:
    """Totals of a migration run."""
    objects_processed: int = 0
    versions_processed: int = 0
    elapsed_seconds: float = 0.0

    def __str__(self) -> str:
        return (
            f"{self.objects_processed} objects, {self.versions_processed} versions "
            f"in {self.elapsed_seconds:.1f}s"
        )


class Migrator:
    """
    Migrates every object of a source, stopping after ``limit`` objects
    (a negative limit means no limit).
    """

    def __init__(
        self,
        source: ObjectSourceProtocol,
        handler: ObjectVersionHandlerProtocol,
        limit: int = MigrationDefaults.NO_LIMIT,
        show_progress: bool = True,
    ):
        if not is_object_source(source):
            raise ValueError("source must be an iterable of object processors")
        if handler is None:
            raise ValueError("handler cannot be None")
        self.source = source
        self.handler = handler
        self.limit = limit
        self.show_progress = show_progress

    def _limit_reached(self, index: int) -> bool:
        return self.limit >= 0 and index >= self.limit

    def run(self) -> MigrationSummary:
        """
        Run the migration.

        Raises:
            ObjectMigrationError: The first object that could not be migrated.
                Objects before it stay migrated.
            MigrationError: An object's history could not be read from the source.
        """
        summary = MigrationSummary()
        started = time.monotonic()
        total: Optional[int] = self.limit if self.limit >= 0 else None

        with tqdm(total=total, desc="Migrating objects", unit="object", disable=not self.show_progress) as pbar:
            for index, processor in enumerate(self.source):
                if self._limit_reached(index):
                    logger.debug(f"Stopping after {index} objects (limit {self.limit})")
                    break

                pid = processor.object_info.pid
                logger.info(f'Processing "{pid}"...')
                try:
                    session = processor.process_object(self.handler)
                except ObjectMigrationError as e:
                    logger.error(f"Migration of {e.pid} failed: {e}")
                    raise
                except MigrationError as e:
                    logger.error(f"Migration of {pid} failed: {e}")
                    raise

                summary.objects_processed += 1
                if session is not None:
                    summary.versions_processed += session.versions_processed
                pbar.update(1)

        summary.elapsed_seconds = time.monotonic() - started
        logger.info(f"Migration finished: {summary}")
        return summary
