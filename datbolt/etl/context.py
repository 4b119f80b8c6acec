"""Run-scoped handles shared by every migration step."""

import logging
from dataclasses import dataclass, field

from datbolt.config import Settings
from datbolt.db.source_client import SourceClient
from datbolt.db.target_engine import TargetDatabase

logger = logging.getLogger(__name__)


@dataclass
class MigrationContext:
    source: SourceClient
    target: TargetDatabase
    dry_run: bool = False
    batch_size: int = 1000
    closed: bool = field(default=False, init=False, repr=False)

    @classmethod
    def open(cls, settings: Settings, dry_run: bool = False) -> "MigrationContext":
        """Build and verify both handles. Raises ConnectionSetupError."""
        source = SourceClient.from_settings(settings)
        target = None
        try:
            target = TargetDatabase.from_settings(settings)
            source.ping()
            target.ping()
        except Exception:
            source.close()
            if target is not None:
                target.close()
            raise
        return cls(source=source, target=target, dry_run=dry_run,
                   batch_size=settings.migration_batch_size)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.source.close()
        self.target.close()
        logger.debug("Source and target connections closed")
