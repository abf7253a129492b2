"""Listing of Atlas Local containers as display rows."""

import asyncio
from dataclasses import replace
from typing import List, Optional

from atlas_local.config import get_settings
from atlas_local.managers.connection_resolver import connection_string, display_name
from atlas_local.managers.runtime_client import (
    ATLAS_LOCAL_LABEL,
    DockerRuntimeClient,
    RuntimeClient,
)
from atlas_local.models.containers import ContainerRecord
from atlas_local.schemas import DisplayRow
from atlas_local.utils import get_logger
from atlas_local.utils.exceptions import InspectFailedError

logger = get_logger(__name__)

UNKNOWN_VERSION = "Unknown"


def filter_rows(rows: List[DisplayRow], criteria: str) -> List[DisplayRow]:
    """
    Filter rows by a case-insensitive substring of their name or version.

    Args:
        rows: Rows to filter
        criteria: Search text, blank keeps every row

    Returns:
        Matching rows in their original order
    """
    if not criteria or not criteria.strip():
        return list(rows)

    needle = criteria.lower()
    return [
        row for row in rows if needle in row.name.lower() or needle in row.version.lower()
    ]


def status_color(status: str) -> str:
    """Classify a runtime status text for display."""
    if "Up" in status:
        return "success"
    if "Exited" in status:
        return "error"
    if "Created" in status:
        return "warning"
    return "default"


class ListingManager:
    """Builds the container table from the runtime.

    Concurrent callers share one outstanding listing instead of each issuing
    their own runtime calls.
    """

    def __init__(self, runtime: RuntimeClient | None = None) -> None:
        """
        Initialize listing manager.

        Args:
            runtime: Runtime client, defaults to the Docker runtime
        """
        self.settings = get_settings()
        self.runtime: RuntimeClient = runtime or DockerRuntimeClient()
        self._inflight: Optional[asyncio.Task] = None

    async def list_rows(self, criteria: str = "") -> List[DisplayRow]:
        """
        List Atlas Local containers.

        Args:
            criteria: Optional name/version filter

        Returns:
            Display rows in the order reported by the runtime

        Raises:
            RuntimeUnavailableError: If the container list cannot be fetched
            InspectFailedError: If an inspect fails in strict mode
        """
        if self._inflight is None or self._inflight.done():
            self._inflight = asyncio.create_task(self._collect_rows())
            self._inflight.add_done_callback(self._clear_inflight)
        else:
            logger.debug("Joining in-flight container listing")

        rows = await asyncio.shield(self._inflight)
        return filter_rows(rows, criteria)

    def _clear_inflight(self, task: asyncio.Task) -> None:
        if self._inflight is task:
            self._inflight = None
        # Joined callers may all be cancelled; retrieve the error so asyncio does not report it
        if not task.cancelled():
            task.exception()

    async def _collect_rows(self) -> List[DisplayRow]:
        records = await asyncio.to_thread(self.runtime.list_containers, ATLAS_LOCAL_LABEL)
        if not self.settings.include_stopped:
            records = [record for record in records if record.status.startswith("Up")]

        inspected = await asyncio.gather(*(self._inspect(record) for record in records))
        rows = [
            self._to_row(record, details)
            for record, details in zip(records, inspected)
        ]

        logger.info("Listed Atlas Local containers", extra={"count": len(rows)})
        return rows

    async def _inspect(self, record: ContainerRecord) -> Optional[ContainerRecord]:
        try:
            return await asyncio.to_thread(self.runtime.inspect_container, record.id)
        except InspectFailedError as e:
            if self.settings.strict_mode:
                raise
            logger.warning(
                "Inspect failed, showing container without details",
                extra={"container_id": record.id, "error": str(e)},
            )
            return None

    def _to_row(
        self, listed: ContainerRecord, inspected: Optional[ContainerRecord]
    ) -> DisplayRow:
        """
        Build a display row from the listed container and its inspect result.

        Status, labels and names come from the list entry; env and ports from
        the inspect. Without an inspect the list entry's ports are used and no
        credentials are known.
        """
        if inspected is None:
            record = listed
            version = listed.labels.get("version") or UNKNOWN_VERSION
        else:
            record = replace(
                listed,
                names=listed.names or inspected.names,
                ports=inspected.ports,
                env=inspected.env,
            )
            version = listed.labels.get("version", "")

        return DisplayRow(
            id=record.id,
            name=display_name(record),
            status=record.status,
            version=version,
            connection_string=connection_string(record),
        )

