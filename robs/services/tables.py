"""Table occupancy, grouping and reservation state.

This store is the only writer of ``Table.status``; the lifecycle coordinator
calls it inside its transaction. Rows are read with ``FOR UPDATE`` when they
are about to change so that concurrent writers on the same table or group
serialize in the database.
"""

import uuid
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

import structlog
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import upsert
from robs.models.order import Order
from robs.models.table import Table, TableStatus
from robs.services.errors import Conflict, NotFound, ValidationFailed

logger = structlog.get_logger()


class TableStateStore:
    """Reads and writes table state within the caller's session"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, table_number: int, lock: bool = False) -> Table:
        query = select(Table).where(Table.number == table_number)
        if lock:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        table = result.scalar_one_or_none()
        if not table:
            raise NotFound(f"Table {table_number} not found", table_number=table_number)
        return table

    async def find(self, table_number: Optional[int]) -> Optional[Table]:
        if table_number is None:
            return None
        result = await self.db.execute(select(Table).where(Table.number == table_number))
        return result.scalar_one_or_none()

    async def list_tables(self, status: Optional[TableStatus] = None) -> List[Table]:
        query = select(Table)
        if status:
            query = query.where(Table.status == status)
        result = await self.db.execute(query.order_by(Table.number))
        return list(result.scalars().all())

    async def group_members(self, group_id: str, lock: bool = False) -> List[Table]:
        query = select(Table).where(Table.group_id == group_id).order_by(Table.number)
        if lock:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def _affected(self, table: Table) -> List[Table]:
        """The table itself, or every member of its group"""
        if table.group_id:
            return await self.group_members(table.group_id, lock=True)
        return [table]

    async def resolve_order_target(self, table_number: int) -> Table:
        """Return the table that may receive a new order.

        Secondary members of a group are rejected with the primary's number
        so the caller can redirect.
        """
        table = await self.get(table_number, lock=True)
        if table.is_secondary:
            primary = await self._primary_of(table.group_id)
            primary_number = primary.number if primary else None
            raise Conflict(
                f"Table {table.number} is grouped with Table {primary_number or '?'}. "
                "Please place the order from the main table.",
                table_number=table.number,
                primary_table_number=primary_number,
                group_id=table.group_id,
            )
        return table

    async def _primary_of(self, group_id: str) -> Optional[Table]:
        result = await self.db.execute(
            select(Table).where(Table.group_id == group_id, Table.is_primary.is_(True))
        )
        return result.scalar_one_or_none()

    async def occupy(self, table_number: int, order_id: UUID) -> List[Table]:
        """Seat ``order_id`` on the table (and its whole group).

        Fails if any affected table already hosts a different order.
        """
        table = await self.get(table_number, lock=True)
        members = await self._affected(table)
        for member in members:
            if member.current_order_id is not None and member.current_order_id != order_id:
                raise Conflict(
                    f"Table {member.number} is already occupied",
                    table_number=member.number,
                    current_order_id=member.current_order_id,
                )
        for member in members:
            member.status = TableStatus.OCCUPIED
            member.current_order_id = order_id
            member.reserved_by = None
            member.reserved_time = None
        logger.info(
            "Table occupied",
            table_numbers=[m.number for m in members],
            order_id=str(order_id),
        )
        return members

    async def free(self, table_number: int) -> List[Table]:
        """Release the table (and its whole group) for new seating"""
        table = await self.get(table_number, lock=True)
        members = await self._affected(table)
        for member in members:
            member.status = TableStatus.FREE
            member.current_order_id = None
        logger.info("Table freed", table_numbers=[m.number for m in members])
        return members

    async def group(self, table_numbers: Iterable[int], primary_number: int) -> List[Table]:
        """Join free, ungrouped tables under a new group id"""
        numbers = sorted(set(table_numbers))
        if len(numbers) < 2:
            raise ValidationFailed("At least two distinct tables are required to form a group")
        if primary_number not in numbers:
            raise ValidationFailed(
                "Primary table must be one of the grouped tables",
                primary_table_number=primary_number,
            )

        # Lock in number order so overlapping group requests cannot deadlock
        result = await self.db.execute(
            select(Table)
            .where(Table.number.in_(numbers))
            .order_by(Table.number)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        tables = list(result.scalars().all())

        missing = set(numbers) - {t.number for t in tables}
        if missing:
            raise NotFound(
                f"Tables {', '.join(str(n) for n in sorted(missing))} not found",
                table_numbers=sorted(missing),
            )

        busy = [t for t in tables if t.status != TableStatus.FREE or t.group_id]
        if busy:
            raise Conflict(
                f"Tables {', '.join(str(t.number) for t in busy)} are not available for grouping",
                table_numbers=[t.number for t in busy],
            )

        group_id = f"group_{uuid.uuid4().hex[:12]}"
        # Claim only rows still free and ungrouped
        claimed = await self.db.execute(
            update(Table)
            .where(
                Table.number.in_(numbers),
                Table.group_id.is_(None),
                Table.status == TableStatus.FREE,
            )
            .values(group_id=group_id)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount != len(numbers):
            raise Conflict(
                "Tables were grouped or seated concurrently",
                table_numbers=numbers,
            )
        for table in tables:
            table.group_id = group_id
            table.is_primary = table.number == primary_number

        logger.info(
            "Tables grouped",
            group_id=group_id,
            table_numbers=numbers,
            primary_table_number=primary_number,
        )
        return tables

    async def ungroup(self, group_id: str) -> List[Table]:
        """Dissolve a group, whatever its occupancy.

        The group's order stays on the primary table; secondary tables that
        were only seated because of the group are released.
        """
        members = await self.group_members(group_id, lock=True)
        if not members:
            raise NotFound(f"No tables found in group {group_id}", group_id=group_id)
        primary_order_id = next(
            (m.current_order_id for m in members if m.is_primary), None
        )
        for member in members:
            if not member.is_primary and member.current_order_id is not None \
                    and member.current_order_id == primary_order_id:
                member.status = TableStatus.FREE
                member.current_order_id = None
            member.group_id = None
            member.is_primary = False
        logger.info("Tables ungrouped", group_id=group_id, table_numbers=[m.number for m in members])
        return members

    async def reserve(
        self,
        table_number: int,
        reserved_by: str,
        reserved_time: Optional[datetime] = None,
    ) -> Table:
        table = await self.get(table_number, lock=True)
        if table.status != TableStatus.FREE:
            raise Conflict(
                f"Table {table_number} is {table.status.value} and cannot be reserved",
                table_number=table_number,
            )
        table.status = TableStatus.RESERVED
        table.reserved_by = reserved_by
        table.reserved_time = reserved_time
        return table

    async def release(self, table_number: int) -> Table:
        """Drop a reservation"""
        table = await self.get(table_number, lock=True)
        if table.status != TableStatus.RESERVED:
            raise Conflict(f"Table {table_number} is not reserved", table_number=table_number)
        table.status = TableStatus.FREE
        table.reserved_by = None
        table.reserved_time = None
        return table

    async def create(self, number: int, capacity: int) -> Table:
        if number is None or number < 1:
            raise ValidationFailed("Table number must be a positive integer", table_number=number)
        if capacity is None or capacity < 1:
            raise ValidationFailed("Table capacity must be at least 1", capacity=capacity)
        if await self.find(number):
            raise Conflict(f"Table with number {number} already exists", table_number=number)
        table = Table(number=number, capacity=capacity, status=TableStatus.FREE, is_primary=False)
        self.db.add(table)
        await self.db.flush()
        return table

    async def create_many(self, specs: Iterable[Tuple[int, int]]) -> List[Table]:
        """Create tables from ``(number, capacity)`` pairs.

        Numbers that already exist are skipped; only the new tables are
        returned.
        """
        wanted = {}
        for number, capacity in specs:
            if number is None or number < 1:
                raise ValidationFailed("Table number must be a positive integer", table_number=number)
            if capacity is None or capacity < 1:
                raise ValidationFailed("Table capacity must be at least 1", capacity=capacity)
            wanted.setdefault(number, capacity)
        if not wanted:
            raise ValidationFailed("At least one table is required")

        tables = Table.__table__
        now = datetime.utcnow()
        result = await self.db.execute(
            upsert(self.db, tables)
            .values([
                {
                    "id": uuid.uuid4(),
                    "number": number,
                    "capacity": capacity,
                    "status": TableStatus.FREE,
                    "is_primary": False,
                    "created_at": now,
                    "updated_at": now,
                }
                for number, capacity in sorted(wanted.items())
            ])
            .on_conflict_do_nothing(index_elements=[tables.c.number])
            .returning(tables.c.number)
        )
        created = sorted(result.scalars().all())

        result = await self.db.execute(
            select(Table).where(Table.number.in_(created)).order_by(Table.number)
        )
        logger.info(
            "Tables created",
            table_numbers=created,
            skipped=sorted(set(wanted) - set(created)),
        )
        return list(result.scalars().all())

    async def delete(self, table_number: int) -> None:
        table = await self.get(table_number, lock=True)
        result = await self.db.execute(
            select(func.count(Order.id)).where(Order.table_number == table_number)
        )
        if result.scalar() or table.current_order_id is not None:
            raise Conflict(
                f"Table {table_number} is referenced by orders and cannot be deleted",
                table_number=table_number,
            )
        await self.db.delete(table)
