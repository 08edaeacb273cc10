"""Table admin, grouping and reservation API endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends

from robs.api.deps import get_coordinator
from robs.models.table import TableStatus
from robs.schemas.table import (
    BulkTableCreate,
    GroupRequest,
    GroupResponse,
    ReserveRequest,
    TableCreate,
    TableResponse,
)
from robs.services.lifecycle import LifecycleCoordinator

router = APIRouter()


@router.get("", response_model=List[TableResponse])
async def list_tables(
    status: Optional[TableStatus] = None,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """List tables ordered by number"""
    return await coordinator.list_tables(status)


@router.post("", response_model=TableResponse, status_code=201)
async def create_table(
    table_data: TableCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.create_table(table_data.number, table_data.capacity)


@router.post("/group", response_model=GroupResponse, status_code=201)
async def group_tables(
    group_data: GroupRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Join free tables into one seating under a primary table"""
    group_id, tables = await coordinator.group_tables(
        group_data.table_numbers,
        group_data.primary_table_number,
    )
    return GroupResponse(
        group_id=group_id,
        tables=[TableResponse.model_validate(t) for t in tables],
    )


@router.post("/bulk", response_model=List[TableResponse], status_code=201)
async def create_tables(
    bulk_data: BulkTableCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Create several tables; numbers that already exist are skipped"""
    return await coordinator.create_tables([(t.number, t.capacity) for t in bulk_data.tables])


@router.delete("/group/{group_id}", response_model=List[TableResponse])
async def ungroup_tables(
    group_id: str,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.ungroup_tables(group_id)


@router.get("/{table_number}", response_model=TableResponse)
async def get_table(
    table_number: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.tables.get(table_number)


@router.delete("/{table_number}", status_code=204)
async def delete_table(
    table_number: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Delete a table that no order references"""
    await coordinator.delete_table(table_number)


@router.post("/{table_number}/reserve", response_model=TableResponse)
async def reserve_table(
    table_number: int,
    reserve_data: ReserveRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.reserve_table(
        table_number,
        reserve_data.reserved_by,
        reserve_data.reserved_time,
    )


@router.post("/{table_number}/release", response_model=TableResponse)
async def release_table(
    table_number: int,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Drop a reservation"""
    return await coordinator.release_table(table_number)
