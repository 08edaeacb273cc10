"""Table schemas"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from robs.models.table import TableStatus


class TableCreate(BaseModel):
    """Create table request"""
    number: int
    capacity: int = 4


class TableResponse(BaseModel):
    """Table response"""
    id: UUID
    number: int
    capacity: int
    status: TableStatus
    current_order_id: Optional[UUID]
    group_id: Optional[str]
    is_primary: bool
    reserved_by: Optional[str]
    reserved_time: Optional[datetime]

    class Config:
        from_attributes = True


class GroupRequest(BaseModel):
    table_numbers: List[int] = Field(..., min_length=2)
    primary_table_number: int


class GroupResponse(BaseModel):
    group_id: str
    tables: List[TableResponse]


class ReserveRequest(BaseModel):
    reserved_by: str
    reserved_time: Optional[datetime] = None


class BulkTableCreate(BaseModel):
    """Create several tables; existing numbers are skipped"""
    tables: List[TableCreate] = Field(..., min_length=1)
