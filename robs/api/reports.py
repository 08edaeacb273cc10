"""Sales report API endpoints"""

from datetime import date, timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import get_db
from robs.schemas.sales import (
    DailySalesListResponse,
    DailySalesResponse,
    SalesSummaryResponse,
    TopItemResponse,
)
from robs.services.errors import ValidationFailed
from robs.services.ledger import DailyLedger, settlement_day

router = APIRouter()


@router.get("/daily", response_model=DailySalesListResponse)
async def list_daily_sales(
    page: int = Query(1, ge=1),
    page_size: int = Query(30, ge=1, le=366),
    db: AsyncSession = Depends(get_db),
):
    """Daily rollups, newest day first"""
    days, total = await DailyLedger(db).list_days(page, page_size)
    return DailySalesListResponse(
        items=[DailySalesResponse.model_validate(d) for d in days],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/daily/{day}", response_model=DailySalesResponse)
async def get_daily_sales(
    day: date,
    db: AsyncSession = Depends(get_db),
):
    record = await DailyLedger(db).get_day(day)
    if not record:
        raise HTTPException(status_code=404, detail="No sales recorded for this day")
    return record


@router.get("/summary", response_model=SalesSummaryResponse)
async def sales_summary(
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """Totals over an inclusive date range (default: the last 7 days)"""
    end = end or settlement_day()
    start = start or end - timedelta(days=6)
    if start > end:
        raise ValidationFailed("Start date must not be after end date", start=start, end=end)
    return await DailyLedger(db).summarize(start, end)


@router.get("/top-items", response_model=List[TopItemResponse])
async def top_items(
    limit: int = Query(10, ge=1, le=100),
    start: Optional[date] = None,
    end: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """Best-selling menu items by quantity"""
    if start and end and start > end:
        raise ValidationFailed("Start date must not be after end date", start=start, end=end)
    return await DailyLedger(db).top_items(limit, start, end)
