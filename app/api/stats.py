from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import admin_only, get_composer
from app.api.stats_utils.composer import StatsComposer
from app.models.stats.StatsResponse import (
    BarChartsResponse,
    DashboardStatsResponse,
    LineChartsResponse,
    PieChartsResponse,
)

router = APIRouter()


@router.get(
    "/stats",
    status_code=status.HTTP_200_OK,
    response_model=DashboardStatsResponse,
)
async def get_dashboard_stats(
    composer: StatsComposer = Depends(get_composer), admin=Depends(admin_only)
):
    """
    GET /api/v1/dashboard/stats - Admin dashboard summary

    Totals, month-over-month percent change, category shares, six-month
    order/revenue chart, gender ratio and the four latest transactions.
    Served from the admin-stats cache entry until a mutation purges it.
    """
    stats = await composer.dashboard_summary()
    return JSONResponse(content={"success": True, "stats": stats})


@router.get(
    "/pie",
    status_code=status.HTTP_200_OK,
    response_model=PieChartsResponse,
)
async def get_pie_charts(
    composer: StatsComposer = Depends(get_composer), admin=Depends(admin_only)
):
    """
    GET /api/v1/dashboard/pie - Order fulfillment, categories, stock,
    revenue breakdown, admin/customer split and user age groups.
    """
    charts = await composer.pie_chart_data()
    return JSONResponse(content={"success": True, "charts": charts})


@router.get(
    "/bar",
    status_code=status.HTTP_200_OK,
    response_model=BarChartsResponse,
)
async def get_bar_charts(
    composer: StatsComposer = Depends(get_composer), admin=Depends(admin_only)
):
    """GET /api/v1/dashboard/bar - Monthly counts: 6 months of users/products, 12 of orders."""
    charts = await composer.bar_chart_data()
    return JSONResponse(content={"success": True, "charts": charts})


@router.get(
    "/line",
    status_code=status.HTTP_200_OK,
    response_model=LineChartsResponse,
)
async def get_line_charts(
    composer: StatsComposer = Depends(get_composer), admin=Depends(admin_only)
):
    """GET /api/v1/dashboard/line - Twelve-month products, users, discount and revenue."""
    charts = await composer.line_chart_data()
    return JSONResponse(content={"success": True, "charts": charts})
