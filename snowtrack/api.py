"""HTTP API: snow report with forecast history, calendar data, maintenance."""

import logging
import os
from datetime import date
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from snowtrack.config.loader import load_config
from snowtrack.config.schema import AppConfig
from snowtrack.history.tracker import ForecastTracker
from snowtrack.models.common import utc_now, utc_now_iso
from snowtrack.pipeline.snow_report_pipeline import SnowReportPipeline, build_tracker
from snowtrack.reporting.calendar_view import build_calendar_data
from snowtrack.resolve.clock import resort_year
from snowtrack.storage.factory import build_store
from snowtrack.storage.store import ForecastStore

logger = logging.getLogger(__name__)

CONFIG_PATH = os.environ.get("SNOWTRACK_CONFIG", "config/snowtrack.yaml")

app = FastAPI(title="Snow Forecast Tracker", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config(CONFIG_PATH)


@lru_cache(maxsize=1)
def _cached_store() -> ForecastStore:
    return build_store(get_config().storage)


def get_store() -> ForecastStore:
    return _cached_store()


def get_pipeline(
    config: AppConfig = Depends(get_config), store: ForecastStore = Depends(get_store)
) -> SnowReportPipeline:
    return SnowReportPipeline(config, store)


def get_tracker(
    config: AppConfig = Depends(get_config), store: ForecastStore = Depends(get_store)
) -> ForecastTracker:
    return build_tracker(config, store)


def _error(message: str, e: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": message, "message": str(e)})


@app.get("/api/snow-report")
def get_snow_report(
    response: Response, pipeline: SnowReportPipeline = Depends(get_pipeline)
):
    """Current conditions plus the forecast, each slot with its date history."""
    try:
        payload = pipeline.run()
    except Exception as e:
        logger.exception("Error fetching snow report")
        return _error("Failed to fetch snow report", e)
    response.headers["Cache-Control"] = "s-maxage=300, stale-while-revalidate"
    return payload


@app.get("/api/calendar-data")
def get_calendar_data(
    response: Response,
    year: int | None = None,
    config: AppConfig = Depends(get_config),
    store: ForecastStore = Depends(get_store),
):
    """Per-date forecast timelines for one year."""
    try:
        data = build_calendar_data(
            store,
            year or resort_year(config.resort.timezone, utc_now()),
            config.history.key_prefix,
        )
    except Exception as e:
        logger.exception("Error fetching calendar data")
        return _error("Failed to fetch calendar data", e)
    data["fetchedAt"] = utc_now_iso()
    data["storageMode"] = config.storage.backend.value
    response.headers["Cache-Control"] = "s-maxage=300, stale-while-revalidate=60"
    return data


@app.get("/api/forecast-history/{iso_date}")
def get_forecast_history(iso_date: str, tracker: ForecastTracker = Depends(get_tracker)):
    try:
        iso_date = date.fromisoformat(iso_date).isoformat()
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Not a YYYY-MM-DD date: {iso_date}")
    try:
        entries = tracker.get_merged_history_for_date(iso_date)
    except Exception as e:
        logger.exception("Error fetching forecast history for %s", iso_date)
        return _error("Failed to fetch forecast history", e)
    return {"date": iso_date, "history": [e.to_dict() for e in entries]}


@app.post("/api/cleanup-forecasts")
def cleanup_forecasts(
    dry_run: bool = True,
    prefix: str | None = None,
    tracker: ForecastTracker = Depends(get_tracker),
):
    """Drop duplicate-timestamp history entries. Dry run unless dry_run=false."""
    try:
        report = tracker.cleanup_duplicate_timestamps(prefix, apply=not dry_run)
    except Exception as e:
        logger.exception("Cleanup error")
        return _error("Cleanup failed", e)
    body = report.to_dict()
    body["message"] = (
        "Dry run complete. POST with ?dry_run=false to apply changes."
        if report.dry_run
        else "Cleanup complete."
    )
    return body


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8777)
