"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse

from meal_tracker.api.widget import WIDGET_HTML
from meal_tracker.app_logging import configure_logging
from meal_tracker.containers import AppContainer
from meal_tracker.domain.errors import CaptureError, CaptureInProgressError
from meal_tracker.domain.meals import MealRecord
from meal_tracker.services.tracker import (
    CAPTURE_FAILED_MESSAGE,
    Dashboard,
    MealEntry,
    WeekBar,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    container.tracker.start()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Meal tracker ready",
            extra={"storage_path": str(container.settings.storage_path)},
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    async def widget() -> HTMLResponse:
        """Serve the meal tracker widget."""
        return HTMLResponse(WIDGET_HTML)

    @app.get("/summary")
    async def summary(request: Request) -> dict[str, object]:
        """Return today's total, the goal and the weekly chart."""
        state_container: AppContainer = request.app.state.container
        return _serialize_dashboard(state_container.tracker.dashboard())

    @app.get("/meals")
    async def list_meals(request: Request) -> dict[str, object]:
        """Return the meals logged today."""
        state_container: AppContainer = request.app.state.container
        dashboard = state_container.tracker.dashboard()
        return {"meals": [_serialize_entry(meal) for meal in dashboard.meals]}

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    async def log_meal(request: Request) -> dict[str, object]:
        """Estimate calories for an uploaded photo and log the meal."""
        state_container: AppContainer = request.app.state.container
        image_bytes = await request.body()
        try:
            result = await state_container.tracker.log_photo(image_bytes)
        except CaptureInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        except CaptureError as exc:
            logger.warning(
                "Meal photo rejected",
                extra={"reason": str(exc), "size": len(image_bytes)},
            )
            raise HTTPException(
                status_code=422,
                detail=_format_capture_error(
                    state_container, exc, CAPTURE_FAILED_MESSAGE
                ),
            ) from exc
        return {
            "meal": _serialize_meal(result.meal) if result.meal else None,
            "persisted": result.persisted,
            "warning": result.warning,
            "summary": _serialize_dashboard(state_container.tracker.dashboard()),
        }

    @app.delete("/meals")
    async def clear_meals(request: Request) -> dict[str, object]:
        """Remove every logged meal."""
        state_container: AppContainer = request.app.state.container
        try:
            result = state_container.tracker.clear()
        except CaptureInProgressError as exc:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT, detail=str(exc)
            ) from exc
        return {
            "persisted": result.persisted,
            "warning": result.warning,
            "summary": _serialize_dashboard(state_container.tracker.dashboard()),
        }

    return app


def _format_capture_error(
    state_container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a user-facing capture error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _serialize_meal(meal: MealRecord) -> dict[str, object]:
    return {
        "id": meal.id,
        "image": meal.image,
        "calories": meal.calories,
        "created_at": meal.created_at,
    }


def _serialize_entry(entry: MealEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "image": entry.image,
        "calories": entry.calories,
        "time": entry.time,
        "created_at": entry.created_at,
    }


def _serialize_bar(bar: WeekBar) -> dict[str, object]:
    return {
        "day": bar.day.isoformat(),
        "weekday": bar.weekday,
        "calories": bar.calories,
        "ratio": bar.ratio,
    }


def _serialize_dashboard(dashboard: Dashboard) -> dict[str, object]:
    return {
        "today": dashboard.today.isoformat(),
        "today_calories": dashboard.today_calories,
        "goal_calories": dashboard.goal_calories,
        "progress_percent": dashboard.progress_percent,
        "meals": [_serialize_entry(meal) for meal in dashboard.meals],
        "week": [_serialize_bar(bar) for bar in dashboard.week],
        "week_total": dashboard.week_total,
        "meal_count": dashboard.meal_count,
        "loading": dashboard.loading,
        "error": dashboard.error,
    }
