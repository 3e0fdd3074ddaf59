from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable, Optional

from core.config import Settings, settings
from core.database import build_engine, create_session_factory, init_database
from core.logging_config import setup_logging
from core.scheduler import Scheduler

# Feature routes
from features.weather.routes.weather_routes import router as weather_router
from features.tides.routes.tide_routes import router as tide_router
from features.equipment.routes.equipment_routes import router as equipment_router
from features.equipment.routes.recommendation_routes import router as recommendation_router
from features.locations.routes.location_routes import router as location_router
from features.users.routes.auth_routes import router as auth_router
from features.users.routes.user_routes import router as user_router
from features.catches.routes.catch_routes import router as catch_router
from features.sync.routes.sync_routes import router as sync_router

# Services and clients
from features.weather.services.openweathermap_client import OpenWeatherMapClient
from features.weather.services.cached_weather_service import CachedWeatherService
from features.tides.services.worldtides_client import WorldTidesClient
from features.tides.services.cached_tide_service import CachedTideService
from features.equipment.services.equipment_service import EquipmentService
from features.equipment.services.recommendation_service import RecommendationService
from features.equipment.services.explanation_service import ExplanationService
from features.equipment.services.recommendation_report_service import RecommendationReportService
from features.locations.services.location_service import LocationService
from features.users.services.auth_service import AuthService
from features.users.services.preferences_service import PreferencesService
from features.catches.services.catch_log_service import CatchLogService
from features.catches.services.catch_analytics_service import CatchAnalyticsService
from features.sync.services.offline_data_service import OfflineDataService
from features.sync.services.sync_service import SyncService

# Repositories
from repositories.weather_repo import WeatherRepository
from repositories.tide_repo import TideRepository
from repositories.location_repo import LocationRepository
from repositories.equipment_repo import EquipmentRepository
from repositories.user_repo import UserRepository
from repositories.catch_repo import CatchRepository

logger = logging.getLogger(__name__)

def create_app(
    app_settings: Settings = settings,
    weather_client: Optional[OpenWeatherMapClient] = None,
    tide_client: Optional[WorldTidesClient] = None,
    clock: Callable[[], float] = time.time
) -> FastAPI:
    """Build the API. Provider clients and the clock can be swapped for tests."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        setup_logging()
        try:
            logger.info("🚀 Starting Trolling Assistant API...")

            engine = build_engine(app_settings.database_url)
            session_factory = create_session_factory(engine)
            init_database(engine, session_factory, app_settings.equipment_catalog_file)

            ttls = app_settings.get_cache_ttl()
            weather_repo = WeatherRepository(session_factory)
            tide_repo = TideRepository(session_factory)
            user_repo = UserRepository(session_factory)

            app.state.weather_client = weather_client or OpenWeatherMapClient(
                api_key=app_settings.openweathermap_api_key,
                base_url=app_settings.openweathermap_base_url,
                units=app_settings.weather_units,
                clock=clock
            )
            app.state.tide_client = tide_client or WorldTidesClient(
                api_key=app_settings.worldtides_api_key,
                base_url=app_settings.worldtides_base_url,
                datum=app_settings.tide_datum,
                clock=clock
            )

            # Store services in app state
            app.state.weather_service = CachedWeatherService(app.state.weather_client, weather_repo, ttls, clock)
            app.state.tide_service = CachedTideService(app.state.tide_client, tide_repo, ttls, clock)
            app.state.location_service = LocationService(LocationRepository(session_factory))
            app.state.equipment_service = EquipmentService(EquipmentRepository(session_factory))
            app.state.recommendation_service = RecommendationService(app.state.equipment_service)
            app.state.explanation_service = ExplanationService()
            app.state.auth_service = AuthService(user_repo, clock)
            app.state.preferences_service = PreferencesService(user_repo)
            app.state.catch_log_service = CatchLogService(CatchRepository(session_factory))
            app.state.catch_analytics_service = CatchAnalyticsService(app.state.catch_log_service)
            app.state.recommendation_report_service = RecommendationReportService(
                location_service=app.state.location_service,
                weather_service=app.state.weather_service,
                tide_service=app.state.tide_service,
                recommendation_service=app.state.recommendation_service,
                explanation_service=app.state.explanation_service,
                preferences_service=app.state.preferences_service
            )
            app.state.offline_data_service = OfflineDataService(
                weather_repo, tide_repo, app_settings.data_freshness_threshold, clock
            )
            app.state.sync_service = SyncService(
                location_service=app.state.location_service,
                weather_service=app.state.weather_service,
                tide_service=app.state.tide_service,
                offline_data_service=app.state.offline_data_service,
                clock=clock
            )

            app.state.scheduler = None
            if app_settings.auto_sync_enabled:
                app.state.scheduler = Scheduler(app.state.sync_service, app_settings.sync_interval_minutes)
                app.state.scheduler.start()

            logger.info("✨ API startup complete - ready to serve requests")
            yield

        except Exception as e:
            logger.error(f"❌ Startup error: {str(e)}")
            raise
        finally:
            logger.info("🔄 Shutting down API...")
            if getattr(app.state, "scheduler", None):
                app.state.scheduler.shutdown()

            for client_name in ("weather_client", "tide_client"):
                client = getattr(app.state, client_name, None)
                if client:
                    await client.close()

            logger.info("👋 API shutdown complete")

    app = FastAPI(
        title=app_settings.app_name,
        description="Weather, tides and equipment recommendations for salmon trolling",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include feature routers
    app.include_router(location_router)
    app.include_router(weather_router)
    app.include_router(tide_router)
    app.include_router(equipment_router)
    app.include_router(recommendation_router)
    app.include_router(auth_router)
    app.include_router(user_router)
    app.include_router(catch_router)
    app.include_router(sync_router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "time": datetime.now().isoformat()
        }

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
