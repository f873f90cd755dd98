from transit_tracker.api.routes.health import router as health_router
from transit_tracker.api.routes.pull import router as pull_router
from transit_tracker.api.routes.stats import router as stats_router
from transit_tracker.api.routes.vehicles import router as vehicles_router

__all__ = ["health_router", "pull_router", "stats_router", "vehicles_router"]
