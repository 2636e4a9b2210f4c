from .trackers import router as trackers_router

__all__ = ["trackers_router"]
