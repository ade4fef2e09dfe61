"""
app/api/routers package marker.
"""

from app.api.routers.speed_router import router as speed_router

__all__ = [
    "speed_router",
]
