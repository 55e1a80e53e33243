# API routers package

from weather_api.routers.auth import router as auth_router
from weather_api.routers.users import router as users_router
from weather_api.routers.weather import router as weather_router

# Re-export for easy importing
auth = auth_router
users = users_router
weather = weather_router
