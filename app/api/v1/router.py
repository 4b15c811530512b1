from fastapi import APIRouter

from app.api.routers import auth, brands, dashboard, products, users

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(brands.router)
api_router.include_router(products.router)
api_router.include_router(dashboard.router)
