from fastapi import APIRouter

from brewbook.app.api.routes import ai, recipes, scrape

api_router = APIRouter()
api_router.include_router(recipes.router)
api_router.include_router(scrape.router)
api_router.include_router(ai.router)
