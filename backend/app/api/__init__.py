"""API routes."""
from fastapi import APIRouter
from app.api import auth, social, feed, ratings, reviews, albums, health

api_router = APIRouter()

# Auth
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Social graph
api_router.include_router(social.router, prefix="/social", tags=["social"])
api_router.include_router(feed.router, prefix="/feed", tags=["feed"])

# Content
api_router.include_router(ratings.router, prefix="/ratings", tags=["ratings"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(albums.router, prefix="/albums", tags=["albums"])

# Health
api_router.include_router(health.router)
