"""
Router registration for the leaderboard API.
"""
from fastapi import FastAPI

from app.api import auth, friends, games, leaderboard, scores, users


def include_routers(app: FastAPI) -> None:
    """Include all API routers with the FastAPI application."""
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(games.router, prefix="/api", tags=["games"])
    app.include_router(scores.router, prefix="/api", tags=["scores"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(friends.router, prefix="/api", tags=["friends"])
    app.include_router(leaderboard.router, prefix="/api", tags=["leaderboard"])
