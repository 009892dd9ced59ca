"""Storefront API Router - aggregates all API routes."""

from fastapi import APIRouter

from app.api import auth, health, products, users

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(products.router)
