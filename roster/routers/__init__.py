"""
FastAPI routers.

Each module exposes an APIRouter included by roster.app.create_app.
"""
