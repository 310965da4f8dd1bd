"""
FastAPI routers grouped by page (auth, dashboard, items, wallet) plus the
page router that dispatches GET requests by file name.

Each module exposes an APIRouter for its form endpoints and the page
renderers that routers.pages dispatches to.
"""
