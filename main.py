"""
PharmaDesk - Pharmacy Inventory, Sales & Purchasing
FastAPI Application Entry Point
"""
import uvicorn

from pharmadesk.app import create_app
from pharmadesk.core import get_settings

app = create_app()

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.APP_PORT,
        reload=settings.DEBUG
    )
