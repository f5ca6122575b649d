"""
API Router - JSON Endpoints
"""
from datetime import datetime

from fastapi import APIRouter

from pharmadesk import __version__
from pharmadesk.api import auth, dashboard, medicines, notifications, orders, prescriptions, transactions
from pharmadesk.api.parties import doctors_router, patients_router, suppliers_router

api_router = APIRouter()

# Include sub-routers
api_router.include_router(auth.router)
api_router.include_router(medicines.router)
api_router.include_router(patients_router)
api_router.include_router(doctors_router)
api_router.include_router(suppliers_router)
api_router.include_router(prescriptions.router)
api_router.include_router(transactions.router)
api_router.include_router(orders.router)
api_router.include_router(dashboard.router)
api_router.include_router(notifications.router)


@api_router.get("/status", tags=["API"])
def api_status():
    return {"status": "ok", "version": __version__, "timestamp": datetime.now().isoformat()}
