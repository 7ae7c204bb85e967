from fastapi import APIRouter

from .invoices import router as invoices_router

api_router = APIRouter()
api_router.include_router(invoices_router, tags=["invoices"])
