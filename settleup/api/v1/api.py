from fastapi import APIRouter
from settleup.api.v1.endpoints import balances, splits

api_router = APIRouter()

api_router.include_router(balances.router, prefix="/balances", tags=["balances"])
api_router.include_router(splits.router, prefix="/splits", tags=["splits"])
