from fastapi import APIRouter

from stockledger.api.routes import products, transactions, users


api_router = APIRouter()
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(products.router, prefix="/products", tags=["Products"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
