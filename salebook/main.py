from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from salebook.config import settings
from salebook.database import engine, Base

# models are imported for their table definitions before create_all
from salebook.activity import models as activity_models  # noqa: F401
from salebook.clients import models as client_models  # noqa: F401
from salebook.ledger import models as ledger_models  # noqa: F401

from salebook.stock.products.router import router as product_router
from salebook.stock.inventory.router import router as inventory_router
from salebook.clients.router import router as client_router
from salebook.vendor.router import router as vendor_router
from salebook.sales.router import router as sales_router
from salebook.purchase.router import router as purchase_router
from salebook.accounts.expenses.router import router as expenses_router
from salebook.accounts.profit_loss.router import router as profit_loss_router
from salebook.ledger.router import router as ledger_router
from salebook.activity.router import router as activity_router
from salebook.dashboard.router import router as dashboard_router


if settings.LOG_FILE:
    logger.add(settings.LOG_FILE, rotation=settings.LOG_ROTATION, level=settings.LOG_LEVEL)


# Database startup
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application startup")
    Base.metadata.create_all(bind=engine)
    yield
    logger.info("Application shutdown")


# Create app
app = FastAPI(
    title="SALEBOOK",
    description="Sales, purchases, expenses and stock for a small shop, with a dashboard and profit & loss.",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database error"})


# Routers
app.include_router(product_router, prefix="/stock/products", tags=["Stock - Products"])
app.include_router(inventory_router, prefix="/stock/inventory", tags=["Stock - Inventory"])
app.include_router(client_router, prefix="/clients", tags=["Clients"])
app.include_router(vendor_router, prefix="/vendor", tags=["Vendor"])
app.include_router(sales_router, prefix="/sales", tags=["Sales"])
app.include_router(purchase_router, prefix="/purchase", tags=["Purchase"])
app.include_router(expenses_router, prefix="/accounts/expenses", tags=["Accounts - Expenses"])
app.include_router(profit_loss_router, prefix="/accounts/profit_loss", tags=["Accounts - Profit-Loss"])
app.include_router(ledger_router, prefix="/transactions", tags=["Transactions"])
app.include_router(activity_router, prefix="/activities", tags=["Activities"])
app.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("salebook.main:app", host=settings.SERVER_IP, port=settings.SERVER_PORT)
