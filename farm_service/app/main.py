# app/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, farm_engine
from shared.core.logging_config import configure_logging
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from .models.inventory import inventory_items, inventory_transactions, suppliers
from .models.feeding import feeding_records
from .router.inventory import (
    inventory_items_router,
    inventory_lookups_router,
    inventory_transactions_router,
    suppliers_router,
)
from .router.feeding import feeding_records_router

configure_logging()

# Create tables
Base.metadata.create_all(bind=farm_engine)

app = FastAPI(title=settings.APP_NAME)

# 1️⃣ CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2️⃣ Custom JSON response wrapper middleware
app.add_middleware(JsonResponseMiddleware)

# Register exception handlers
setup_exception_handlers(app)

# Routers
app.include_router(inventory_items_router.router)
app.include_router(inventory_transactions_router.router)
app.include_router(inventory_lookups_router.router)
app.include_router(suppliers_router.router)
app.include_router(feeding_records_router.router)


@app.get("/api/farm/health")
def health():
    return {"status": "healthy"}
