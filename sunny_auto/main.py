from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sunny_auto.core.config import settings
from sunny_auto.core.errors import Cancelled, ShopError
from sunny_auto.core.navigation import home_route, route_table
from sunny_auto.api import board, catalog, customers, finances, notifications, profile, rewards
from sunny_auto.core.logger import setup_logging, logger
from sunny_auto.services.pricing import report_price_divergence
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Sunny Auto Backend")
    report_price_divergence()
    yield
    # Shutdown
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

# Domain errors carry a message meant for the user
@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    logger.warning(f"⚠️ {request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

# The client went away before the result was committed
@app.exception_handler(Cancelled)
async def cancelled_handler(request: Request, exc: Cancelled):
    logger.info(f"🚫 {request.method} {request.url.path} cancelled: {exc}")
    return JSONResponse(status_code=499, content={"message": "Request cancelled"})

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"🔥 UNHANDLED ERROR: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(catalog.router, tags=["Catalog"])
app.include_router(profile.router, tags=["Profile"])
app.include_router(rewards.router, tags=["Rewards"])
app.include_router(customers.router, tags=["Admin Customers"])
app.include_router(finances.router, tags=["Admin Finances"])
app.include_router(board.router, tags=["Admin Appointments"])
app.include_router(notifications.router, tags=["Admin Notifications"])
app.include_router(profile.admin_router, tags=["Admin Profile"])
app.include_router(catalog.admin_router, tags=["Admin Services"])

@app.get("/")
async def root():
    return RedirectResponse(url=home_route())

@app.get("/api/routes")
async def routes():
    return route_table()

@app.get("/health")
async def health_check():
    return {"status": "ok", "environment": settings.ENVIRONMENT, "timestamp": datetime.now().isoformat()}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("sunny_auto.main:app", host="0.0.0.0", port=settings.PORT, reload=True)
