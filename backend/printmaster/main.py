import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from printmaster import config
from printmaster.api import cart, catalog, custom_print, dashboard, inventory, orders, session
from printmaster.db.store import get_store
from printmaster.errors import NotFound, ValidationError
from printmaster.state import seeded_state, set_state

logger = logging.getLogger(__name__)

app = FastAPI(title="PrintMaster Pro")

# CORS for frontend dev
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", "http://localhost:80"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(session.router, prefix="/session", tags=["session"])
app.include_router(catalog.router, prefix="/catalog", tags=["catalog"])
app.include_router(cart.router, prefix="/cart", tags=["cart"])
app.include_router(custom_print.router, prefix="/custom-print", tags=["custom-print"])
app.include_router(orders.router, prefix="/orders", tags=["orders"])
app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
app.include_router(inventory.router, prefix="/inventory", tags=["inventory"])


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup():
    # catalog, stock and expenses are seeded; session, cart and orders come from the store
    state = seeded_state()
    get_store().load_into(state)
    set_state(state)


@app.get("/")
async def root():
    return {"status": "ok", "service": "printmaster"}


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
