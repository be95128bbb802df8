import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from orderdesk.core.config import settings
from orderdesk.api import auth, users, products, sales_orders, orders, dashboard, reports
from orderdesk.api.users import user_record
from orderdesk.core.database import async_session
import orderdesk.models  # Implicitly registers models

from orderdesk.core.init_db import init_db
from orderdesk.services.events import Collection, change_emitter
from orderdesk.services.product_service import ProductService, product_record
from orderdesk.services.production_service import ProductionService
from orderdesk.services.sales_order_service import (
    SalesOrderService,
    job_card_record,
    production_order_record,
    sales_order_record,
)
from orderdesk.repositories.user_repository import UserRepository
from orderdesk.services.state_store import LiveStateStore

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Spring Order Desk API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def hydrate_state_store(store: LiveStateStore, session_factory=async_session) -> None:
    """Load current records into the live state store."""
    async with session_factory() as session:
        store.load(Collection.USERS, (
            (u.username, user_record(u)) for u in await UserRepository(session).list_all()
        ))
        store.load(Collection.PRODUCTS, (
            (str(p.id), product_record(p)) for p in await ProductService(session).list_all()
        ))
        store.load(Collection.SALES_ORDERS, (
            (o.sales_order_id, sales_order_record(o)) for o in await SalesOrderService(session).list_all()
        ))
        production = ProductionService(session)
        store.load(Collection.ORDERS, (
            (o.order_number, production_order_record(o)) for o in await production.list_orders()
        ))
        store.load(Collection.JOB_CARDS, (
            (j.job_card_id, job_card_record(j)) for j in await production.list_job_cards()
        ))


@app.on_event("startup")
async def startup():
    await init_db()

    state_store = LiveStateStore(activity_log_size=settings.ACTIVITY_LOG_SIZE)
    await hydrate_state_store(state_store)

    # Keep the live state current with every committed write
    change_emitter.subscribe(state_store.apply)

    dashboard.init_dashboard_api(state_store)

    app.state.state_store = state_store
    app.state.change_emitter = change_emitter
    logger.info("Spring Order Desk API started")


@app.on_event("shutdown")
async def shutdown():
    state_store = getattr(app.state, "state_store", None)
    if state_store is not None:
        change_emitter.unsubscribe(state_store.apply)


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(products.router)
app.include_router(sales_orders.router)
app.include_router(orders.router)
app.include_router(dashboard.router)
app.include_router(reports.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
