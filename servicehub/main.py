from fastapi import FastAPI
from servicehub.database import Base, engine
from fastapi.middleware.cors import CORSMiddleware
from servicehub.config import CORS_ORIGINS
from servicehub.errors import register_error_handlers
from servicehub.middleware import add_request_id_and_process_time
import servicehub.models  # noqa: F401  registers every table on Base.metadata
from servicehub.routes.auth_route import auth_router
from servicehub.routes.worker_route import worker_router
from servicehub.routes.booking_route import booking_router


Base.metadata.create_all(bind=engine)
app = FastAPI(
    title="ServiceHub API",
    version="1.0.0",
    description="API for a home-services marketplace: customers browse workers and book time slots, workers manage their profiles.",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(add_request_id_and_process_time)
register_error_handlers(app)


@app.get("/", status_code=200)
async def home():
    return {"message": "Welcome to ServiceHub REST API"}


app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(worker_router, prefix="/api", tags=["Workers"])
app.include_router(booking_router, prefix="/api", tags=["Bookings"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("servicehub.main:app", host="0.0.0.0", port=8000, reload=True)
