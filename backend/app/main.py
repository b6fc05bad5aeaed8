import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Import lifespan manager and API router from their new locations
from app.db.lifespan import lifespan
from app.api.v1.router import api_router
from app.api.error_handlers import register_error_handlers

logger = logging.getLogger(__name__)

# Create FastAPI app instance using the lifespan manager
app = FastAPI(
    title="Device Catalogue API",
    description="API for managing device records with paginated, filterable reads.",
    version="0.1.0",
    lifespan=lifespan,  # Use the imported lifespan context manager
)

# --- CORS Middleware ---
origins = [
    "http://localhost",
    "http://localhost:5173",  # 本地開發環境
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,  # 使用明確的域名列表而不是 ["*"]
    allow_credentials=True,
    allow_methods=["*"],  # 允許所有方法
    allow_headers=["*"],  # 允許所有頭部
)
logger.info("CORS middleware added with specific origins.")

register_error_handlers(app)


# --- Test Endpoint (Before API v1 Router) ---
@app.get("/ping", tags=["Test"])
async def ping():
    return {"message": "pong"}


# --- Include API Routers ---
app.include_router(api_router, prefix="/api/v1")  # Add a /api/v1 prefix
logger.info("Included API router v1 at /api/v1.")


# --- Root Endpoint ---
@app.get("/", tags=["Root"])
async def read_root():
    """Provides a basic welcome message."""
    logger.info("--- Root endpoint '/' requested ---")
    return {"message": "Welcome to the Device Catalogue API"}


# --- Uvicorn Entry Point (for direct run, if needed) ---
if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Uvicorn server directly...")
    # Recommended to run via `uvicorn app.main:app --reload` from the backend directory.
    uvicorn.run(app, host="0.0.0.0", port=8000)
