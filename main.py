# src/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from auth.routes import router as auth_router
from content.routes import router as content_router
from admin.routes import router as admin_router
from news.routes import router as news_router
from database import init_db
from scheduler.tasks import start_scheduler, shutdown_scheduler

app = FastAPI(
    title="CodeShareForum Backend",
    description="API for the CodeShareForum community",
    version="0.1.0",
)

# Configure CORS
origins = ["http://localhost:8081", "http://localhost:19006", "http://localhost", "http://127.0.0.1:8081"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router)
app.include_router(content_router)
app.include_router(admin_router)
app.include_router(news_router)


@app.on_event("startup")
async def startup_event():
    """Create tables and start the notification scheduler."""
    init_db()
    start_scheduler()


@app.on_event("shutdown")
async def shutdown_event():
    shutdown_scheduler()


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "Welcome to CodeShareForum!"}
