import os
import sys

# Ensure this directory is in the path for Vercel and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import APP_NAME, CORS_ORIGINS
from supabase_client import is_supabase_configured
from routes.auth_routes import router as auth_router
from routes.course_routes import router as course_router
from routes.profile_routes import router as profile_router
from routes.certification_routes import router as certification_router
from routes.admin_routes import router as admin_router
from routes.analytics_routes import router as analytics_router

app = FastAPI(title=APP_NAME)


@app.get("/api/v1/health-check")
async def health():
    return {
        "status": "ok",
        "message": "Backend is alive!",
        "supabase_configured": is_supabase_configured(),
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(course_router)
app.include_router(profile_router)
app.include_router(certification_router)
app.include_router(admin_router)
app.include_router(analytics_router)


@app.get("/")
async def root():
    return {"status": f"{APP_NAME} backend is running."}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
