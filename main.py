from fastapi import FastAPI
from resolver_app.config import settings
from resolver_app.api.v1 import resolutions, files

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Resolve URLs to their final destination and deduplicate URL lists",
    debug=settings.debug
)

@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "environment": settings.environment}




######## Include routers
app.include_router(resolutions.router, prefix="/api/v1")
app.include_router(files.router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug)
