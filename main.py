#!/usr/bin/env python3
"""
FastAPI application entry point for Visa Navigator API
"""

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.navigator.api.endpoints import router as navigator_router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Visa Navigator API",
    description="Visa eligibility scoring and multi-step path recommendation",
    version="0.1.0",
)

# Comma-separated browser origins for the map UI
CORS_ORIGINS = [o.strip() for o in os.getenv("NAVIGATOR_CORS_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include the navigator router
app.include_router(navigator_router)


@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "Visa Navigator API", "status": "operational"}


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "navigator-api"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
