# ABOUTME: HTTP surface for single-profile imports
# ABOUTME: FastAPI app factory and module-level app for uvicorn
