#!/usr/bin/env python3
"""
Main entry point for the SuperFocus backend
This file allows the host to run the FastAPI app from the root directory
(after `pip install -e .`, which puts the superfocus package on the path)
"""
import os

from superfocus.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "8000")), reload=True)
