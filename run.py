#!/usr/bin/env python3
"""
Run Car Dealership API
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "dealership.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
