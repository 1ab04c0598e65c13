#!/usr/bin/env python3
"""Launch the Chefbook API server."""

if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("Starting Chefbook API on http://127.0.0.1:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "chefbook.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
