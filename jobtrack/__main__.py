"""
Run the JobTrack API server.

Usage:
    python -m jobtrack
"""
import uvicorn

from .config import settings


def main():
    uvicorn.run("jobtrack.main:app", host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
