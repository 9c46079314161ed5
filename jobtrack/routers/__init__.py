"""JobTrack API routers."""
