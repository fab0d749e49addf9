"""FastAPI server exposing the QC Tracker REST API."""
