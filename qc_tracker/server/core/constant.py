"""Constants shared by the server package."""

PROJECT_NAME = "QC Tracker"
API_V1_STR = "/api/v1"
VERSION = "1.0.0"
API_SCHEMA_VERSION = "v1"
