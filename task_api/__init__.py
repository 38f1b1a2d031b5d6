"""Cloud Task API: task CRUD, file uploads and telemetry over FastAPI."""

__version__ = "1.0.0"
