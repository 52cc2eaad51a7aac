"""Server-rendered product catalog built on FastAPI and SQLAlchemy."""
