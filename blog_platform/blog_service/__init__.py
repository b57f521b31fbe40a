"""
blog_service package

Backend for a small blog: user accounts and posts behind a JSON API.
It includes:

- FastAPI application factory (`main.py`)
- SQLAlchemy models and database integration (`models.py`, `db.py`)
- Password hashing and JWT handling (`auth.py`)
- Pydantic request bodies and public views (`schemas.py`)
- Data-access functions (`repositories/`) and HTTP routes (`routes/`)
"""
