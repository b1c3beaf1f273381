# Damaged Goods Management - Incident Reporting
# Incident form, photo capture and the incident records API
# v1.0.0.0

import os
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
load_dotenv()

# Configure according to the deployment method's database url :
DATABASE_URL = os.getenv("DATABASE_URL")

if not DATABASE_URL:

    raise ValueError("DATABASE_URL not found in .env file")

engine = create_engine(
    DATABASE_URL,

    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},

    pool_pre_ping=True

)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    """
    Dependency to provide a DB session for FastAPI routes.
    Ensures sessions are closed after every request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
