# File: backend/drop_create_tables.py
from app.db.database import engine, SessionLocal
from app.db.models import Base
from app.main import seed_roles


def recreate_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        seed_roles(db)
    finally:
        db.close()
    print("Database tables dropped and recreated successfully!")


if __name__ == "__main__":
    recreate_tables()
