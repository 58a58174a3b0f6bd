"""Database initialization script with seed data."""

from sqlalchemy.orm import Session

from vidtube.database import Base, SessionLocal, engine
from vidtube.models import Playlist, Tweet, User, Video
from vidtube.services.auth_service import AuthService


def create_tables():
    """Create all database tables."""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("Tables created successfully!")


def seed_data(db: Session):
    """Seed the database with a demo channel."""
    print("\nSeeding database with sample data...")

    print("Creating user...")
    user = User(
        username="demo",
        email="demo@example.com",
        full_name="Demo Channel",
        avatar="/media/avatars/demo.png",
        password_hash=AuthService.hash_password("Password123"),
        is_verified=True,
    )
    db.add(user)
    db.flush()

    print("Creating video...")
    video = Video(
        title="Welcome to VidTube",
        description="A first upload to try the API with",
        video_file="/media/videos/welcome.mp4",
        thumbnail="/media/thumbnails/welcome.png",
        duration=12.5,
        is_published=True,
        owner_id=user.id,
    )
    db.add(video)

    print("Creating tweet and playlist...")
    db.add(Tweet(content="Hello from the demo channel", owner_id=user.id))
    db.add(Playlist(name="Favourites", description="Demo playlist", owner_id=user.id))

    db.commit()
    print("Seed data created successfully!")
    print(f"  User: {user.username} / Password123")


def init_db():
    """Initialize database with tables and seed data."""
    print("Initializing database...")

    create_tables()

    db = SessionLocal()
    try:
        existing_users = db.query(User).count()
        if existing_users > 0:
            print(f"\nDatabase already has {existing_users} users. Skipping seed data.")
            return

        seed_data(db)
        print("\nDatabase initialization complete!")

    except Exception as e:
        print(f"\nError during database initialization: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    init_db()
