"""Repository layer - data access abstraction.

Repositories handle the lookups that several routers and services share.
Naming conventions:
- find_* : Query that may return None or an empty list
- get_*  : Query that raises NotFoundError if missing

Dependency direction: Routers/Services -> Repositories -> Models
"""

from .playlist_repository import PlaylistRepository
from .user_repository import UserRepository
from .video_repository import VideoRepository, VideoSearch

__all__ = [
    "PlaylistRepository",
    "UserRepository",
    "VideoRepository",
    "VideoSearch",
]
