"""Import every mapped model so ``Base.metadata`` is complete.

Used by ``create_tables``, Alembic's ``env.py`` and the test fixtures.
"""

from clipstream.features.comments.models import Comment, CommentLike
from clipstream.features.follows.models import Follow
from clipstream.features.users.models import User
from clipstream.features.videos.models import Video, VideoLike

__all__ = ["Comment", "CommentLike", "Follow", "User", "Video", "VideoLike"]
