from kupon.models.user import LeaderboardEntry
from kupon.services.user_repository import UserRepository

DEFAULT_LIMIT = 50


def top_players(users: UserRepository, limit: int = DEFAULT_LIMIT) -> list[LeaderboardEntry]:
    """Users by points descending; equal points keep registration order."""
    ranked = sorted(users.all(), key=lambda u: u.points, reverse=True)[: max(0, limit)]
    return [
        LeaderboardEntry(rank=i + 1, name=u.name, points=u.points)
        for i, u in enumerate(ranked)
    ]
