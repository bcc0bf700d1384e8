# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from pickleball.models.court import Court  # noqa: F401
from pickleball.models.match import Match  # noqa: F401
from pickleball.models.partnership import Partnership  # noqa: F401
from pickleball.models.play_date import PlayDate  # noqa: F401
from pickleball.models.player import Player  # noqa: F401
from pickleball.models.score_change import ScoreChange  # noqa: F401
