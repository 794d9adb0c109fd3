from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from enum import Enum


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    username: str
    avatar_url: Optional[str] = None
    game_count: int
    total_score: int
    best_game: Optional[str] = None


class GameLeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    username: str
    avatar_url: Optional[str] = None
    score: int
    achieved_at: datetime
    game_count: int


class GameChampion(BaseModel):
    game_id: str
    game_name: str
    category: str
    user_id: str
    username: str
    avatar_url: Optional[str] = None
    score: int
    achieved_at: datetime


class UserChampion(BaseModel):
    user_id: str
    username: str
    avatar_url: Optional[str] = None
    games_led: int
    leading_games: List[str]


class ComparisonResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"
    NOT_PLAYED = "not_played"


class GameComparison(BaseModel):
    game_id: str
    game_name: str
    user_score: Optional[int] = None
    friend_score: Optional[int] = None
    result: ComparisonResult


class ComparisonRecord(BaseModel):
    wins: int
    losses: int
    ties: int


class FriendComparison(BaseModel):
    comparisons: List[GameComparison]
    record: ComparisonRecord
    user_games_count: int
    friend_games_count: int
