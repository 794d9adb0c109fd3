"""
Reference catalog of brain-training games, grouped by category.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.game import Game, GameCategory

logger = logging.getLogger(__name__)

# Achievement thresholds (distinct games scored)
FIRST_SCORE_GAMES = 1
FIVE_GAMES = 5
TEN_GAMES = 10

GAME_CATALOG = {
    GameCategory.ATTENTION: [
        ("Speed Match", "Match symbols quickly"),
        ("Train of Thought", "Follow the train"),
        ("Ebb and Flow", "Track moving objects"),
        ("Color Match", "Match colors accurately"),
        ("Lost in Migration", "Follow the migrating birds"),
        ("Divided Attention", "Focus on multiple tasks"),
        ("Trouble Brewing", "Monitor multiple stations"),
        ("Disillusion", "Find the odd one out"),
        ("Eagle Eye", "Spot the differences"),
        ("Reflex Ridge", "Quick reaction game"),
        ("Pet Detective", "Find hidden pets"),
        ("Spatial Speed Match", "Match spatial patterns"),
    ],
    GameCategory.MEMORY: [
        ("Memory Matrix", "Remember grid patterns"),
        ("Memory Lane", "Recall sequences"),
        ("Memory Match", "Match pairs"),
        ("Word Bubbles", "Remember word sequences"),
        ("Monkey Ladder", "Remember sequences"),
        ("Memory Racer", "Race with memory"),
        ("Memory Match Pro", "Advanced matching"),
        ("Spatial Memory", "Remember locations"),
        ("Working Memory", "Hold information"),
        ("Memory Palace", "Build memory palaces"),
    ],
    GameCategory.FLEXIBILITY: [
        ("Word Bubbles Rising", "Flexible word finding"),
        ("Switching Stations", "Switch between tasks"),
        ("Task Switching", "Switch mental sets"),
        ("Brain Shift", "Shift perspectives"),
        ("Color Match Pro", "Advanced color matching"),
        ("Mental Flexibility", "Adapt thinking"),
        ("Set Shifting", "Shift between sets"),
        ("Cognitive Flexibility", "Flexible thinking"),
    ],
    GameCategory.SPEED: [
        ("Speed Match Pro", "Advanced speed matching"),
        ("Rush Hour", "Quick decisions"),
        ("Speed Processing", "Process quickly"),
        ("Rapid Fire", "Quick responses"),
        ("Lightning Round", "Speed challenge"),
        ("Quick Draw", "Fast reactions"),
        ("Speed Test", "Test your speed"),
        ("Fast Track", "Speed track"),
        ("Velocity", "High speed game"),
        ("Turbo Mode", "Maximum speed"),
    ],
    GameCategory.PROBLEM_SOLVING: [
        ("Raindrops", "Solve math problems"),
        ("Rotation Matrix", "Rotate and solve"),
        ("Problem Solver", "Solve puzzles"),
        ("Logic Puzzle", "Logical reasoning"),
        ("Number Crunch", "Number puzzles"),
        ("Spatial Reasoning", "Spatial puzzles"),
        ("Pattern Recognition", "Find patterns"),
        ("Critical Thinking", "Think critically"),
        ("Analytical Mind", "Analyze problems"),
        ("Strategic Planning", "Plan strategically"),
    ],
}


def seed_games(db: Session) -> int:
    """Insert catalog games that are not stored yet. Returns how many were added."""
    existing = {name for name, in db.query(Game.name).all()}
    added = 0
    for category, games in GAME_CATALOG.items():
        for name, description in games:
            if name in existing:
                continue
            db.add(Game(name=name, category=category.value, description=description))
            added += 1

    if added:
        db.commit()
    return added


def list_games(db: Session) -> List[Game]:
    return db.query(Game).order_by(Game.name.asc()).all()


def get_game_by_name(db: Session, name: str) -> Optional[Game]:
    return db.query(Game).filter(Game.name == name).first()
