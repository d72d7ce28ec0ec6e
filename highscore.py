"""Best-times ledger and its text file storage."""

import logging
import os
from datetime import timedelta

from game_logic import Difficulty, Score

logger = logging.getLogger(__name__)


class LeaderboardError(Exception):
    pass


def parse_line(line: str):
    difficulty, sep, seconds = line.strip().partition(": ")
    if not sep:
        return None
    difficulty = Difficulty.from_label(difficulty)
    try:
        seconds = int(seconds)
    except ValueError:
        return None
    if difficulty is None or seconds < 0:
        return None
    return Score(difficulty, timedelta(seconds=seconds))


def score_key(score: Score):
    return score.seconds, score.difficulty


def merge(existing, new_scores):
    """Combine two ledgers, dropping duplicate (difficulty, seconds) entries, fastest first."""
    unique = {}
    for score in list(existing) + list(new_scores):
        unique.setdefault(score.as_line(), parse_line(score.as_line()))
    return sorted(unique.values(), key=score_key)


def query(scores, difficulty: Difficulty):
    return [score for score in scores if score.difficulty == difficulty]


class ScoreStore:
    def __init__(self, path):
        self.path = str(path)

    def load(self):
        if not os.path.exists(self.path):
            return []
        scores = []
        try:
            with open(self.path, encoding="utf-8") as f:
                for line in f:
                    score = parse_line(line)
                    if score is None:
                        logger.debug("Skipping leaderboard line %r", line)
                        continue
                    scores.append(score)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read leaderboard %s: %s", self.path, exc)
            return []
        return scores

    def save(self, scores):
        merged = merge(self.load(), scores)
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                for score in merged:
                    f.write(score.as_line() + "\n")
        except OSError as exc:
            raise LeaderboardError(f"Could not save score: {exc}") from exc
        return merged

    def add(self, score: Score):
        return self.save([score])
