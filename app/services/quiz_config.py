import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from app.schemas.quiz import QuizConfig

logger = logging.getLogger(__name__)


class QuizConfigError(ValueError):
    pass


def load_quiz_config(path: Union[str, Path]) -> QuizConfig:
    """
    Load the question bank and delegate profiles.

    Fails at load time if the file is unreadable or breaks the shape rules
    (non-empty question bank, one profile score per category, scores 1-5,
    unique profile names).
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise QuizConfigError(f"Quiz config not found: {path}")
    except json.JSONDecodeError as exc:
        raise QuizConfigError(f"Quiz config {path} is not valid JSON: {exc}")

    try:
        config = QuizConfig.model_validate(data)
    except ValidationError as exc:
        raise QuizConfigError(f"Invalid quiz config {path}: {exc}") from exc

    if not config.profiles:
        logger.warning("Quiz config %s defines no delegate profiles", path)

    logger.info(
        "Loaded quiz '%s': %d questions, %d categories, %d profiles",
        config.title, len(config.questions), len(config.categories), len(config.profiles),
    )
    return config
