"""Host-facing ports: high score storage, feedback hooks and pointer input.

None of the adapters here may raise into the simulation. Storage failures
degrade to "no high score yet" and are logged.
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple, Union

from catchgame.config import HIGH_SCORE_KEY

logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    def read_high_score(self) -> int: ...
    def write_high_score(self, value: int) -> None: ...


class Presentation(Protocol):
    def on_catch(self, kind) -> None: ...
    def on_miss(self) -> None: ...
    def on_new_high_score(self) -> None: ...


class NullPresentation:
    def on_catch(self, kind) -> None:
        pass

    def on_miss(self) -> None:
        pass

    def on_new_high_score(self) -> None:
        pass


def _coerce_score(raw) -> int:
    # bool is an int subclass but never a valid score
    if isinstance(raw, bool):
        raise ValueError(f"Invalid high score value: {raw!r}")
    value = int(raw)
    if value < 0:
        raise ValueError(f"Negative high score: {value}")
    return value


class MemoryHighScoreStore:
    """Keeps the high score for the lifetime of the process."""

    def __init__(self, value: int = 0):
        self._value = max(0, int(value))

    def read_high_score(self) -> int:
        return self._value

    def write_high_score(self, value: int) -> None:
        # The stored value only ever rises
        self._value = max(self._value, int(value))


class JsonHighScoreStore:
    """High score persisted as a small JSON document.

    The file is a key/value mapping so it can sit beside other saved
    values; only HIGH_SCORE_KEY is touched. A missing, unreadable or
    malformed file reads as 0 and failed writes are dropped. A write never
    lowers the stored value.
    """

    def __init__(self, path: Union[str, os.PathLike], key: str = HIGH_SCORE_KEY):
        self.path = Path(path)
        self.key = key

    def _load(self) -> Dict:
        with open(self.path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object in {self.path}")
        return data

    def read_high_score(self) -> int:
        if not self.path.exists():
            return 0
        try:
            return _coerce_score(self._load().get(self.key, 0))
        except (OSError, ValueError, TypeError) as e:
            logger.warning("Could not read high score from %s: %s", self.path, e)
            return 0

    def write_high_score(self, value: int) -> None:
        try:
            data = self._load() if self.path.exists() else {}
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable score file %s: %s", self.path, e)
            data = {}
        try:
            stored = _coerce_score(data.get(self.key, 0))
        except (ValueError, TypeError):
            stored = 0
        if int(value) <= stored:
            logger.debug("Kept stored high score %d over %d", stored, value)
            return
        data[self.key] = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + '.tmp')
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.warning("Could not write high score to %s: %s", self.path, e)


class PointerInput:
    """Last-value-wins pointer position, written by the host at any time.

    Coordinates are playfield-relative. The engine reads it once at the
    start of each tick.
    """

    def __init__(self):
        self._position: Optional[Tuple[float, float]] = None

    def move(self, x: float, y: float = 0.0) -> None:
        self._position = (float(x), float(y))

    def clear(self) -> None:
        self._position = None

    def current_pointer(self) -> Optional[Tuple[float, float]]:
        return self._position
