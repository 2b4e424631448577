import re
from typing import Dict, List, Optional

from HandData import Classification

COMMON_WORDS = sorted([
    "THE", "OF", "AND", "A", "TO", "IN", "IS", "YOU", "THAT", "IT", "HE", "WAS", "FOR", "ON", "ARE",
    "AS", "WITH", "HIS", "THEY", "I", "AT", "BE", "THIS", "HAVE", "FROM", "OR", "ONE", "HAD", "BY",
    "WORD", "BUT", "NOT", "WHAT", "ALL", "WERE", "WE", "WHEN", "YOUR", "CAN", "SAID", "THERE", "USE",
    "AN", "EACH", "WHICH", "SHE", "DO", "HOW", "THEIR", "IF", "WILL", "UP", "OTHER", "ABOUT", "OUT",
    "MANY", "THEN", "THEM", "THESE", "SO", "SOME", "HER", "WOULD", "MAKE", "LIKE", "HIM", "INTO",
    "TIME", "HAS", "LOOK", "TWO", "MORE", "WRITE", "GO", "SEE", "NUMBER", "NO", "WAY", "COULD",
    "PEOPLE", "MY", "THAN", "FIRST", "WATER", "BEEN", "CALL", "WHO", "OIL", "ITS", "NOW", "FIND",
    "LONG", "DOWN", "DAY", "DID", "GET", "COME", "MADE", "MAY", "PART",
    "HELLO", "WORLD", "GOOD", "MORNING", "AFTERNOON", "EVENING", "PLEASE", "THANK", "SORRY", "YES",
    "HELP", "LOVE", "HAPPY", "HOME", "WORK", "SCHOOL", "FAMILY", "FRIEND", "NAME", "NICE", "MEET",
    "LATER", "TOMORROW", "TODAY", "YESTERDAY", "WEEK", "MONTH", "YEAR", "WHERE", "WHY", "BECAUSE",
    "WANT", "NEED", "FEEL", "BETTER", "BEST", "MUCH", "ANY", "EVERY", "RIGHT", "LEFT", "STOP",
    "START", "FINISH",
])

# Letters the geometric rules commonly mistake for each other.
CONFUSION_SETS: Dict[str, List[str]] = {
    "M": ["N", "T", "S", "A"],
    "N": ["M", "T", "S"],
    "T": ["M", "N", "S"],
    "S": ["A", "E", "M", "N"],
    "A": ["S", "E", "T"],
    "E": ["S", "A"],
    "K": ["V", "U", "2"],
    "V": ["K", "U", "R"],
    "U": ["K", "V", "R"],
    "R": ["U", "V"],
    "2": ["V", "K"],
    "5": ["4"],
    "4": ["5"],
}

# trailing run of spaced single characters, e.g. "... H E L L"
_TRAILING_LETTERS = re.compile(r"(?:^| )([A-Z0-9](?: [A-Z0-9])*)$")


class SentenceBuilder:
    """
    Turns locked labels into a spaced sentence ("H E L L O") and offers
    corrections: confusion-set alternates for the last letter and word
    completions for the trailing run of letters.
    """

    def __init__(self, cfg=None):
        self.sentence = ""
        self.alternates: List[str] = []
        self.add_cooldown = 1.2
        self.alternates_ttl = 8.0
        self.min_confidence = 75
        self.max_predictions = 5
        self._last_added_time = None
        self._alternates_expiry = None
        if cfg:
            self.update_config(cfg)

    def update_config(self, cfg):
        c = cfg.get("sentence", {})
        self.add_cooldown = c.get("add_cooldown_s", 1.2)
        self.alternates_ttl = c.get("alternates_ttl_s", 8.0)
        self.min_confidence = c.get("min_confidence", 75)
        self.max_predictions = c.get("max_predictions", 5)

    def update(self, result: Classification, now: float) -> bool:
        """Fold one frame's result in. Returns True when a label was appended."""
        if self._alternates_expiry is not None and now >= self._alternates_expiry:
            self.alternates = []
            self._alternates_expiry = None

        if not (result.just_locked and result.label and result.confidence > self.min_confidence):
            return False
        if self._last_added_time is not None and now - self._last_added_time <= self.add_cooldown:
            return False
        words = self.sentence.split()
        if words and words[-1] == result.label:
            # sign held too long
            return False

        self.sentence = f"{self.sentence.strip()} {result.label}".strip()
        self._last_added_time = now
        self.alternates = list(CONFUSION_SETS.get(result.label, []))
        self._alternates_expiry = now + self.alternates_ttl if self.alternates else None
        return True

    # ---------- corrections ----------
    def trailing_letters(self) -> Optional[str]:
        m = _TRAILING_LETTERS.search(self.sentence)
        return m.group(1) if m else None

    def predictions(self) -> List[str]:
        run = self.trailing_letters()
        if not run:
            return []
        prefix = run.replace(" ", "")
        if len(prefix) < 2:
            return []
        return [w for w in COMMON_WORDS if w.startswith(prefix)][: self.max_predictions]

    def select_prediction(self, word: str) -> None:
        run = self.trailing_letters()
        if run and self.sentence.endswith(run):
            self.sentence = self.sentence[: len(self.sentence) - len(run)] + word + " "

    def select_alternate(self, alt: str) -> None:
        parts = self.sentence.split()
        if parts and len(parts[-1]) == 1:
            self.sentence = " ".join(parts[:-1] + [alt]) + " "
        self.alternates = []
        self._alternates_expiry = None

    def backspace(self) -> None:
        words = self.sentence.split()
        self.sentence = " ".join(words[:-1])

    def clear(self) -> None:
        self.sentence = ""
        self.alternates = []
        self._alternates_expiry = None
