"""Judge0 language ids and the labels clients use for them."""

from typing import Optional

LANGUAGE_MAP: dict[str, int] = {
    "javascript": 63,
    "nodejs": 63,
    "typescript": 74,
    "ts": 74,
    "python": 71,
    "python3": 71,
    "java": 62,
    "cpp": 54,
    "c++": 54,
    "c": 50,
    "go": 60,
    "ruby": 72,
    "php": 68,
    "rust": 73,
}

LANGUAGE_NAMES: dict[int, str] = {
    74: "TypeScript",
    63: "JavaScript",
    71: "Python",
    62: "Java",
    54: "C++",
    50: "C",
    60: "Go",
    72: "Ruby",
    68: "PHP",
    73: "Rust",
}


def get_judge0_language_id(language: str) -> Optional[int]:
    if not language:
        return None
    return LANGUAGE_MAP.get(language.strip().lower())


def get_language_name(language_id: int) -> str:
    return LANGUAGE_NAMES.get(language_id, "Unknown")
