"""Heuristic query suggestions: language, intent, technology and operator hints."""

from dataclasses import dataclass

from codesource_search.config import MIN_SUGGEST_LENGTH
from codesource_search.models.search import Suggestion, SuggestionKind

MAX_SUGGESTIONS = 4

# Operator hints are only offered to queries at least this long.
MIN_OPERATOR_HINT_LENGTH = 5


@dataclass(frozen=True)
class Language:
    """A programming language the generator recognizes."""

    id: str
    name: str
    icon: str

    @property
    def aliases(self) -> tuple[str, str]:
        return (self.id, self.name.lower())


@dataclass(frozen=True)
class OperatorPattern:
    """A ``keyword:`` search operator shown in search tips."""

    type: str
    pattern: str
    description: str


LANGUAGES: tuple[Language, ...] = (
    Language("javascript", "JavaScript", "📘"),
    Language("typescript", "TypeScript", "📘"),
    Language("python", "Python", "🐍"),
    Language("java", "Java", "☕"),
    Language("csharp", "C#", "📗"),
    Language("cpp", "C++", "📙"),
    Language("go", "Go", "🐹"),
    Language("ruby", "Ruby", "💎"),
    Language("rust", "Rust", "🦀"),
    Language("kotlin", "Kotlin", "🏝️"),
    Language("swift", "Swift", "🐦"),
    Language("php", "PHP", "🐘"),
)

TECHNOLOGIES: tuple[str, ...] = (
    "react",
    "vue",
    "angular",
    "node",
    "express",
    "django",
    "flask",
    "spring",
    "tensorflow",
)

OPERATOR_PATTERNS: tuple[OperatorPattern, ...] = (
    OperatorPattern("function", "function:methodName", "Search for specific function implementations"),
    OperatorPattern("class", "class:ClassName", "Find class definitions and usage"),
    OperatorPattern("error", 'error:"error message"', "Find solutions for specific error messages"),
    OperatorPattern("pattern", "pattern:designPattern", "Search for design pattern implementations"),
    OperatorPattern("package", "package:packageName", "Find tutorials and guides for specific packages"),
    OperatorPattern("performance", "performance:topic", "Performance optimization techniques"),
    OperatorPattern("security", "security:vulnerability", "Security best practices and fixes"),
    OperatorPattern("testing", "testing:framework", "Testing methods and frameworks"),
)

PROBLEM_WORDS = frozenset({"error", "bug", "issue", "problem", "fix"})
LEARNING_WORDS = frozenset({"learn", "tutorial", "guide", "how"})

FUNCTION_CUES = frozenset({"function", "method", "api"})
CLASS_CUES = frozenset({"class", "component", "object"})
ERROR_CUES = frozenset({"error", "exception", "bug"})

ICON_ERROR = "🔧"
ICON_TUTORIAL = "📚"
ICON_TECH = "📐"
ICON_OPERATOR = "⚡"


def tokenize(text: str) -> list[str]:
    """Lower-case and split on whitespace."""
    return text.lower().split()


def detect_language(tokens: list[str]) -> Language | None:
    """Return the first catalog language named by any token."""
    token_set = set(tokens)
    for language in LANGUAGES:
        if token_set.intersection(language.aliases):
            return language
    return None


def detect_technology(tokens: list[str]) -> str | None:
    """Return the first catalog technology named by any token."""
    token_set = set(tokens)
    for tech in TECHNOLOGIES:
        if tech in token_set:
            return tech
    return None


def has_operator(text: str) -> bool:
    """True if the text already uses a recognized ``keyword:`` operator."""
    return any(f"{op.type}:" in text for op in OPERATOR_PATTERNS)


def _operator_hint(text: str, tokens: list[str]) -> Suggestion | None:
    token_set = set(tokens)
    last = tokens[-1]
    if token_set & FUNCTION_CUES:
        query = f"function:{last}"
    elif token_set & CLASS_CUES:
        query = f"class:{last}"
    elif token_set & ERROR_CUES:
        # Everything after 'error' and one separator; offset 5 when the word is absent.
        message = text[text.find("error") + 6 :]
        query = f'error:"{message}"'
    else:
        return None
    return Suggestion(
        kind=SuggestionKind.OPERATOR_HINT,
        label=f"Try: {query}",
        executable_query=query,
        icon=ICON_OPERATOR,
    )


def generate_suggestions(text: str) -> tuple[Suggestion, ...]:
    """Map settled input text to at most four ordered suggestions.

    Pure function of ``text``: the same input always yields the same list.
    """
    if len(text) < MIN_SUGGEST_LENGTH:
        return ()
    tokens = tokenize(text)
    if not tokens:
        return ()

    suggestions: list[Suggestion] = []

    language = detect_language(tokens)
    if language is not None:
        best = f"{language.name} best practices"
        suggestions.append(Suggestion(SuggestionKind.LANGUAGE, best, best, language.icon))

        if PROBLEM_WORDS.intersection(tokens):
            suggestions.append(
                Suggestion(
                    SuggestionKind.ERROR_CONTEXT,
                    f"{language.name} common errors",
                    f"{language.name} common errors and fixes",
                    ICON_ERROR,
                )
            )
        if LEARNING_WORDS.intersection(tokens):
            suggestions.append(
                Suggestion(
                    SuggestionKind.TUTORIAL_CONTEXT,
                    f"{language.name} beginner tutorial",
                    f"{language.name} beginner tutorial step by step",
                    ICON_TUTORIAL,
                )
            )

    tech = detect_technology(tokens)
    if tech is not None:
        suggestions.append(
            Suggestion(
                SuggestionKind.TECH_CONTEXT,
                f"{tech} architecture patterns",
                f"{tech} architecture design patterns best practices",
                ICON_TECH,
            )
        )

    if len(text) >= MIN_OPERATOR_HINT_LENGTH and not has_operator(text):
        hint = _operator_hint(text, tokens)
        if hint is not None:
            suggestions.append(hint)

    return tuple(suggestions[:MAX_SUGGESTIONS])
