"""
Keyword extraction for guide content.

This module turns guide text into the search queries used to find
catalog items:
- AI-assisted extraction asks the text generator for a JSON summary of
  gear keywords, product mentions and their contexts
- Deterministic extraction matches a fixed outdoor-gear vocabulary and
  is used whenever the AI path is unavailable or returns unusable output

Extraction never fails: the worst case is an empty analysis.
"""

import json
import logging
import re
from typing import Optional

from .deadline import Deadline, DeadlineExceeded
from .models import AnalysisOutcome, GuideMetadata, MentionContext, SemanticAnalysis

logger = logging.getLogger(__name__)


MAX_AI_KEYWORDS = 12
MAX_FALLBACK_KEYWORDS = 10
FALLBACK_CONTEXT_CHARS = 25
ANALYSIS_TEMPERATURE = 0.3

# Outdoor gear vocabulary for deterministic extraction.
# Multi-word terms come before the single words they contain so the
# alternation prefers the longer phrase.
GEAR_VOCABULARY = [
    # Shelter
    r"tents?", r"tarps?", r"bivy", r"bivy sacks?",
    # Packs
    r"backpacks?", r"daypacks?",
    # Sleep systems
    r"sleeping bags?", r"sleeping pads?",
    # Footwear
    r"hiking boots?", r"trail runners?", r"socks",
    # Navigation and safety
    r"compass", r"GPS", r"headlamps?", r"first aid kits?", r"whistle",
    # Cooking and hydration
    r"stoves?", r"cookware", r"water bottles?", r"water filters?",
    # Rain and weather protection
    r"rain gear", r"rain jackets?", r"down jackets?", r"jackets?", r"fleece",
    r"pants", r"gloves", r"hats?",
    # Tools and accessories
    r"trekking poles?", r"multi-tools?", r"knives", r"knife", r"carabiners?",
]

GEAR_PATTERN = re.compile(
    r"\b(?:" + "|".join(sorted(GEAR_VOCABULARY, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)


ANALYSIS_PROMPT = """Analyze the following hiking/outdoor guide content to identify gear, equipment and product mentions that could be linked to catalog items.
{metadata}
Content to analyze:
\"\"\"
{content}
\"\"\"

Extract and return a JSON object with:
1. "primaryKeywords": Array of 8-12 main outdoor gear/equipment terms mentioned
2. "gearMentions": Array of specific product names, brands, or detailed equipment descriptions
3. "contexts": Array of objects with "phrase" (the specific gear mention), "context" (surrounding 50 characters), and "position" (approximate character position)

Focus on:
- Hiking and backpacking gear (tents, backpacks, sleeping bags, etc.)
- Clothing and footwear
- Navigation and safety equipment
- Cooking and water systems
- Weather protection gear
- Tools and accessories

Return only valid JSON."""


def build_analysis_prompt(content: str, metadata: Optional[GuideMetadata] = None) -> str:
    """Build the extraction prompt, including guide metadata when present."""
    metadata_block = ""
    if metadata is not None:
        categories = ", ".join(metadata.categories) if metadata.categories else "General"
        metadata_block = (
            f"\nGuide Title: {metadata.title or 'Unknown'}\n"
            f"Categories: {categories}\n"
            f"Difficulty: {metadata.difficulty or 'All Levels'}\n"
        )
    return ANALYSIS_PROMPT.format(metadata=metadata_block, content=content)


def extract_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` region of text.

    Braces inside JSON strings are ignored, so a brace in a quoted
    phrase does not end the object early.

    Args:
        text: Arbitrary model output.

    Returns:
        The JSON-shaped substring, or None if there is no balanced object.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def _dedupe(values, casefold: bool = True) -> list[str]:
    """Order-preserving de-duplication of non-empty strings.

    A bare string counts as a single value; anything else that is not a
    list yields nothing.
    """
    if isinstance(values, str):
        values = [values]
    elif not isinstance(values, list):
        return []
    seen = set()
    result = []
    for value in values:
        if not isinstance(value, str):
            continue
        value = value.strip()
        if not value:
            continue
        key = value.lower() if casefold else value
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def _parse_contexts(raw_contexts) -> list[MentionContext]:
    contexts = []
    if not isinstance(raw_contexts, list):
        return contexts
    for entry in raw_contexts:
        if not isinstance(entry, dict):
            continue
        phrase = entry.get("phrase")
        if not isinstance(phrase, str) or not phrase.strip():
            continue
        try:
            position = int(entry.get("position", -1))
        except (TypeError, ValueError, OverflowError):
            position = -1
        contexts.append(MentionContext(
            phrase=phrase.strip(),
            context=str(entry.get("context") or ""),
            position=position,
        ))
    return contexts


def parse_analysis_response(text: str) -> AnalysisOutcome:
    """
    Parse model output into a SemanticAnalysis.

    Args:
        text: Raw text returned by the text generator.

    Returns:
        AnalysisOutcome.ok with the analysis, or AnalysisOutcome.degraded
        explaining why the output could not be used.
    """
    json_text = extract_json_object(text)
    if json_text is None:
        return AnalysisOutcome.degraded("No JSON found in AI response")

    try:
        data = json.loads(json_text)
    except json.JSONDecodeError as e:
        return AnalysisOutcome.degraded(f"Malformed JSON in AI response: {e}")

    if not isinstance(data, dict):
        return AnalysisOutcome.degraded("AI response JSON is not an object")

    return AnalysisOutcome.ok(SemanticAnalysis(
        primary_keywords=_dedupe(data.get("primaryKeywords") or [])[:MAX_AI_KEYWORDS],
        gear_mentions=_dedupe(data.get("gearMentions") or []),
        contexts=_parse_contexts(data.get("contexts")),
    ))


def extract_basic_keywords(content: str) -> SemanticAnalysis:
    """
    Deterministic gear-vocabulary extraction.

    Args:
        content: Guide text.

    Returns:
        SemanticAnalysis; empty when no gear term occurs in the content.
    """
    primary_keywords = []
    gear_mentions = []
    contexts = []

    for match in GEAR_PATTERN.finditer(content or ""):
        phrase = match.group(0)
        position = match.start()
        context = content[
            max(0, position - FALLBACK_CONTEXT_CHARS):
            min(len(content), match.end() + FALLBACK_CONTEXT_CHARS)
        ]
        primary_keywords.append(phrase.lower())
        gear_mentions.append(phrase)
        contexts.append(MentionContext(phrase=phrase, context=context, position=position))

    return SemanticAnalysis(
        primary_keywords=_dedupe(primary_keywords)[:MAX_FALLBACK_KEYWORDS],
        gear_mentions=_dedupe(gear_mentions, casefold=False),
        contexts=contexts,
    )


class KeywordExtractor:
    """
    Extracts catalog search keywords from guide content.

    Uses the text generator when one is configured and falls back to
    vocabulary matching otherwise.
    """

    def __init__(self, text_generator=None, temperature: float = ANALYSIS_TEMPERATURE):
        """
        Initialize the extractor.

        Args:
            text_generator: Object with ``generate(prompt, temperature) -> str``,
                or None to always use deterministic extraction.
            temperature: Sampling temperature for the analysis request.
        """
        self.text_generator = text_generator
        self.temperature = temperature

    def analyze_with_ai(
        self,
        content: str,
        metadata: Optional[GuideMetadata] = None,
        deadline: Optional[Deadline] = None,
    ) -> AnalysisOutcome:
        """
        Run AI-assisted extraction.

        Returns:
            AnalysisOutcome; generation failures are reported as degraded.

        Raises:
            DeadlineExceeded: If the call deadline has passed.
        """
        if self.text_generator is None:
            return AnalysisOutcome.degraded("No text generator configured")

        deadline = deadline or Deadline.unbounded()
        deadline.check("keyword extraction")

        prompt = build_analysis_prompt(content, metadata)
        try:
            text = self.text_generator.generate(prompt, temperature=self.temperature)
        except DeadlineExceeded:
            raise
        except Exception as e:
            return AnalysisOutcome.degraded(f"Text generation failed: {e}")

        deadline.check("keyword parsing")
        if not isinstance(text, str):
            return AnalysisOutcome.degraded("Text generation returned no text")
        try:
            return parse_analysis_response(text)
        except Exception as e:
            return AnalysisOutcome.degraded(f"Unusable AI response: {e}")

    def analyze(
        self,
        content: str,
        metadata: Optional[GuideMetadata] = None,
        deadline: Optional[Deadline] = None,
    ) -> SemanticAnalysis:
        """
        Extract keywords, gear mentions and contexts from content.

        Args:
            content: Guide text.
            metadata: Optional guide metadata for the AI prompt.
            deadline: Optional call deadline.

        Returns:
            SemanticAnalysis, from the AI path when it succeeds and from
            vocabulary matching otherwise.
        """
        outcome = self.analyze_with_ai(content, metadata, deadline)
        if not outcome.is_degraded:
            return outcome.analysis

        if self.text_generator is not None:
            logger.warning(f"AI semantic analysis failed, using fallback: {outcome.reason}")
        return extract_basic_keywords(content)
