"""
AI Gateway
==========
Matches Canvas assignment names to due dates, answers assistant chat
questions and suggests matches, using Google Gemini or Anthropic Claude.

Providers are tried in order (preferred first, the other one as fallback);
the first success wins and the last failure is raised.
"""
import json
import logging
import re

try:
    import anthropic
except ImportError:
    anthropic = None

try:
    import google.generativeai as genai
except ImportError:
    genai = None

from canvas_wizard.config import config, AI_PROVIDERS, DEFAULT_AI_PROVIDER
from canvas_wizard.errors import ConfigurationError, ProviderError, AIResponseError
from canvas_wizard.services.dates import normalize_due_date, format_date_and_time

logger = logging.getLogger(__name__)

CONFIDENCE_LEVELS = ('high', 'medium', 'low')
RAW_RESPONSE_PREVIEW = 200

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)


# ═══════════════════════════════════════════════════════
# PROVIDERS
# ═══════════════════════════════════════════════════════

class GeminiProvider:
    """Google Gemini text generation."""

    name = 'gemini'

    def __init__(self, api_key, model=None, temperature=None, max_tokens=None):
        self.api_key = api_key
        self.model = model or config.gemini_model
        self.temperature = config.ai_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or config.ai_max_tokens

    def generate(self, prompt):
        if not self.api_key:
            raise ConfigurationError("Gemini API key required")
        if genai is None:
            raise ProviderError(self.name, "google-generativeai package not installed. Run: pip install google-generativeai")

        try:
            genai.configure(api_key=self.api_key)
            gen_model = genai.GenerativeModel(
                self.model,
                generation_config={
                    "temperature": self.temperature,
                    "top_k": 1,
                    "top_p": 1,
                    "max_output_tokens": self.max_tokens,
                },
            )
            response = gen_model.generate_content(prompt)
            return (response.text or '').strip()
        except Exception as e:
            raise ProviderError(self.name, f"Gemini API error: {e}") from e


class ClaudeProvider:
    """Anthropic Claude text generation."""

    name = 'claude'

    def __init__(self, api_key, model=None, temperature=None, max_tokens=None):
        self.api_key = api_key
        self.model = model or config.claude_model
        self.temperature = config.ai_temperature if temperature is None else temperature
        self.max_tokens = max_tokens or config.ai_max_tokens

    def generate(self, prompt):
        if not self.api_key:
            raise ConfigurationError("Claude API key required")
        if anthropic is None:
            raise ProviderError(self.name, "anthropic package not installed. Run: pip install anthropic")

        try:
            client = anthropic.Anthropic(api_key=self.api_key)
            response = client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
            if not response.content:
                return ''
            return response.content[0].text.strip()
        except Exception as e:
            raise ProviderError(self.name, f"Claude API error: {e}") from e


PROVIDER_CLASSES = {
    'gemini': GeminiProvider,
    'claude': ClaudeProvider,
}


def provider_chain(gemini_key='', claude_key='', preferred=DEFAULT_AI_PROVIDER):
    """
    Build the ordered provider list: preferred first, then the other one.
    Providers without a key are left out.
    """
    if preferred not in AI_PROVIDERS:
        preferred = DEFAULT_AI_PROVIDER
    keys = {'gemini': gemini_key, 'claude': claude_key}
    order = [preferred] + [p for p in AI_PROVIDERS if p != preferred]
    return [PROVIDER_CLASSES[name](keys[name]) for name in order if keys[name]]


# ═══════════════════════════════════════════════════════
# RESPONSE PARSING
# ═══════════════════════════════════════════════════════

def strip_code_fences(text):
    """Return the body of the first ``` / ```json fenced block, or the trimmed text."""
    text = (text or '').strip()
    m = _FENCED_BLOCK.search(text)
    if m:
        return m.group(1).strip()
    return text


def _invalid_json(response):
    return AIResponseError(
        f"AI response was not valid JSON: {response[:RAW_RESPONSE_PREVIEW]}...",
        raw_response=response,
    )


def validate_match(entry, index=0):
    """Check one AI match entry and return it in canonical form."""
    if not isinstance(entry, dict):
        raise AIResponseError(f"Match {index + 1} is not an object")

    name = entry.get('assignment_name')
    if not isinstance(name, str) or not name.strip():
        raise AIResponseError(f"Match {index + 1} is missing assignment_name")

    try:
        due_date = normalize_due_date(entry.get('matched_due_date'))
    except (TypeError, ValueError):
        raise AIResponseError(
            f"Match {index + 1} ({name.strip()}) has an invalid matched_due_date: "
            f"{entry.get('matched_due_date')!r}"
        )

    confidence = entry.get('confidence') or 'low'
    confidence = str(confidence).strip().lower()
    if confidence not in CONFIDENCE_LEVELS:
        raise AIResponseError(f"Match {index + 1} ({name.strip()}) has unknown confidence: {confidence}")

    reasoning = entry.get('reasoning') or ''
    return {
        "assignment_name": name.strip(),
        "matched_due_date": due_date,
        "confidence": confidence,
        "reasoning": str(reasoning),
    }


def parse_match_response(response):
    """
    Parse the model reply into a list of matches.

    The reply must be a JSON object with a "matches" array, optionally wrapped
    in fenced code markers.
    """
    cleaned = strip_code_fences(response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        raise _invalid_json(cleaned)

    if not isinstance(data, dict) or 'matches' not in data:
        raise _invalid_json(cleaned)

    matches = data['matches']
    if not isinstance(matches, list):
        raise AIResponseError("AI response 'matches' is not a list", raw_response=cleaned)

    return [validate_match(entry, i) for i, entry in enumerate(matches)]


# ═══════════════════════════════════════════════════════
# PROMPTS
# ═══════════════════════════════════════════════════════

def build_match_prompt(assignment_list, due_date_schedule):
    return f"""You are an expert at matching Canvas assignment lists with due date schedules for academic courses.

CANVAS ASSIGNMENTS LIST:
{assignment_list}

DUE DATE SCHEDULE:
{due_date_schedule}

Please analyze both lists and create intelligent matches between assignments and their intended due dates.

IMPORTANT INSTRUCTIONS:
1. Look for semantic similarities, not just exact text matches
2. Consider abbreviations, partial names, and context
3. Match assignments with the most appropriate due dates based on content and sequence
4. If an assignment appears to be a quiz, match it with quiz due dates
5. If an assignment is clearly a project, match it with project due dates

Please return your matches in this EXACT JSON format:
{{
  "matches": [
    {{
      "assignment_name": "Exact Canvas assignment name",
      "matched_due_date": "YYYY-MM-DDTHH:MM:SS-04:00",
      "confidence": "high|medium|low",
      "reasoning": "Brief explanation of why this match was made"
    }}
  ]
}}

Only return valid JSON. Do not include any other text or formatting."""


def build_chat_context(assignment_list='', due_date_schedule='', matches=()):
    """Render the session data the assistant should know about."""
    context = ""
    if assignment_list:
        context += f"\n\nCANVAS ASSIGNMENTS:\n{assignment_list}"
    if due_date_schedule:
        context += f"\n\nDUE DATE SCHEDULE:\n{due_date_schedule}"
    if matches:
        context += "\n\nCURRENT MATCHES:\n"
        for i, match in enumerate(matches, start=1):
            try:
                when = format_date_and_time(match.get('matched_due_date'))
            except (TypeError, ValueError):
                when = match.get('matched_due_date', '')
            context += (
                f"{i}. {match.get('assignment_name', '')} → {when} "
                f"(Confidence: {match.get('confidence', '')})\n"
            )
            context += f"   Reasoning: {match.get('reasoning', '')}\n\n"
    return context


def build_chat_prompt(question, context):
    return f"""You are a helpful AI assistant for Canvas assignment management. Today is August 21, 2025, and the user is preparing for Fall 2025 semester (typically August-December 2025).

Your role is to:
1. Help generate typical Fall 2025 academic schedules when requested
2. Suggest realistic due dates for Fall 2025 semester assignments
3. Help match existing assignments with new due date schedules
4. Recommend when they should proceed to update Canvas
5. Consider typical Fall semester calendar (Late August start, Thanksgiving break, Finals in December)

When users ask for schedule generation:
- Assume Fall 2025 semester runs August 26 - December 13, 2025
- Include typical academic breaks (Labor Day, Fall Break, Thanksgiving week)
- Space assignments appropriately throughout the semester
- Use realistic due times (usually 11:59 PM)

CONTEXT:{context}

USER QUESTION: {question}

Please provide helpful, specific advice for Fall 2025 scheduling. Always use the format: 2025-09-15T23:59:00-04:00 for dates.
If the user asks you to generate a schedule, create one with appropriate spacing for Fall 2025."""


def build_suggest_prompt(assignment_list, due_date_schedule):
    return f"""You are helping a user match Canvas assignments with due dates. Please suggest 3-5 good matches they should consider and explain why.

CANVAS ASSIGNMENTS:
{assignment_list}

DUE DATE SCHEDULE:
{due_date_schedule}

Please provide conversational suggestions like:
'I recommend matching [Assignment X] with [Date Y] because...'
'You might want to consider...'
'The assignment [Z] looks like it should be due on...'

Be helpful and specific."""


# ═══════════════════════════════════════════════════════
# GATEWAY
# ═══════════════════════════════════════════════════════

class AIGateway:
    """Runs prompts through an ordered list of providers."""

    def __init__(self, providers):
        self.providers = list(providers)
        if not self.providers:
            raise ConfigurationError("No API keys configured")

    @classmethod
    def from_keys(cls, gemini_key='', claude_key='', preferred=DEFAULT_AI_PROVIDER):
        return cls(provider_chain(gemini_key, claude_key, preferred))

    def generate(self, prompt):
        """Return the first successful provider reply; raise the last failure."""
        last_error = None
        for provider in self.providers:
            try:
                text = provider.generate(prompt)
                logger.info("AI reply from %s (%d chars)", provider.name, len(text))
                return text
            except (ProviderError, ConfigurationError) as e:
                logger.warning("AI provider %s failed: %s", provider.name, e)
                last_error = e
        raise last_error

    def match_assignments(self, assignment_list, due_date_schedule):
        response = self.generate(build_match_prompt(assignment_list, due_date_schedule))
        return parse_match_response(response)

    def chat(self, question, assignment_list='', due_date_schedule='', matches=()):
        context = build_chat_context(assignment_list, due_date_schedule, matches)
        return self.generate(build_chat_prompt(question, context))

    def suggest(self, assignment_list, due_date_schedule):
        return self.generate(build_suggest_prompt(assignment_list, due_date_schedule))
