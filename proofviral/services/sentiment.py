"""
Sentiment analysis of review text using Claude.

The model is asked for a fixed JSON object:
    {"sentiment_score": 0-1, "sentiment_label": "positive"|"neutral"|"negative",
     "key_themes": [...]}
The reply is scanned from its first "{" to its last "}" and strictly
validated. Nothing is defaulted: a reply that does not validate is a failure.
"""
import json
import logging
import threading
from contextlib import contextmanager

import anthropic
from anthropic import Anthropic
from flask import current_app

from proofviral.models.review import SENTIMENT_LABELS
from proofviral.services import data_access

logger = logging.getLogger(__name__)

# Initialize Anthropic client lazily
anthropic_client = None
# Cache for working model (to avoid retrying unavailable models on every call)
_working_model = None

# Reviews with an analysis currently running in this process
_in_flight = set()
_in_flight_lock = threading.Lock()

PROMPT_TEMPLATE = (
    "Analyze this customer review and return ONLY a JSON object with: "
    "{{sentiment_score: 0-1, sentiment_label: 'positive'|'neutral'|'negative', "
    "key_themes: [array of 3 themes]}}. Review: {review_text}"
)


class SentimentAnalysisError(Exception):
    """The model call failed or its reply could not be validated."""


class AnalysisInProgress(Exception):
    """An analysis for this review is already running."""


def get_anthropic_client():
    """Get or create Anthropic client"""
    global anthropic_client
    if anthropic_client is None:
        api_key = current_app.config.get('CLAUDE_API_KEY')
        if not api_key:
            raise SentimentAnalysisError("CLAUDE_API_KEY not configured")
        anthropic_client = Anthropic(api_key=api_key)
    return anthropic_client


def build_prompt(review_text):
    return PROMPT_TEMPLATE.format(review_text=review_text)


def extract_json_object(text):
    """Return the substring from the first '{' to the last '}'."""
    start = text.find('{')
    end = text.rfind('}')
    if start == -1 or end == -1 or end < start:
        raise SentimentAnalysisError("No JSON found in response")
    return text[start:end + 1]


def parse_analysis(text):
    """
    Parse and validate a model reply.

    Returns:
        dict: sentiment_score (float), sentiment_label (str), key_themes (list)

    Raises:
        SentimentAnalysisError: If the reply is missing, malformed or out of range
    """
    try:
        analysis = json.loads(extract_json_object(text))
    except json.JSONDecodeError as e:
        raise SentimentAnalysisError(f"Malformed JSON in response: {e}")

    if not isinstance(analysis, dict):
        raise SentimentAnalysisError("Invalid analysis format")

    score = analysis.get('sentiment_score')
    label = analysis.get('sentiment_label')
    themes = analysis.get('key_themes')

    if isinstance(score, bool) or not isinstance(score, (int, float)):
        raise SentimentAnalysisError("sentiment_score must be a number")
    if not 0 <= score <= 1:
        raise SentimentAnalysisError("sentiment_score must be between 0 and 1")
    if label not in SENTIMENT_LABELS:
        raise SentimentAnalysisError(f"sentiment_label must be one of: {', '.join(SENTIMENT_LABELS)}")
    if not isinstance(themes, list) or not all(isinstance(t, str) for t in themes):
        raise SentimentAnalysisError("key_themes must be a list of strings")

    return {
        "sentiment_score": float(score),
        "sentiment_label": label,
        "key_themes": themes
    }


def _create_message(client, model, prompt):
    return client.messages.create(
        model=model,
        max_tokens=current_app.config.get('CLAUDE_MAX_TOKENS', 1024),
        messages=[
            {"role": "user", "content": prompt}
        ]
    )


def request_analysis(review_text):
    """
    Call Claude, falling back through CLAUDE_MODELS when a model is not found.

    Returns:
        str: Raw reply text
    """
    global _working_model
    client = get_anthropic_client()
    prompt = build_prompt(review_text)

    models = list(current_app.config.get('CLAUDE_MODELS') or [])
    if _working_model in models:
        models.remove(_working_model)
        models.insert(0, _working_model)

    last_error = None
    for model_name in models:
        try:
            message = _create_message(client, model_name, prompt)
        except anthropic.NotFoundError as e:
            logger.warning(f"Model {model_name} not available, trying next...")
            last_error = e
            if _working_model == model_name:
                _working_model = None
            continue
        except anthropic.APIError as e:
            logger.error(f"Claude API error with model {model_name}: {e}")
            raise SentimentAnalysisError(f"Claude API error: {e}")

        _working_model = model_name
        if not message.content or getattr(message.content[0], 'type', None) != 'text':
            raise SentimentAnalysisError("Unexpected response type from Claude")
        return message.content[0].text

    raise SentimentAnalysisError(f"None of the configured Claude models are available: {last_error}")


def analyze_text(review_text):
    """Analyze a review body. Returns the validated analysis dict."""
    return parse_analysis(request_analysis(review_text))


@contextmanager
def analysis_slot(review_id):
    """Hold the per-review in-flight marker for the duration of an analysis."""
    with _in_flight_lock:
        if review_id in _in_flight:
            raise AnalysisInProgress(review_id)
        _in_flight.add(review_id)
    try:
        yield
    finally:
        with _in_flight_lock:
            _in_flight.discard(review_id)


def analyze_review(review):
    """
    Analyze a review and persist score + label together.

    key_themes is returned to the caller but has no column to be stored in.

    Raises:
        AnalysisInProgress: Another analysis of this review is running
        SentimentAnalysisError: The model call or its reply failed
        DataAccessError: Persisting the result failed
    """
    with analysis_slot(review.id):
        analysis = analyze_text(review.review_text)
        data_access.update_review_sentiment(
            review,
            analysis['sentiment_score'],
            analysis['sentiment_label']
        )
        logger.info(
            "Analyzed review %s: label=%s score=%.2f",
            review.id, analysis['sentiment_label'], analysis['sentiment_score']
        )
        return analysis
