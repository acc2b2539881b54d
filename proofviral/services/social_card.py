"""
Social card generation.

Builds the share-card document for a review, rasterizes it, and records the
card. Rasterization failures fail the request. Storing the image and writing
the social_cards row are bookkeeping: failures there are logged only.
"""
import logging
from datetime import datetime

from flask import current_app, render_template

from proofviral.services import data_access, rasterizer, storage

logger = logging.getLogger(__name__)

PLATFORM_SIZES = {
    'instagram': (1080, 1080),
    'twitter': (1200, 675),
}

MAX_CARD_TEXT = 200
ELLIPSIS = '...'


def truncate_review_text(text, limit=MAX_CARD_TEXT):
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def star_glyphs(rating):
    rating = max(0, min(5, rating))
    return '★' * rating + '☆' * (5 - rating)


def build_card_html(review_text, customer_name, rating, business_name, platform, logo_url=None):
    """Render the card document for ``platform``."""
    if platform not in PLATFORM_SIZES:
        raise ValueError(f"Unsupported platform: {platform}")
    width, height = PLATFORM_SIZES[platform]
    return render_template(
        'social_card.html',
        width=width,
        height=height,
        stars=star_glyphs(rating),
        caption=truncate_review_text(review_text),
        customer_name=customer_name,
        business_name=business_name,
        logo_url=logo_url
    )


def generate_social_card(review_text, customer_name, rating, business_name, platform, logo_url=None):
    """
    Returns:
        bytes: PNG image of the card

    Raises:
        ValueError: Unsupported platform
        RasterizationError: Rendering failed
    """
    html = build_card_html(review_text, customer_name, rating, business_name, platform, logo_url)
    width, height = PLATFORM_SIZES[platform]
    return rasterizer.render_png(html, width, height)


def card_filename(review_id):
    return f"review-{review_id}-social-card.png"


def record_social_card(review, platform, png):
    """
    Store the image and insert the social_cards row.

    The row is written even when the upload fails; card_url is then null.

    Returns:
        SocialCard or None when the insert failed
    """
    bucket = current_app.config['SOCIAL_CARDS_BUCKET']
    path = f"{review.business_id}/{review.id}/{platform}-{int(datetime.utcnow().timestamp() * 1000)}.png"
    card_url = None
    try:
        storage.upload(bucket, path, png, content_type='image/png')
        card_url = storage.get_public_url(bucket, path)
    except storage.StorageError as e:
        logger.error(f"Error storing social card for review {review.id}: {e}")

    try:
        return data_access.insert_social_card(review.id, card_url, platform)
    except data_access.DataAccessError as e:
        logger.error(f"Error saving social card for review {review.id}: {e}")
        return None
