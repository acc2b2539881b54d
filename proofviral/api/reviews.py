"""
API endpoints for review moderation and enrichment
"""
import io
from flask import Blueprint, request, jsonify, current_app, send_file
from marshmallow import ValidationError

from proofviral.schemas.review_schema import ReviewFilterSchema
from proofviral.services import data_access, moderation, sentiment, social_card
from proofviral.services.rasterizer import RasterizationError
from proofviral.services.session import session_required

bp = Blueprint('reviews', __name__)

review_filter_schema = ReviewFilterSchema()


@bp.route('', methods=['GET'])
@session_required
def list_reviews(session):
    """
    List the business's reviews, newest first.
    
    Query Parameters:
        - status (str, optional): 'all' (default), 'pending', 'approved', 'rejected'
    
    Returns:
        200 OK with reviews array and per-status counts
    """
    try:
        params = review_filter_schema.load(request.args)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400
    
    status = params['status']
    
    try:
        reviews = data_access.list_reviews(
            session.business_id,
            status=None if status == 'all' else status
        )
        counts = data_access.count_reviews_by_status(session.business_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load reviews"}), 500
    
    current_app.logger.debug(
        "Reviews: %d reviews for business_id=%s (filter=%s)",
        len(reviews), session.business_id, status
    )
    
    return jsonify({
        "reviews": [review.to_dict() for review in reviews],
        "filter": status,
        "counts": counts
    }), 200


def _moderate(session, review_id, action):
    try:
        review = data_access.get_review_for_business(review_id, session.business_id)
        if not review:
            current_app.logger.warning(
                "Moderation: review_id=%s not found for business_id=%s",
                review_id, session.business_id
            )
            return jsonify({"error": "Review not found"}), 404
        
        review = moderation.moderate(review, action)
        return jsonify({
            "message": f"Review {review.status}",
            "review": review.to_dict()
        }), 200
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to update review"}), 500


@bp.route('/<review_id>/approve', methods=['POST'])
@session_required
def approve_review(review_id, session):
    return _moderate(session, review_id, 'approve')


@bp.route('/<review_id>/reject', methods=['POST'])
@session_required
def reject_review(review_id, session):
    return _moderate(session, review_id, 'reject')


@bp.route('/<review_id>/analyze', methods=['POST'])
@session_required
def analyze_review(review_id, session):
    """
    Run sentiment analysis on a review.
    
    On success the review's sentiment_score and sentiment_label are saved.
    key_themes is returned only; there is no column to store it in.
    On failure nothing is saved.
    
    Returns:
        200: Analysis stored
        404: Review not found
        409: Analysis for this review already running
        502: Analysis failed (model error or unusable reply)
    """
    try:
        review = data_access.get_review_for_business(review_id, session.business_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load review"}), 500
    
    if not review:
        return jsonify({"error": "Review not found"}), 404
    
    try:
        analysis = sentiment.analyze_review(review)
    except sentiment.AnalysisInProgress:
        return jsonify({"error": "Analysis already in progress for this review"}), 409
    except sentiment.SentimentAnalysisError as e:
        current_app.logger.error("Sentiment analysis failed for review_id=%s: %s", review_id, e)
        return jsonify({"error": "Failed to analyze sentiment", "details": str(e)}), 502
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to analyze sentiment"}), 500
    
    return jsonify({
        "message": "Sentiment analyzed successfully!",
        "review": review.to_dict(),
        "analysis": {
            "sentiment_score": analysis['sentiment_score'],
            "sentiment_label": analysis['sentiment_label'],
            "key_themes": analysis['key_themes'],
            "key_themes_persisted": False
        }
    }), 200


@bp.route('/<review_id>/social-card', methods=['POST'])
@session_required
def generate_social_card(review_id, session):
    """
    Generate a share image for a review and return it as a PNG download.
    
    Request Body (optional):
        {"platform": "instagram" | "twitter"}   (default: instagram)
    
    Returns:
        200: image/png attachment
        400: Unsupported platform
        404: Review not found
        502: Rendering failed
    """
    data = request.get_json(silent=True) or {}
    platform = data.get('platform', 'instagram')
    if platform not in social_card.PLATFORM_SIZES:
        return jsonify({
            "error": f"Platform must be one of: {', '.join(social_card.PLATFORM_SIZES)}"
        }), 400
    
    try:
        review = data_access.get_review_for_business(review_id, session.business_id)
        business = data_access.get_business(session.business_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load review"}), 500
    
    if not review or not business:
        return jsonify({"error": "Review not found"}), 404
    
    try:
        png = social_card.generate_social_card(
            review_text=review.review_text,
            customer_name=review.customer_name,
            rating=review.rating,
            business_name=business.business_name,
            platform=platform,
            logo_url=business.logo_url
        )
    except RasterizationError as e:
        current_app.logger.error("Social card generation failed for review_id=%s: %s", review_id, e)
        return jsonify({"error": "Failed to generate social card"}), 502
    
    # The user already has the image; bookkeeping failures are only logged
    social_card.record_social_card(review, platform, png)
    
    return send_file(
        io.BytesIO(png),
        mimetype='image/png',
        as_attachment=True,
        download_name=social_card.card_filename(review.id)
    )
