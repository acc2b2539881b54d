"""
Public (unauthenticated) review collection endpoints, addressed by widget token
"""
from datetime import datetime
from urllib.parse import quote

from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from proofviral.extensions import db
from proofviral.schemas.review_schema import ReviewSubmissionSchema
from proofviral.services import data_access, storage
from proofviral.services.widget import review_page_url

bp = Blueprint('public', __name__)

review_submission_schema = ReviewSubmissionSchema()

SHARE_POPUP = {"width": 600, "height": 400}


def _encode(value):
    # Same escaping as JavaScript's encodeURIComponent
    return quote(value, safe="-_.!~*'()")


def build_share_links(business_name, page_url):
    text = f"I just left a review for {business_name}!"
    return {
        "twitter": f"https://twitter.com/intent/tweet?text={_encode(text)}&url={_encode(page_url)}",
        "facebook": f"https://www.facebook.com/sharer/sharer.php?u={_encode(page_url)}",
        "linkedin": f"https://www.linkedin.com/sharing/share-offsite/?url={_encode(page_url)}"
    }


def upload_review_photo(business_id, photo_file, data):
    """
    Upload a review photo. Returns its public URL, or None if the upload failed.
    A failed photo upload never fails the review submission.
    """
    bucket = current_app.config['REVIEW_PHOTOS_BUCKET']
    ext = storage.file_extension(photo_file.filename)
    path = f"{business_id}/{int(datetime.utcnow().timestamp() * 1000)}.{ext}"
    try:
        storage.upload(bucket, path, data, content_type=photo_file.mimetype)
        return storage.get_public_url(bucket, path)
    except storage.StorageError as e:
        current_app.logger.error("Photo upload error for business_id=%s: %s", business_id, e)
        return None


@bp.route('/businesses/<widget_id>', methods=['GET'])
def get_public_business(widget_id):
    """Business details for the public review form."""
    try:
        business = data_access.get_business_by_widget_id(widget_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load business"}), 500
    
    if not business:
        return jsonify({"error": "Business not found"}), 404
    
    return jsonify({"business": business.to_public_dict()}), 200


@bp.route('/businesses/<widget_id>/reviews', methods=['POST'])
def submit_review(widget_id):
    """
    Submit a review from the public review form.
    
    Accepts multipart/form-data (with optional "photo" file, max 5MB) or JSON.
    
    Form fields:
        customer_name, customer_email, rating (1-5), review_text
    
    Validation happens before anything else: an invalid rating or oversized
    photo never reaches storage or the database. The review is always stored
    as 'pending'. If the photo upload fails the review is stored without it.
    
    Returns:
        201: Review submitted, with share links for the thank-you screen
        400: Validation failed
        404: Business not found
        413: Photo too large
        500: Server error
    """
    data = request.form.to_dict() if request.form else (request.get_json(silent=True) or {})
    
    try:
        validated = review_submission_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400
    
    photo_file = request.files.get('photo')
    photo_bytes = None
    if photo_file and photo_file.filename:
        photo_bytes = photo_file.read()
        if len(photo_bytes) > current_app.config['REVIEW_PHOTO_MAX_BYTES']:
            return jsonify({"error": "File size must be less than 5MB"}), 413
    
    try:
        business = data_access.get_business_by_widget_id(widget_id)
        if not business:
            return jsonify({"error": "Business not found"}), 404
        
        photo_url = None
        if photo_bytes is not None:
            photo_url = upload_review_photo(business.id, photo_file, photo_bytes)
        
        review = data_access.insert_review(
            business_id=business.id,
            customer_name=validated['customer_name'].strip(),
            customer_email=validated['customer_email'],
            rating=validated['rating'],
            review_text=validated['review_text'],
            photo_url=photo_url
        )
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to submit review"}), 500
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Error submitting review for widget_id=%s: %s", widget_id, e)
        return jsonify({"error": "Failed to submit review"}), 500
    
    current_app.logger.info(
        "Review %s submitted for business_id=%s (photo=%s)",
        review.id, business.id, bool(photo_url)
    )
    
    page_url = review_page_url(widget_id)
    return jsonify({
        "message": "Thank you for your review!",
        "review": {
            "id": review.id,
            "status": review.status,
            "rating": review.rating,
            "photo_url": review.photo_url
        },
        "share": {
            "links": build_share_links(business.business_name, page_url),
            "popup": SHARE_POPUP
        },
        "business_url": business.business_url,
        "business_name": business.business_name
    }), 201
