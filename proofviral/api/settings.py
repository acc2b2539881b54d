from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from proofviral.schemas.business_schema import UpdateBusinessSchema
from proofviral.services import data_access, storage
from proofviral.services.session import session_required

bp = Blueprint('settings', __name__)

update_business_schema = UpdateBusinessSchema()


@bp.route('', methods=['GET'])
@session_required
def get_settings(session):
    try:
        business = data_access.get_business_for_user(session.user_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load settings"}), 500
    
    if not business:
        return jsonify({"error": "Business not found"}), 404
    
    return jsonify({"business": business.to_dict()}), 200


@bp.route('', methods=['PUT'])
@session_required
def update_settings(session):
    """
    Update the business profile.
    
    Request Body:
        {
            "business_name": "Acme Coffee",
            "business_url": "https://acme.coffee",
            "logo_url": "https://..."    (empty or null clears the logo)
        }
    """
    data = request.get_json() or {}
    try:
        validated = update_business_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400
    
    try:
        business = data_access.get_business_for_user(session.user_id)
        if not business:
            return jsonify({"error": "Business not found"}), 404
        
        business = data_access.update_business_profile(
            business,
            business_name=validated['business_name'].strip(),
            business_url=validated['business_url'],
            logo_url=validated.get('logo_url')
        )
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to save settings"}), 500
    
    current_app.logger.info("Settings: saved business_id=%s", business.id)
    return jsonify({"message": "Settings saved successfully!", "business": business.to_dict()}), 200


@bp.route('/logo', methods=['POST'])
@session_required
def upload_logo(session):
    """
    Upload a business logo (max 2MB) and return its public URL.
    
    The URL is not saved on the business until the next PUT /api/settings.
    """
    logo = request.files.get('logo')
    if not logo or not logo.filename:
        return jsonify({"error": "logo file is required"}), 400
    
    data = logo.read()
    if len(data) > current_app.config['LOGO_MAX_BYTES']:
        return jsonify({"error": "Logo must be less than 2MB"}), 413
    
    bucket = current_app.config['BUSINESS_LOGOS_BUCKET']
    path = f"{session.business_id}/logo.{storage.file_extension(logo.filename)}"
    try:
        storage.upload(bucket, path, data, content_type=logo.mimetype, overwrite=True)
    except storage.StorageError as e:
        current_app.logger.error("Error uploading logo for business_id=%s: %s", session.business_id, e)
        return jsonify({"error": "Failed to upload logo"}), 502
    
    return jsonify({
        "message": "Logo uploaded successfully!",
        "logo_url": storage.get_public_url(bucket, path)
    }), 200
