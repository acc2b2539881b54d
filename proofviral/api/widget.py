"""
Display widget endpoints.

Public:
    GET /api/widget/<widget_id>   JSON widget state
    GET /widget/<widget_id>       HTML carousel (iframe target)
    GET /widget.js                loader script used by the embed snippet
Authenticated:
    GET /api/widget/embed-code    snippet + review page URL for the business
"""
from flask import Blueprint, jsonify, current_app, render_template, make_response

from proofviral.services import data_access
from proofviral.services.session import session_required
from proofviral.services.widget import embed_code, review_page_url, widget_payload

bp = Blueprint('widget', __name__)
embed_bp = Blueprint('embed', __name__)


@bp.route('/embed-code', methods=['GET'])
@session_required
def get_embed_code(session):
    try:
        business = data_access.get_business(session.business_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load business data"}), 500
    
    if not business:
        return jsonify({"error": "Business not found"}), 404
    
    return jsonify({
        "widget_id": business.widget_id,
        "embed_code": embed_code(business.widget_id),
        "review_page_url": review_page_url(business.widget_id),
        "preview_url": f"{current_app.config['PUBLIC_APP_URL']}/widget/{business.widget_id}"
    }), 200


@bp.route('/<widget_id>', methods=['GET'])
def get_widget(widget_id):
    """Always 200: unknown tokens get the empty state."""
    return jsonify({"widget": widget_payload(widget_id)}), 200


@embed_bp.route('/widget/<widget_id>', methods=['GET'])
def render_widget(widget_id):
    widget = widget_payload(widget_id)
    response = make_response(render_template('widget.html', widget=widget))
    # Rendered inside third-party pages
    response.headers['Content-Security-Policy'] = "frame-ancestors *"
    return response


@embed_bp.route('/widget.js', methods=['GET'])
def widget_loader():
    script = render_template('widget.js', origin=current_app.config['PUBLIC_APP_URL'])
    response = make_response(script)
    response.headers['Content-Type'] = 'application/javascript; charset=utf-8'
    response.headers['Cache-Control'] = 'public, max-age=300'
    return response
