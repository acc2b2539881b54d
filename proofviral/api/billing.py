from flask import Blueprint, request, jsonify, current_app
from marshmallow import ValidationError

from proofviral.schemas.business_schema import PlanChangeSchema
from proofviral.services import data_access
from proofviral.services.session import session_required

bp = Blueprint('billing', __name__)

plan_change_schema = PlanChangeSchema()

PLANS = [
    {
        "key": "free",
        "name": "Free",
        "price": "$0",
        "period": "forever",
        "features": [
            "10 reviews per month",
            "Basic widget",
            "Email support",
            "ProofViral branding"
        ]
    },
    {
        "key": "pro",
        "name": "Pro",
        "price": "$49",
        "period": "per month",
        "popular": True,
        "features": [
            "Unlimited reviews",
            "AI sentiment analysis",
            "Social card generator",
            "Custom branding",
            "Advanced analytics",
            "Priority support"
        ]
    },
    {
        "key": "enterprise",
        "name": "Enterprise",
        "price": "$99",
        "period": "per month",
        "features": [
            "Everything in Pro",
            "White-label solution",
            "API access",
            "Custom integrations",
            "Dedicated account manager",
            "99.9% SLA"
        ]
    }
]


@bp.route('', methods=['GET'])
@session_required
def get_billing(session):
    try:
        business = data_access.get_business_for_user(session.user_id)
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to load billing data"}), 500
    
    if not business:
        return jsonify({"error": "Business not found"}), 404
    
    return jsonify({
        "plan": business.plan,
        "plans": [dict(plan, current=plan['key'] == business.plan) for plan in PLANS]
    }), 200


@bp.route('/plan', methods=['PUT'])
@session_required
def change_plan(session):
    """
    Change the subscription plan.
    
    No payment provider is called: the plan field is updated directly.
    """
    data = request.get_json() or {}
    try:
        validated = plan_change_schema.load(data)
    except ValidationError as err:
        return jsonify({"error": "Validation failed", "details": err.messages}), 400
    
    try:
        business = data_access.get_business_for_user(session.user_id)
        if not business:
            return jsonify({"error": "Business not found"}), 404
        business = data_access.update_business_plan(business, validated['plan'])
    except data_access.DataAccessError:
        return jsonify({"error": "Failed to update plan"}), 500
    
    current_app.logger.info("Billing: business_id=%s now on plan=%s", business.id, business.plan)
    return jsonify({
        "message": f"Successfully upgraded to {business.plan.upper()} plan!",
        "plan": business.plan,
        "payment_processing": "placeholder"
    }), 200
