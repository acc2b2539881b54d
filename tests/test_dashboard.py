import io

import pytest

from proofviral.api.dashboard import average_rating
from proofviral.extensions import db
from proofviral.models.business import Business
from proofviral.models.social_card import SocialCard

from tests.conftest import add_review, auth_headers, signup


@pytest.mark.parametrize("ratings, expected", [
    ([], 0),
    ([5], 5.0),
    ([5, 4, 4], 4.3),
    ([5, 5, 3], 4.3),
    ([4, 5], 4.5),
    ([1, 2, 2, 2], 1.8),
    ([3, 4, 4, 4, 4, 4, 4, 4], 3.9),
])
def test_average_rating(ratings, expected):
    assert average_rating(ratings) == expected


def test_stats_count_every_status(client, account, headers):
    business_id = account["business"]["id"]
    add_review(business_id, rating=5, status="approved", minutes=1)
    add_review(business_id, rating=4, status="pending", minutes=2)
    add_review(business_id, rating=4, status="rejected", minutes=3)
    add_review(business_id, rating=1, status="pending", minutes=4)

    response = client.get('/api/dashboard/stats', headers=headers)
    data = response.get_json()

    assert response.status_code == 200
    assert data["stats"] == {"total_reviews": 4, "avg_rating": 3.5, "pending_reviews": 2, "social_shares": 0}
    assert len(data["recent_reviews"]) == 4
    assert data["recent_reviews"][0]["rating"] == 1


def test_stats_recent_reviews_limited_to_five(client, account, headers):
    for i in range(7):
        add_review(account["business"]["id"], minutes=i)
    data = client.get('/api/dashboard/stats', headers=headers).get_json()
    assert len(data["recent_reviews"]) == 5
    assert data["stats"]["total_reviews"] == 7


def test_stats_without_reviews(client, headers):
    data = client.get('/api/dashboard/stats', headers=headers).get_json()
    assert data["stats"] == {"total_reviews": 0, "avg_rating": 0, "pending_reviews": 0, "social_shares": 0}


def test_social_shares_sum_only_own_cards(client, account, headers):
    own = add_review(account["business"]["id"], status="approved")
    other_account = signup(client, email="other@acme.test", business_name="Other Cafe")
    foreign = add_review(other_account["business"]["id"], status="approved")
    db.session.add_all([
        SocialCard(review_id=own.id, card_url=None, platform="instagram", shared_count=2),
        SocialCard(review_id=own.id, card_url=None, platform="twitter", shared_count=1),
        SocialCard(review_id=foreign.id, card_url=None, platform="instagram", shared_count=7),
    ])
    db.session.commit()

    data = client.get('/api/dashboard/stats', headers=headers).get_json()
    assert data["stats"]["social_shares"] == 3

    other = client.get('/api/dashboard/stats', headers=auth_headers(other_account)).get_json()
    assert other["stats"]["social_shares"] == 7


def test_get_settings(client, account, headers):
    data = client.get('/api/settings', headers=headers).get_json()
    assert data["business"]["widget_id"] == account["business"]["widget_id"]


def test_update_settings(client, account, headers):
    response = client.put('/api/settings', headers=headers, json={
        "business_name": "Acme Roasters",
        "business_url": "https://roasters.test",
        "logo_url": "https://cdn.test/logo.png"
    })

    assert response.status_code == 200
    business = db.session.get(Business, account["business"]["id"])
    assert business.business_name == "Acme Roasters"
    assert business.logo_url == "https://cdn.test/logo.png"


def test_empty_logo_url_clears_logo(client, account, headers):
    business = db.session.get(Business, account["business"]["id"])
    business.logo_url = "https://cdn.test/old.png"
    db.session.commit()

    client.put('/api/settings', headers=headers, json={
        "business_name": "Acme Coffee",
        "business_url": "https://acme.test",
        "logo_url": ""
    })

    assert db.session.get(Business, account["business"]["id"]).logo_url is None


def test_update_settings_validation(client, headers):
    response = client.put('/api/settings', headers=headers, json={"business_name": " "})
    assert response.status_code == 400


def test_logo_upload_overwrites_and_returns_url(client, account, headers, fake_s3):
    business_id = account["business"]["id"]
    fake_s3.objects[("business-logos", f"{business_id}/logo.png")] = b"old"

    response = client.post(
        '/api/settings/logo',
        headers=headers,
        data={"logo": (io.BytesIO(b"new-logo"), "brand.png")},
        content_type='multipart/form-data'
    )

    assert response.status_code == 200
    assert response.get_json()["logo_url"] == f"https://storage.test/business-logos/{business_id}/logo.png"
    assert fake_s3.objects[("business-logos", f"{business_id}/logo.png")] == b"new-logo"
    # Saved only by a following PUT /api/settings
    assert db.session.get(Business, business_id).logo_url is None


def test_logo_over_two_megabytes_is_rejected(client, headers, fake_s3):
    response = client.post(
        '/api/settings/logo',
        headers=headers,
        data={"logo": (io.BytesIO(b"0" * (2 * 1024 * 1024 + 1)), "brand.png")},
        content_type='multipart/form-data'
    )
    assert response.status_code == 413
    assert fake_s3.calls == 0


def test_billing_lists_plans(client, headers):
    data = client.get('/api/billing', headers=headers).get_json()
    assert data["plan"] == "free"
    assert [p["key"] for p in data["plans"]] == ["free", "pro", "enterprise"]
    assert [p["current"] for p in data["plans"]] == [True, False, False]


def test_change_plan_updates_field_directly(client, account, headers):
    response = client.put('/api/billing/plan', headers=headers, json={"plan": "pro"})

    assert response.status_code == 200
    assert response.get_json()["payment_processing"] == "placeholder"
    assert db.session.get(Business, account["business"]["id"]).plan == "pro"


def test_change_plan_rejects_unknown_plan(client, account, headers):
    response = client.put('/api/billing/plan', headers=headers, json={"plan": "platinum"})
    assert response.status_code == 400
    assert db.session.get(Business, account["business"]["id"]).plan == "free"
