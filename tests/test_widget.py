from proofviral.extensions import db

from tests.conftest import add_review, signup


def get_widget(client, widget_id):
    response = client.get(f'/api/widget/{widget_id}')
    assert response.status_code == 200
    return response.get_json()["widget"]


def test_only_approved_five_star_reviews_are_shown(client, account):
    business_id = account["business"]["id"]
    shown = add_review(business_id, rating=5, status="approved", minutes=1)
    add_review(business_id, rating=5, status="pending", minutes=2)
    add_review(business_id, rating=3, status="approved", minutes=3)

    widget = get_widget(client, account["business"]["widget_id"])

    assert widget["count"] == 1
    assert [r["id"] for r in widget["reviews"]] == [shown.id]
    assert widget["show_controls"] is False
    assert widget["current_index"] == 0


def test_rejected_and_lower_rated_reviews_never_shown(client, account):
    business_id = account["business"]["id"]
    add_review(business_id, rating=5, status="rejected")
    for rating in (1, 2, 3, 4):
        add_review(business_id, rating=rating, status="approved")

    widget = get_widget(client, account["business"]["widget_id"])

    assert widget["reviews"] == []
    assert widget["empty"] is True


def test_widget_shows_ten_newest_first(client, account):
    business_id = account["business"]["id"]
    reviews = [add_review(business_id, status="approved", minutes=i) for i in range(12)]

    widget = get_widget(client, account["business"]["widget_id"])

    expected = [r.id for r in sorted(reviews, key=lambda r: r.created_at, reverse=True)[:10]]
    assert [r["id"] for r in widget["reviews"]] == expected
    assert widget["show_controls"] is True
    assert widget["rotation_interval_ms"] == 5000


def test_widget_output_hides_customer_email(client, account):
    add_review(account["business"]["id"], status="approved")
    widget = get_widget(client, account["business"]["widget_id"])
    assert "customer_email" not in widget["reviews"][0]


def test_widget_does_not_mix_businesses(client, account):
    other = signup(client, email="other@shop.test", business_name="Other Shop")
    add_review(other["business"]["id"], status="approved")

    widget = get_widget(client, account["business"]["widget_id"])

    assert widget["count"] == 0


def test_unknown_token_renders_empty_state(client):
    widget = get_widget(client, "no-such-token")
    assert widget["business"] is None
    assert widget["reviews"] == []
    assert widget["empty"] is True
    assert widget["show_controls"] is False


def test_widget_cta_links_to_review_page(client, account):
    widget_id = account["business"]["widget_id"]
    widget = get_widget(client, widget_id)
    assert widget["review_page_url"] == f"http://testserver/review/{widget_id}"


def test_html_widget_single_review_has_no_controls(client, account):
    add_review(account["business"]["id"], status="approved", text="Absolutely wonderful")

    response = client.get(f'/widget/{account["business"]["widget_id"]}')
    html = response.get_data(as_text=True)

    assert response.status_code == 200
    assert "Absolutely wonderful" in html
    assert 'data-step="1"' not in html
    assert "Leave a Review" in html
    assert "1 review" in html


def test_html_widget_with_several_reviews_has_controls(client, account):
    add_review(account["business"]["id"], status="approved", minutes=1)
    add_review(account["business"]["id"], status="approved", minutes=2)

    html = client.get(f'/widget/{account["business"]["widget_id"]}').get_data(as_text=True)

    assert 'data-step="1"' in html
    assert 'data-step="-1"' in html
    assert 'data-rotation-ms="5000"' in html


def test_html_widget_unknown_token(client):
    response = client.get('/widget/no-such-token')
    assert response.status_code == 200
    assert "No reviews yet" in response.get_data(as_text=True)


def test_loader_script(client):
    response = client.get('/widget.js')
    assert response.status_code == 200
    assert response.mimetype == "application/javascript"
    script = response.get_data(as_text=True)
    assert "http://testserver/widget/" in script
    assert "data-widget-id" in script


def test_embed_code(client, account, headers):
    widget_id = account["business"]["widget_id"]

    response = client.get('/api/widget/embed-code', headers=headers)
    data = response.get_json()

    assert response.status_code == 200
    assert f'<div id="proofviral-widget-{widget_id}"></div>' in data["embed_code"]
    assert f"script.setAttribute('data-widget-id', '{widget_id}');" in data["embed_code"]
    assert "script.src = 'http://testserver/widget.js';" in data["embed_code"]
    assert data["review_page_url"] == f"http://testserver/review/{widget_id}"


def test_embed_code_requires_authentication(client):
    assert client.get('/api/widget/embed-code').status_code == 401
