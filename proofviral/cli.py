"""
Terminal preview of a business's widget.

Usage:
    flask --app run widget-preview <widget_id> [--seconds 30]
"""
import time

import click
from flask import current_app
from flask.cli import with_appcontext

from proofviral.services.social_card import star_glyphs
from proofviral.services.widget import Carousel, RotationTimer, load_widget


def format_review(review, index, count):
    text = review.review_text
    return (
        f"[{index + 1}/{count}] {star_glyphs(review.rating)}  {review.customer_name}\n"
        f"  \"{text}\""
    )


@click.command('widget-preview')
@click.argument('widget_id')
@click.option('--seconds', default=30, show_default=True, help='How long to keep rotating.')
@with_appcontext
def widget_preview(widget_id, seconds):
    """Rotate through the widget's reviews in the terminal."""
    business, reviews = load_widget(widget_id)
    if not business or not reviews:
        click.echo("No reviews yet")
        return

    click.echo(f"{business.business_name} - {len(reviews)} {'review' if len(reviews) == 1 else 'reviews'}")
    carousel = Carousel()
    click.echo(format_review(reviews[carousel.index], carousel.index, len(reviews)))

    def show(index):
        click.echo(format_review(reviews[index], index, len(reviews)))

    interval = current_app.config['WIDGET_ROTATION_MS']
    with RotationTimer(carousel, lambda: len(reviews), interval, on_tick=show):
        try:
            time.sleep(seconds)
        except KeyboardInterrupt:
            pass
    click.echo(f"Leave a review: {current_app.config['PUBLIC_APP_URL']}/review/{widget_id}")
