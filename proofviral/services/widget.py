"""
Display widget: review selection, carousel rotation and embed snippet.

The widget shows up to WIDGET_REVIEW_LIMIT approved 5-star reviews, newest
first. Unknown tokens and businesses without qualifying reviews produce the
empty state, never an error.
"""
import logging
import threading

from flask import current_app
from markupsafe import escape

from proofviral.services import data_access

logger = logging.getLogger(__name__)


class Carousel:
    """
    Index into a list of ``count`` reviews with wraparound.

    The count is passed on every move so the index follows a review list that
    grows or shrinks between moves. With no reviews the index stays at 0.
    """

    def __init__(self, index=0):
        self.index = index
        self._lock = threading.Lock()

    def rebase(self, count):
        with self._lock:
            self.index = self.index % count if count > 0 else 0
            return self.index

    def next(self, count):
        with self._lock:
            self.index = (self.index + 1) % count if count > 0 else 0
            return self.index

    def previous(self, count):
        with self._lock:
            self.index = (self.index - 1 + count) % count if count > 0 else 0
            return self.index

    def tick(self, count):
        """Timer-driven advance."""
        return self.next(count)


class RotationTimer:
    """
    Repeating task that advances a Carousel every ``interval_ms``.

    ``count_fn`` is called at each tick for the current number of reviews.
    ``on_tick`` (optional) receives the new index. The timer runs only inside
    its ``with`` block:

        with RotationTimer(carousel, lambda: len(reviews), 5000, show):
            ...
    """

    def __init__(self, carousel, count_fn, interval_ms, on_tick=None):
        self.carousel = carousel
        self.count_fn = count_fn
        self.interval = interval_ms / 1000.0
        self.on_tick = on_tick
        self._stopped = threading.Event()
        self._thread = None

    def _run(self):
        while not self._stopped.wait(self.interval):
            index = self.carousel.tick(self.count_fn())
            if self.on_tick is not None:
                self.on_tick(index)

    def start(self):
        if self._thread is not None:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name='widget-rotation', daemon=True)
        self._thread.start()

    def cancel(self):
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    @property
    def running(self):
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cancel()
        return False


def review_page_url(widget_id):
    return f"{current_app.config['PUBLIC_APP_URL']}/review/{widget_id}"


def load_widget(widget_id):
    """
    Resolve the token and load the displayable reviews.

    Returns:
        tuple: (business or None, list of reviews)
    """
    try:
        business = data_access.get_business_by_widget_id(widget_id)
        if not business:
            logger.debug("Widget: unknown widget_id=%s", widget_id)
            return None, []
        reviews = data_access.list_widget_reviews(business.id, current_app.config['WIDGET_REVIEW_LIMIT'])
        return business, reviews
    except data_access.DataAccessError as e:
        logger.error("Widget: failed to load widget_id=%s: %s", widget_id, e)
        return None, []


def widget_payload(widget_id):
    """JSON-ready widget state for ``widget_id``."""
    business, reviews = load_widget(widget_id)
    count = len(reviews)
    return {
        "business": business.to_public_dict() if business else None,
        "reviews": [review.to_widget_dict() for review in reviews],
        "count": count,
        "average_rating": 5 if count else None,
        "current_index": Carousel().rebase(count),
        "show_controls": count > 1,
        "rotation_interval_ms": current_app.config['WIDGET_ROTATION_MS'],
        "review_page_url": review_page_url(widget_id),
        "empty": count == 0
    }


def embed_code(widget_id):
    """HTML snippet customers paste into their own site."""
    origin = current_app.config['PUBLIC_APP_URL']
    token = escape(widget_id)
    return (
        f'<!-- ProofViral Widget -->\n'
        f'<div id="proofviral-widget-{token}"></div>\n'
        f'<script>\n'
        f'  (function() {{\n'
        f"    var script = document.createElement('script');\n"
        f"    script.src = '{origin}/widget.js';\n"
        f"    script.setAttribute('data-widget-id', '{token}');\n"
        f'    document.body.appendChild(script);\n'
        f'  }})();\n'
        f'</script>'
    )
