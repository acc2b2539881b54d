"""
Image rasterizer

Renders an HTML document of fixed pixel size into a PNG using headless
Chromium, at 2x device pixel density.
"""
import logging

from playwright.sync_api import sync_playwright, Error as PlaywrightError

logger = logging.getLogger(__name__)

DEVICE_SCALE_FACTOR = 2


class RasterizationError(Exception):
    """The browser could not render the document."""


def render_png(html, width, height):
    """
    Rasterize ``html`` into a ``width`` x ``height`` CSS-pixel PNG.

    Returns:
        bytes: PNG data, (2*width) x (2*height) physical pixels
    """
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            try:
                context = browser.new_context(
                    viewport={"width": width, "height": height},
                    device_scale_factor=DEVICE_SCALE_FACTOR
                )
                page = context.new_page()
                page.set_content(html, wait_until="networkidle")
                png = page.screenshot(
                    type="png",
                    clip={"x": 0, "y": 0, "width": width, "height": height},
                    omit_background=True
                )
            finally:
                browser.close()
    except PlaywrightError as e:
        logger.error(f"Rasterization failed: {e}")
        raise RasterizationError(str(e))

    logger.debug(f"Rendered {width}x{height} card ({len(png)} bytes)")
    return png
