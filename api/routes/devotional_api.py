# routes/devotional_api.py
"""
API endpoints for the daily devotional.

Provides access to:
- Today's liturgical day and Mass readings
- Scripture lookup, keyword search and related passages
- The daily devotional reading and curated scripture collections
- Generated sacred art (JPEG)
- Saint of the day and saint search
"""

import io
import logging
from datetime import date

from flask import Blueprint, current_app, jsonify, request, send_file

from services.art import ScriptureContext
from services.devotional_service import DevotionalService
from utils.errors import (
    InvalidReference,
    invalid_field,
    missing_field,
    not_found,
    upstream_unavailable,
)

logger = logging.getLogger(__name__)

devotional_bp = Blueprint("devotional_api", __name__, url_prefix="/api/devotional")

EXTENSION_KEY = "devotional"


def get_service() -> DevotionalService:
    """The DevotionalService registered on the current app."""
    return current_app.extensions[EXTENSION_KEY]


def _parse_date(value):
    if not value:
        return None
    return date.fromisoformat(value)


def _jpeg_response(image):
    response = send_file(io.BytesIO(image.data), mimetype="image/jpeg",
                         download_name=f"{image.cache_key}.jpg")
    response.headers["X-Art-Cache"] = "hit" if image.cached else "miss"
    response.headers["X-Art-Placeholder"] = "true" if image.placeholder else "false"
    return response


# =============================================================================
# Liturgy
# =============================================================================

@devotional_bp.get("/today")
def todays_liturgy():
    """
    Today's liturgical day.

    Query params:
        date: ISO date to assemble instead of today (optional)

    Returns:
        {"liturgy": {...}, "saint": {...} | null, "stale": bool}
    """
    try:
        day = _parse_date(request.args.get("date"))
    except ValueError:
        return invalid_field("date", "Expected YYYY-MM-DD")

    service = get_service()
    liturgy = service.get_todays_liturgy(day)
    if liturgy is None:
        return upstream_unavailable(service.assembler.error)

    target = day or service.today()
    saint = service.todays_saint(target)
    return jsonify({
        "liturgy": liturgy.to_dict(),
        "saint": saint.to_dict() if saint else None,
        "stale": liturgy.date != target,
        "error": service.assembler.error,
    })


@devotional_bp.get("/readings")
def full_readings():
    """
    The day's readings with full scripture text where available.

    Query params:
        date: ISO date (optional, default today)
    """
    try:
        day = _parse_date(request.args.get("date"))
    except ValueError:
        return invalid_field("date", "Expected YYYY-MM-DD")

    readings = get_service().load_full_readings(day)
    return jsonify({"readings": [r.to_dict() for r in readings]})


# =============================================================================
# Scripture
# =============================================================================

@devotional_bp.get("/scripture")
def scripture_lookup():
    """
    Look up a scripture passage.

    Query params:
        ref: Reference string (required) e.g., "Matthew 25:14-30"

    Returns:
        Reading object
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_field("ref")

    try:
        result = get_service().get_scripture(ref)
    except InvalidReference as e:
        return invalid_field("ref", str(e))

    if not result.ok:
        return upstream_unavailable(str(result.failure))
    return jsonify(result.value.to_dict())


@devotional_bp.get("/search")
def scripture_search():
    """
    Keyword search. Best effort: an unavailable provider yields no results.

    Query params:
        q: Search query (required)
        limit: Maximum results (optional, default 10)
    """
    query = request.args.get("q")
    if not query:
        return missing_field("q")

    limit = request.args.get("limit", 10, type=int)
    readings = get_service().search_scripture(query, limit=limit)
    return jsonify({"query": query, "results": [r.to_dict() for r in readings]})


# =============================================================================
# Devotions
# =============================================================================

@devotional_bp.get("/daily")
def daily_reading():
    """
    The rotating devotional reading of the day.

    Query params:
        date: ISO date (optional, default today)
    """
    try:
        day = _parse_date(request.args.get("date"))
    except ValueError:
        return invalid_field("date", "Expected YYYY-MM-DD")

    return jsonify(get_service().daily_reading(day).to_dict())


@devotional_bp.get("/related")
def related_scripture():
    """
    Passages related to a reference: explicit relatives, then thematic hits.

    Query params:
        ref: Reference string (required)
        related: Comma-separated related references (optional)
        limit: Maximum thematic hits (optional, default 3)
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_field("ref")

    service = get_service()
    try:
        result = service.get_scripture(ref)
    except InvalidReference as e:
        return invalid_field("ref", str(e))
    if not result.ok:
        return upstream_unavailable(str(result.failure))

    extra = [r.strip() for r in request.args.get("related", "").split(",") if r.strip()]
    limit = request.args.get("limit", 3, type=int)
    related = service.related_scriptures(result.value, extra, limit=limit)
    return jsonify({"reference": result.value.title, "results": [r.to_dict() for r in related]})


@devotional_bp.get("/collections")
def list_collections():
    """
    Curated collections, without their scenes.

    Query params:
        featured: "true" for the home screen selection only (optional)
    """
    directory = get_service().collections
    if request.args.get("featured") == "true":
        collections = directory.featured()
    else:
        collections = directory.all_collections()
    return jsonify({"collections": [c.to_dict(include_scenes=False) for c in collections]})


@devotional_bp.get("/collections/<collection_id>")
def collection_detail(collection_id):
    collection = get_service().collections.get(collection_id)
    if collection is None:
        return not_found("collection")
    return jsonify(collection.to_dict())


@devotional_bp.get("/collections/<collection_id>/scenes/<scene_id>")
def collection_scene(collection_id, scene_id):
    """A scene with its scripture text."""
    service = get_service()
    scene = service.collections.find_scene(collection_id, scene_id)
    if scene is None:
        return not_found("scene")

    reading = service.scene_reading(scene)
    if reading is None:
        return upstream_unavailable(f"No scripture text for {scene.title}")

    payload = scene.to_dict()
    payload["reading"] = reading.to_dict()
    return jsonify(payload)


# =============================================================================
# Art
# =============================================================================

@devotional_bp.get("/art")
def scripture_art():
    """
    Generated artwork for a passage, as JPEG.

    Query params:
        ref: Reference string (required)
        context: narrative, psalm, parable, prophecy, epistle, gospel,
                 wisdom, apocalyptic or law (optional, detected otherwise)
    """
    ref = request.args.get("ref")
    if not ref:
        return missing_field("ref")

    context_tag = request.args.get("context")
    context = ScriptureContext.from_value(context_tag)
    if context_tag and context is None:
        return invalid_field("context", f"Unknown context: {context_tag}")

    try:
        image = get_service().generate_art(ref, context=context)
    except InvalidReference as e:
        return invalid_field("ref", str(e))

    return _jpeg_response(image)


# =============================================================================
# Saints
# =============================================================================

@devotional_bp.get("/saints/today")
def saint_of_the_day():
    """Saint whose feast falls today, if any."""
    try:
        day = _parse_date(request.args.get("date"))
    except ValueError:
        return invalid_field("date", "Expected YYYY-MM-DD")

    saint = get_service().todays_saint(day)
    if saint is None:
        return not_found("saint", "No saint in the directory for this day")

    title, body = saint.notification_content()
    payload = saint.to_dict()
    payload["notification"] = {"title": title, "body": body}
    return jsonify(payload)


@devotional_bp.get("/saints/search")
def saint_search():
    """
    Search saints by name, title, patronage or virtue.

    Query params:
        q: Search query (required)
    """
    query = request.args.get("q")
    if not query:
        return missing_field("q")

    saints = get_service().saints.search(query)
    return jsonify({"query": query, "results": [s.to_dict() for s in saints]})


@devotional_bp.get("/saints/<saint_id>/art")
def saint_art(saint_id):
    """Iconographic artwork for a saint, as JPEG."""
    service = get_service()
    saint = service.saints.get(saint_id)
    if saint is None:
        return not_found("saint")
    return _jpeg_response(service.generate_saint_art(saint))
