"""Compatibility endpoints."""
import azure.functions as func
import logging
import json

from showswap_compatibility_service.services import CompatibilityService

# Initialize blueprint
bp = func.Blueprint()

# Initialize service (singleton pattern)
compatibility_service = CompatibilityService()

logger = logging.getLogger(__name__)


def _json_response(body: dict, status_code: int = 200) -> func.HttpResponse:
    return func.HttpResponse(
        json.dumps(body, default=str),  # default=str handles datetime
        status_code=status_code,
        mimetype="application/json"
    )


@bp.route(route="users/{subject_id}/compatibility", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_user_compatibility(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get the viewer's compatibility with a user.

    Query Parameters:
        - viewer_id: User asking for the score (required)

    A missing score is not an error: the body carries a `reason`
    ("not_following" or "insufficient_overlap") instead.
    """
    try:
        subject_id = req.route_params.get('subject_id')
        viewer_id = req.params.get('viewer_id')

        if not subject_id:
            return _json_response({"error": "subject_id is required"}, status_code=400)

        if not viewer_id:
            return _json_response({"error": "viewer_id is required"}, status_code=400)

        result = compatibility_service.get_directional_compatibility(
            viewer_id=viewer_id,
            subject_id=subject_id
        )

        return _json_response(result)

    except Exception as e:
        logger.error(f"Error getting compatibility: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, status_code=500)


@bp.route(route="users/{subject_id}/compatibility/methods", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_compatibility_methods(req: func.HttpRequest) -> func.HttpResponse:
    """
    Compare every scoring method for the viewer and a user.

    Query Parameters:
        - viewer_id: User asking for the comparison (required)
    """
    try:
        subject_id = req.route_params.get('subject_id')
        viewer_id = req.params.get('viewer_id')

        if not subject_id or not viewer_id:
            return _json_response({"error": "subject_id and viewer_id are required"}, status_code=400)

        result = compatibility_service.compare_methods(viewer_id=viewer_id, subject_id=subject_id)

        if 'reason' in result:
            return _json_response(result, status_code=403)

        return _json_response(result)

    except Exception as e:
        logger.error(f"Error comparing compatibility methods: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, status_code=500)


@bp.route(route="users/{user_id}/compatible-friends", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
def get_compatible_friends(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get a user's most compatible friends from stored scores.

    Query Parameters:
        - n: Number of friends (default: 3, max: 50)
        - exclude: User ID to leave out of the list
    """
    try:
        user_id = req.route_params.get('user_id')

        if not user_id:
            return _json_response({"error": "user_id is required"}, status_code=400)

        try:
            n = int(req.params.get('n', 3))
        except ValueError:
            return _json_response({"error": "n must be an integer"}, status_code=400)

        if n < 1 or n > 50:
            return _json_response({"error": "n must be between 1 and 50"}, status_code=400)

        friends = compatibility_service.get_top_compatible(
            user_id=user_id,
            n=n,
            exclude_user_id=req.params.get('exclude')
        )

        return _json_response({
            "user_id": user_id,
            "count": len(friends),
            "compatible_friends": friends
        })

    except Exception as e:
        logger.error(f"Error getting compatible friends: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, status_code=500)


# noinspection PyUnusedLocal
@bp.route(route="compatibility/recalculate", methods=["POST"])
def recalculate_compatibility(req: func.HttpRequest) -> func.HttpResponse:
    """Recompute stored scores for every mutual follow pair."""
    try:
        stats = compatibility_service.recalculate_all()
        return _json_response({"success": True, "stats": stats})

    except Exception as e:
        logger.error(f"Error recalculating compatibility: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, status_code=500)


# noinspection PyUnusedLocal
@bp.route(route="compatibility/stats", methods=["GET"])
def get_compatibility_stats(req: func.HttpRequest) -> func.HttpResponse:
    """
    Get statistics about stored compatibility data.
    """
    try:
        stats = compatibility_service.get_stats()
        return _json_response(stats)

    except Exception as e:
        logger.error(f"Error getting stats: {str(e)}", exc_info=True)
        return _json_response({"error": "Internal server error"}, status_code=500)


# noinspection PyUnusedLocal
@bp.route(route="compatibility/health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint."""
    return _json_response({
        "status": "healthy",
        "service": "showswap-compatibility-service",
        "version": "1.0.0"
    })
