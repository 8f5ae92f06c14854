from flask import Flask, request, jsonify
from flask_cors import CORS
from chazarah_engine.errors import QueryError
from chazarah_engine.processor import (
    partition_from_dict,
    process_report_from_dict,
    validate_session_from_dict,
)
import os
import logging

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = Flask(__name__)

# Enable CORS for all routes (the mobile app calls the API directly)
CORS(app)


def _validation_failed(e: Exception):
    logger.error(f"Validation error: {str(e)}")
    return jsonify({
        "error": str(e),
        "status": "validation_failed"
    }), 400


@app.route("/api", methods=["GET"])
def api_info():
    """API information endpoint"""
    return jsonify({
        "status": "ok",
        "message": "Chazarah Obligation API",
        "version": "1.0",
        "endpoints": {
            "quarters": "/quarters [POST]",
            "partition": "/partition [POST]",
            "validate_session": "/validate_session [POST]",
            "health": "/health [GET]"
        }
    }), 200


@app.route("/health", methods=["GET"])
def health():
    """Health check for monitoring"""
    return jsonify({"status": "healthy"}), 200


@app.route("/quarters", methods=["POST"])
def quarters():
    """
    Build a user's quarter-by-quarter obligation report
    """
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        user_id = input_data.get("user_id", "Unknown")
        logger.info(f"Building obligation report for user: {user_id}")

        result = process_report_from_dict(input_data)

        logger.info(f"Obligation report built for user: {user_id}")

        return jsonify(result), 200

    except (ValueError, KeyError, TypeError) as e:
        return _validation_failed(e)

    except QueryError as e:
        logger.error(f"Record lookup failed: {str(e)}")
        return jsonify({
            "error": "Could not read sessions or payments",
            "status": "failed"
        }), 500

    except Exception as e:
        logger.error(f"Processing error: {str(e)}", exc_info=True)
        return jsonify({
            "error": "An unexpected error occurred during processing",
            "status": "failed"
        }), 500


@app.route("/partition", methods=["POST"])
def partition():
    """Quarter boundaries for a year"""
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        return jsonify(partition_from_dict(input_data)), 200

    except (ValueError, KeyError, TypeError) as e:
        return _validation_failed(e)


@app.route("/validate_session", methods=["POST"])
def validate_session():
    """Check that a session's start time falls within its year"""
    try:
        input_data = request.get_json(force=True, silent=True)

        if not input_data:
            return jsonify({
                "error": "No input data provided",
                "status": "failed"
            }), 400

        return jsonify(validate_session_from_dict(input_data)), 200

    except (ValueError, KeyError, TypeError) as e:
        return _validation_failed(e)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8080))
    app.run(host="0.0.0.0", port=port, debug=False)
