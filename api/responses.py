"""Uniform response envelope for every endpoint."""
from flask import jsonify


def api_response(data=None, message: str = "Success", status: int = 200):
    payload = {
        "statusCode": status,
        "data": data,
        "message": message,
        "success": status < 400,
    }
    return jsonify(payload), status


def error_response(message: str, status: int, errors: list | None = None):
    payload = {
        "statusCode": status,
        "data": None,
        "message": message,
        "success": False,
        "errors": errors or [],
    }
    return jsonify(payload), status
