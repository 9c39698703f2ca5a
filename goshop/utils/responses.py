from flask import jsonify


def ok(data=None, message="success", status=200):
    payload = {"status": "success", "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), status


def error(message, status=400, code=None, field=None):
    payload = {
        "status": "error",
        "message": message,
        "code": code or status,
    }
    if field:
        payload["field"] = field
    return jsonify(payload), status


def no_content():
    return "", 204


def validation_error_response(errors):
    payload = {
        "status": "error",
        "message": "Invalid request body",
        "code": 422,
        "errors": errors,
    }
    return jsonify(payload), 422
