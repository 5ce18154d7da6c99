from flask import jsonify


def success_response(data=None, message=None, status_code=200):
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status_code


def error_response(message, status_code):
    return jsonify({"success": False, "message": message}), status_code


