"""Uniform ``{"data": ..., "error": ...}`` JSON envelopes."""
from flask import jsonify


def ok(data=None, status=200):
    return jsonify({"data": data, "error": None}), status


def fail(error):
    return jsonify({"data": None, "error": error.message}), error.status_code


def respond(result, serialize=None, status=200):
    """Translate an ActionResult into a response."""
    if not result.ok:
        return fail(result.error)
    data = result.data
    if serialize is not None and data is not None:
        data = serialize(data)
    return ok(data, status)
