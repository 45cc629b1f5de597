# cropmarket/routes/_helpers.py

from flask import request


def request_data() -> dict:
    """JSON body if there is one, otherwise the submitted form fields."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()
