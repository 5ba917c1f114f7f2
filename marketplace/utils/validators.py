import json
import math
from functools import wraps

from flask import request, jsonify
from marshmallow import ValidationError


def validate_schema(schema_class):
    """Decorator to validate request data against schema"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            schema = schema_class()
            try:
                validated_data = schema.load(request.get_json(silent=True) or {})
                request.validated_data = validated_data
                return f(*args, **kwargs)
            except ValidationError as err:
                return jsonify({'error': 'Validation error', 'messages': err.messages}), 400
        return decorated_function
    return decorator


def validate_form(schema_class, json_fields=()):
    """Decorator to validate multipart form data (or a JSON body) against schema.

    Fields listed in ``json_fields`` arrive as JSON strings inside the form
    and are decoded before the schema runs.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if request.is_json:
                raw = dict(request.get_json(silent=True) or {})
            else:
                raw = request.form.to_dict()
            for field in json_fields:
                if field in raw and isinstance(raw[field], str):
                    try:
                        raw[field] = json.loads(raw[field])
                    except json.JSONDecodeError:
                        return jsonify({
                            'error': 'Validation error',
                            'messages': {field: [f'{field} must be valid JSON']},
                        }), 400
            schema = schema_class()
            try:
                request.validated_data = schema.load(raw)
            except ValidationError as err:
                return jsonify({'error': 'Validation error', 'messages': err.messages}), 400
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def require_files(*field_names):
    """Decorator rejecting multipart requests missing any of the given file fields"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            missing = [
                name for name in field_names
                if not [file for file in request.files.getlist(name) if file and file.filename]
            ]
            if missing:
                return jsonify({
                    'error': 'Validation error',
                    'messages': {name: ['At least one file is required.'] for name in missing},
                }), 400
            return f(*args, **kwargs)
        return decorated_function
    return decorator


def validate_pagination(default_limit=20, max_limit=100):
    """Validate pagination parameters"""
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)

    if page < 1:
        page = 1
    if limit < 1 or limit > max_limit:
        limit = default_limit

    return page, limit


def pagination_meta(total: int, page: int, limit: int) -> dict:
    return {
        'page': page,
        'limit': limit,
        'total': total,
        'pages': math.ceil(total / limit) if limit else 0,
    }


def parse_bool_arg(name: str):
    """Read an optional boolean query argument ("true"/"false")"""
    value = request.args.get(name)
    if value is None:
        return None
    return value.lower() in ('1', 'true', 'yes')


def parse_id(value):
    """Convert a path parameter to int; None when it is not a positive integer"""
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def path_id(name: str, label: str):
    """Decorator converting the ``name`` URL parameter to int, 400 when it is not one"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            value = parse_id(kwargs.get(name))
            if value is None:
                return jsonify({'error': f'Invalid {label} ID'}), 400
            kwargs[name] = value
            return f(*args, **kwargs)
        return decorated_function
    return decorator
