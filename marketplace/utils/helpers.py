import csv
import io
import uuid
from datetime import datetime, timezone

from flask import Response
from slugify import slugify as python_slugify


def slugify(text: str) -> str:
    """Generate URL-friendly slug"""
    return python_slugify(text)


def allowed_file(filename: str, allowed_extensions: set) -> bool:
    """Check if file extension is allowed"""
    return '.' in filename and \
           filename.rsplit('.', 1)[1].lower() in allowed_extensions


def generate_transaction_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_csv(headers: list, rows) -> str:
    """Render rows as CSV text (quotes are escaped by the csv module)"""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator='\n')
    writer.writerow(headers)
    for row in rows:
        writer.writerow(row)
    return buffer.getvalue()


def dated_filename(prefix: str, extension: str) -> str:
    return f"{prefix}-{utcnow().date().isoformat()}.{extension}"


def attachment(content, mimetype: str, filename: str) -> Response:
    """Download response for generated reports"""
    return Response(
        content,
        mimetype=mimetype,
        headers={'Content-Disposition': f'attachment; filename="{filename}"'},
    )
