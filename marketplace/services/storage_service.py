import logging
import os
import uuid

from flask import current_app
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from marketplace.extensions import db
from marketplace.models.image import Image
from marketplace.utils.helpers import allowed_file, slugify

logger = logging.getLogger(__name__)


class StorageService:
    """Stores uploaded images under UPLOAD_FOLDER and records them as Image rows"""

    @staticmethod
    def _upload_folder() -> str:
        folder = os.path.abspath(current_app.config["UPLOAD_FOLDER"])
        os.makedirs(folder, exist_ok=True)
        return folder

    @staticmethod
    def validate_files(files) -> None:
        allowed = current_app.config["ALLOWED_IMAGE_EXTENSIONS"]
        for file in files:
            if not file or not file.filename:
                continue
            if not allowed_file(file.filename, allowed):
                raise ValueError(
                    f"File type not allowed: {file.filename}. "
                    f"Allowed types: {', '.join(sorted(allowed))}"
                )

    @staticmethod
    def save_file(file: FileStorage, prefix: str) -> str:
        """Write the file to disk and return its public URL"""
        StorageService.validate_files([file])
        stem, _, extension = secure_filename(file.filename).rpartition(".")
        filename = f"{slugify(prefix)}-{uuid.uuid4().hex[:12]}-{slugify(stem) or 'image'}.{extension.lower()}"
        file.save(os.path.join(StorageService._upload_folder(), filename))
        logger.info("Stored upload %s", filename)
        return f"/uploads/{filename}"

    @staticmethod
    def create_image(file: FileStorage, prefix: str, **owner) -> Image:
        image = Image(image_url=StorageService.save_file(file, prefix), **owner)
        db.session.add(image)
        return image

    @staticmethod
    def create_images(files, prefix: str, **owner) -> list:
        files = [file for file in files if file and file.filename]
        StorageService.validate_files(files)
        return [StorageService.create_image(file, prefix, **owner) for file in files]

    @staticmethod
    def remove_file(image_url: str) -> None:
        if not image_url or not image_url.startswith("/uploads/"):
            return
        path = os.path.join(StorageService._upload_folder(), image_url[len("/uploads/"):])
        if os.path.exists(path):
            os.remove(path)

    @staticmethod
    def remove_files(image_urls) -> None:
        """Remove stored files; call only once the rows are gone for good"""
        for image_url in image_urls:
            StorageService.remove_file(image_url)

    @staticmethod
    def delete_images(images) -> list:
        """Delete Image rows and return their URLs.

        Files stay on disk until the caller commits and passes the URLs to
        ``remove_files``, so a rolled back delete keeps working links.
        """
        urls = []
        for image in list(images):
            urls.append(image.image_url)
            db.session.delete(image)
        return urls
