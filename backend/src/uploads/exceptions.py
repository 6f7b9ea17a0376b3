"""Exceptions personnalisées pour le module uploads."""


class UploadException(Exception):
    """Classe de base des erreurs d'upload."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

class NoFilesProvidedException(UploadException):
    def __init__(self, what: str = "files"):
        super().__init__(f"No {what} provided")

class FileTooLargeException(UploadException):
    def __init__(self, filename: str, max_size: int):
        self.filename = filename
        self.max_size = max_size
        super().__init__(f"File '{filename}' must be less than {max_size // (1024 * 1024)}MB")

class FileTypeNotAllowedException(UploadException):
    def __init__(self, filename: str, mimetype: str):
        self.filename = filename
        self.mimetype = mimetype
        super().__init__(f"File type not allowed: {mimetype} ({filename})")

class UploadedFileNotFoundException(UploadException):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("File not found in database")

class InvalidFileUrlException(UploadException):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid image URL: {url}")

class FileStorageException(UploadException):
    """Échec du backend de stockage (écriture ou suppression)."""
    pass
