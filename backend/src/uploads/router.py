import logging
from typing import List

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from src.auth.dependencies import AdminUserDep
from src.uploads.dependencies import UploadServiceDep
from src.uploads.exceptions import (
    UploadException,
    UploadedFileNotFoundException,
    FileStorageException,
)
from src.uploads.models import (
    UploadFilesResponse,
    UploadImagesResponse,
    DeleteImageRequest,
    DeleteFileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def handle_upload_service_errors(e: Exception):
    if isinstance(e, UploadedFileNotFoundException):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, FileStorageException):
        logger.error(f"[Upload API] Erreur de stockage: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)
    if isinstance(e, UploadException):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    logger.error(f"[Upload API] Unexpected error: {e}", exc_info=True)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error processing upload request.")


@router.post("", response_model=UploadFilesResponse)
async def upload_files(service: UploadServiceDep, admin_user: AdminUserDep, files: List[UploadFile] = File(...)):
    """Dépose des fichiers (images, pdf, texte, Word; 10 Mo max chacun)."""
    logger.info(f"[Upload API] {len(files)} fichier(s) envoyé(s) par admin {admin_user.id}")
    try:
        stored = await service.upload_files(files)
    except Exception as e:
        handle_upload_service_errors(e)
    return UploadFilesResponse(success=True, files=stored, message="Files uploaded successfully")


@router.post("/images", response_model=UploadImagesResponse)
async def upload_images(service: UploadServiceDep, admin_user: AdminUserDep, files: List[UploadFile] = File(...)):
    """Dépose des images produit (5 Mo max chacune) et retourne leurs URLs."""
    logger.info(f"[Upload API] {len(files)} image(s) envoyée(s) par admin {admin_user.id}")
    try:
        urls = await service.upload_images(files)
    except Exception as e:
        handle_upload_service_errors(e)
    return UploadImagesResponse(success=True, image_urls=urls, message="Images uploaded successfully")


@router.delete("/images", response_model=DeleteFileResponse)
async def delete_image(payload: DeleteImageRequest, service: UploadServiceDep, admin_user: AdminUserDep):
    try:
        await service.delete_image(payload.image_url)
    except Exception as e:
        handle_upload_service_errors(e)
    return DeleteFileResponse(success=True, message="Image deleted successfully")


@router.delete("/{filename}", response_model=DeleteFileResponse)
async def delete_file(filename: str, service: UploadServiceDep, admin_user: AdminUserDep):
    try:
        await service.delete_file(filename)
    except Exception as e:
        handle_upload_service_errors(e)
    return DeleteFileResponse(success=True, message="File deleted successfully")
