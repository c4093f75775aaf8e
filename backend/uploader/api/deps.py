from fastapi import Request

from uploader.core.config import Settings
from uploader.services.storage import StorageGateway


def get_storage_gateway(request: Request) -> StorageGateway:
    return request.app.state.storage_gateway


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
