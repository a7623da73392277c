from app.core.storage import MediaStorage, get_media_storage

def get_storage() -> MediaStorage:
    """
    Dependency for the configured media storage
    """
    return get_media_storage()
