from staffing.storage import DataStore

from app.core.config import settings


def get_store() -> DataStore:
    """Load the datastore fresh for every request; figures are always recomputed."""
    return DataStore(settings.data_path)
