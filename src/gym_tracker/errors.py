"""Exception types for gym-tracker."""


class GymTrackerError(Exception):
    """Base class for every error raised by gym-tracker."""


class StoreError(GymTrackerError):
    """Raised when a record store operation fails."""


class NotFound(StoreError):
    """Raised when updating or referencing a record that does not exist."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"No record '{record_id}' in {collection}")
        self.collection = collection
        self.record_id = record_id


class DuplicateKey(StoreError):
    """Raised when inserting a record whose id is already taken."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"Record '{record_id}' already exists in {collection}")
        self.collection = collection
        self.record_id = record_id


class UnknownCollection(StoreError):
    """Raised for a collection name the store does not define."""


class UnknownIndex(StoreError):
    """Raised for an index name the collection does not declare."""


class StorageUnavailable(StoreError):
    """Raised when the underlying database cannot be opened or initialized."""


class ValidationError(GymTrackerError):
    """Raised when input data fails validation. Nothing is written."""


class BackupReadError(GymTrackerError):
    """Raised when a backup file cannot be read or decoded."""


class CascadeDeleteError(GymTrackerError):
    """Raised when some child workouts could not be removed before a parent delete."""

    def __init__(self, parent: str, parent_id: str, failed_ids: list[str]):
        super().__init__(
            f"Could not delete {len(failed_ids)} workout(s) of {parent} '{parent_id}'; "
            f"{parent} was kept"
        )
        self.parent = parent
        self.parent_id = parent_id
        self.failed_ids = failed_ids
