"""Error taxonomy for the record store."""


class InternalStoreError(Exception):
    """Storage failure: transaction error, missing bucket or closed database."""


class RecordDecodeError(InternalStoreError):
    """A stored value could not be decoded, or a record could not be encoded."""


class RecordNotFoundError(LookupError):
    """No record exists for the requested phone number."""

    def __init__(self, key: str):
        super().__init__(f"Record not found: {key}")
        self.key = key
