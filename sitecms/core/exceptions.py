class SiteCMSError(Exception):
    """Base exception for the CMS application."""

    pass


class NotFoundError(SiteCMSError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: object):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class FormValidationError(SiteCMSError):
    """Raised when submitted form values fail the form's field rules."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        fields = ", ".join(sorted(errors))
        super().__init__(f"Validation failed for: {fields}")


class EntityInUseError(SiteCMSError):
    """Raised when deleting an entity that other rows still reference."""

    def __init__(self, entity: str, usages: list[str]):
        self.entity = entity
        self.usages = usages
        super().__init__(f"{entity} is still in use by: {', '.join(usages)}")


class EmailNotConfiguredError(SiteCMSError):
    """Raised when SMTP is disabled or incomplete in site settings."""

    pass


class EmailDeliveryError(SiteCMSError):
    """Raised when the SMTP server rejects or drops a message."""

    pass


class SectionSourceError(SiteCMSError):
    """Raised when page sections cannot be fetched from their source."""

    pass


class StaleResponseError(SiteCMSError):
    """Raised when a newer load superseded the response being processed."""

    def __init__(self, sequence: int, latest: int):
        self.sequence = sequence
        self.latest = latest
        super().__init__(f"Response {sequence} superseded by request {latest}")
