class AuthClientsError(Exception):
    """Base Exception for all errors in authclients."""

    #: short-string error code
    error = None
    #: long-string to describe this error
    description = ""

    def __init__(self, error=None, description=None):
        if error is not None:
            self.error = error
        if description is not None:
            self.description = description

        message = f"{self.error}: {self.description}"
        super().__init__(message)

    def __repr__(self):
        return f'<{self.__class__.__name__} "{self.error}">'
