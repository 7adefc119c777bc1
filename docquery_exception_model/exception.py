class DocumentNotFoundError(Exception):
    """
    Exception raised when an identity lookup yields no document.

    This exception is raised by EnumerableContext.id_criteria() when a single
    id resolves to no (or a blank) document, or when a collection of ids
    resolves to an empty result set.

    Attributes:
        ids -- the id or ids that were looked up
        collection -- name of the collection that was searched
        message -- explanation of the error
    """

    def __init__(self, message, ids=None, collection=None):
        self.ids = ids
        self.collection = collection
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        details = []
        if self.ids is not None:
            details.append(f"ids={self.ids}")
        if self.collection is not None:
            details.append(f"collection={self.collection}")

        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message


class InvalidQueryOptionsException(Exception):
    """
    Exception raised when query options or pagination extras cannot be validated.
    """

    def __init__(self, message, option=None, value=None):
        self.option = option
        self.value = value
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        details = []
        if self.option is not None:
            details.append(f"option={self.option}")
        if self.value is not None:
            details.append(f"value={self.value!r}")

        if details:
            return f"{self.message} ({', '.join(details)})"
        return self.message
