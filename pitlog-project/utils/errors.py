# What it does: Defines the errors raised by the object store, the revision walk and the request handling code
# How it does: Each store error extends the builtin exception the store used to raise, so callers catching FileNotFoundError or TypeError keep working
# What data structure it uses: A small class hierarchy


class MissingObjectError(FileNotFoundError): # The object id is not in the object store
    pass


class IncorrectObjectTypeError(TypeError): # The object exists but has a different type than the caller asked for
    pass


class CorruptObjectError(ValueError): # The object could not be decompressed or parsed
    pass


class NotFoundError(LookupError):
    """
    Request input (a revision name, a range boundary or a pagination cursor)
    that does not resolve to exactly one object.
    """


class CursorNotFoundError(NotFoundError): # The cursor resolved, but the configured walk never reaches it
    pass


class WalkError(RuntimeError):
    """
    The object store failed while a revision walk was being drained.
    The original store error is kept as __cause__.
    """


# Object store failures; MissingObjectError is itself an OSError
STORE_ERRORS = (MissingObjectError, IncorrectObjectTypeError, CorruptObjectError, OSError)
