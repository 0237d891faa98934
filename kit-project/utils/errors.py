# What it does: Defines the exceptions raised by the codecs, the object store and the ref store
# How it does: Every error derives from KitError so the command layer can catch one type. NotFound and DecodeError also derive from the matching builtins
# What data structure it uses: A small class hierarchy


class KitError(Exception):
    pass


class NotFound(KitError, FileNotFoundError):
    # A path, object or ref that does not exist. For refs this is the "no commits yet" state
    pass


class DecodeError(KitError, ValueError):
    # Bytes that could not be turned back into an object, an index or a ref
    pass


class UnknownType(DecodeError):
    pass


class InvalidEncoding(DecodeError):
    pass


class UnsupportedVersion(DecodeError):
    pass


class BadMagic(DecodeError):
    pass


class TruncatedData(DecodeError):
    pass


class UnsupportedFormat(DecodeError):
    # e.g. a detached HEAD
    pass
