from typing import Optional


class GlimageError(Exception):
    """Root of every error raised by glimage."""


class ImageIOError(GlimageError):
    def __init__(self, path, error: OSError):
        self.path = path
        super().__init__(f"io error: {path}: {error}")


class MalformedPayload(GlimageError, ValueError):
    """Input is not syntactically valid JSON."""

    def __init__(self, message: str):
        super().__init__(f"malformed payload: {message}")


class SchemaInvalid(GlimageError, ValueError):
    """Valid JSON that does not match the expected shape."""

    layer = "document"

    def __init__(self, details: str, path: str = "$"):
        self.details = details
        self.path = path
        super().__init__(f"{self.layer} schema invalid at {path}: {details}")


class BaseSchemaInvalid(SchemaInvalid):
    """
    The payload violates the OCI image configuration.

    Both layers are parsed even when the base fails, so the outcome of the
    extension layer is attached: ``extension`` holds the parsed extension (or
    None when the payload has no extension fields) and ``extension_error`` the
    failure, if any.
    ``extension_checked`` is False when decoding skipped the extension layer.
    """

    layer = "base"

    def __init__(
        self,
        details: str,
        path: str = "$",
        extension=None,
        extension_error: Optional["ExtensionSchemaInvalid"] = None,
        extension_checked: bool = True,
    ):
        super().__init__(details, path)
        self.extension = extension
        self.extension_error = extension_error
        self.extension_checked = extension_checked

    @property
    def extension_parsed(self) -> Optional[bool]:
        """None when the extension layer was not decoded at all."""
        if not self.extension_checked:
            return None
        return self.extension_error is None


class ExtensionSchemaInvalid(SchemaInvalid):
    """A Docker extension field is present but ill-typed."""

    layer = "extension"


class UnencodableField(GlimageError, ValueError):
    def __init__(self, field: str, reason: str = "None value received"):
        self.field = field
        super().__init__(f"cannot encode field {field}: {reason}")


class UninitializedField(GlimageError, ValueError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"uninitialized field: {field}")


class DigestMismatch(GlimageError, ValueError):
    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Invalid checksum. {expected} != {actual}")
