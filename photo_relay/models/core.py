"""Core models for multipart decoding and upload validation."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Part:
    """One delimited segment of a multipart body."""

    name: str | None
    filename: str | None
    content_type: str | None
    payload: bytes

    @property
    def is_file(self) -> bool:
        return self.filename is not None and self.content_type is not None

    @property
    def size(self) -> int:
        return len(self.payload)


@dataclass(slots=True)
class ParsedForm:
    """Decoded multipart form: plain fields by name plus file parts by name."""

    fields: dict[str, bytes] = field(default_factory=dict)
    files: dict[str, Part] = field(default_factory=dict)

    def add(self, part: Part) -> None:
        """Store a named part; a later part with the same name replaces the earlier one."""
        if part.name is None:
            return
        if part.is_file:
            self.files[part.name] = part
        else:
            self.fields[part.name] = part.payload

    def get_field(self, name: str, default: str | None = None) -> str | None:
        """Get a field value decoded as UTF-8."""
        value = self.fields.get(name)
        if value is None:
            return default
        return value.decode("utf-8", errors="replace")

    def get_file(self, name: str = "file") -> Part | None:
        """Get a file part by field name."""
        return self.files.get(name)


@dataclass(frozen=True, slots=True)
class ValidatedUpload:
    """A file accepted for storage along with the user it belongs to."""

    payload: bytes
    content_type: str
    filename: str
    user_id: str

    @property
    def size(self) -> int:
        return len(self.payload)
