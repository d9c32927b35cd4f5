from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class School:
    """A school record as served by the remote School API (read-only here)."""
    id: Any
    name: str
    address: str
    city: str
    state: str
    image: str
    contact: str
    email: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'School':
        def text(key, fallback=None):
            value = data.get(key)
            if value is None and fallback:
                value = data.get(fallback)
            return '' if value is None else str(value)

        return cls(
            id=data.get('id', data.get('_id')),
            name=text('name'),
            address=text('address'),
            city=text('city'),
            state=text('state'),
            image=text('image'),
            contact=text('contact'),
            email=text('email', 'email_id'),
        )

    def image_url(self, asset_base: str) -> Optional[str]:
        if not self.image:
            return None
        if self.image.startswith(('http://', 'https://')):
            return self.image
        return f"{asset_base.rstrip('/')}/{self.image.lstrip('/')}"


@dataclass(frozen=True)
class UploadedImage:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_file_storage(cls, storage) -> Optional['UploadedImage']:
        """Read a werkzeug FileStorage; returns None when no file was selected."""
        if storage is None or not storage.filename:
            return None
        return cls(
            filename=storage.filename,
            content_type=storage.mimetype or '',
            data=storage.read(),
        )


@dataclass(frozen=True)
class SchoolInput:
    """A validated school submission, ready to be sent to the API."""
    name: str
    address: str
    city: str
    state: str
    contact: str
    email_id: str
    image: UploadedImage

    def form_fields(self) -> dict:
        return {
            'name': self.name,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'contact': self.contact,
            'email_id': self.email_id,
        }
