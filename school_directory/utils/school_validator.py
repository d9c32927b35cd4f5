import re
from typing import Any, Dict, Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from school_directory.models.school import SchoolInput, UploadedImage

MAX_IMAGE_SIZE = 5_000_000
ALLOWED_IMAGE_TYPES = ('image/jpeg', 'image/jpg', 'image/png', 'image/gif')

CONTACT_PATTERN = re.compile(r'[0-9]{10}')

FIELDS = ('name', 'address', 'city', 'state', 'contact', 'email_id', 'image')

IMAGE_REQUIRED_MESSAGE = 'School image is required'
IMAGE_TOO_LARGE_MESSAGE = 'File size should be less than 5MB'
IMAGE_TYPE_MESSAGE = 'Only .jpg, .jpeg, .png and .gif formats are supported'


class ValidationError(Exception):
    """Raised when a submission is built from data that fails validation."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__(', '.join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors


class SchoolValidator:
    """Per-field rules for a new school. The first failing rule of a field wins."""

    def __init__(self):
        # field -> (minimum length, required message, length message)
        self.text_rules = {
            'name': (3, 'School name is required', 'School name must be at least 3 characters'),
            'address': (10, 'Address is required', 'Address must be at least 10 characters'),
            'city': (2, 'City is required', 'City must be at least 2 characters'),
            'state': (2, 'State is required', 'State must be at least 2 characters'),
        }

    def check_text(self, field: str, value: str) -> Optional[str]:
        min_length, required_message, length_message = self.text_rules[field]
        if not value:
            return required_message
        if len(value) < min_length:
            return length_message
        return None

    def check_contact(self, value: str) -> Optional[str]:
        if not value:
            return 'Contact number is required'
        if not CONTACT_PATTERN.fullmatch(value):
            return 'Contact must be exactly 10 digits'
        return None

    def check_email(self, value: str) -> Optional[str]:
        if not value:
            return 'Email is required'
        try:
            email = validate_email(value, check_deliverability=False, allow_smtputf8=False)
        except EmailNotValidError:
            return 'Please enter a valid email address'
        # Top-level domain needs at least two characters
        if len(email.ascii_domain.rsplit('.', 1)[-1]) < 2:
            return 'Please enter a valid email address'
        return None

    def check_image(self, image: Optional[UploadedImage]) -> Optional[str]:
        if image is None:
            return IMAGE_REQUIRED_MESSAGE
        if image.size > MAX_IMAGE_SIZE:
            return IMAGE_TOO_LARGE_MESSAGE
        if image.content_type not in ALLOWED_IMAGE_TYPES:
            return IMAGE_TYPE_MESSAGE
        return None

    def validate_field(self, field: str, value: Any) -> Optional[str]:
        """Return the first violated rule's message for one field, or None."""
        if field in self.text_rules:
            return self.check_text(field, value or '')
        if field == 'contact':
            return self.check_contact(value or '')
        if field == 'email_id':
            return self.check_email(value or '')
        if field == 'image':
            return self.check_image(value)
        raise KeyError(f"Unknown school field: {field}")

    def validate(self, data: Mapping[str, Any]) -> Tuple[bool, Dict[str, str]]:
        """Validate every field and return (is_valid, errors)."""
        errors = {}
        for field in FIELDS:
            message = self.validate_field(field, data.get(field))
            if message:
                errors[field] = message
        return len(errors) == 0, errors

    def build_input(self, data: Mapping[str, Any]) -> SchoolInput:
        is_valid, errors = self.validate(data)
        if not is_valid:
            raise ValidationError(errors)
        return SchoolInput(
            name=data['name'],
            address=data['address'],
            city=data['city'],
            state=data['state'],
            contact=data['contact'],
            email_id=data['email_id'],
            image=data['image'],
        )
